from __future__ import annotations

import contextlib
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.routing import Mount, Route
from starlette.staticfiles import StaticFiles

from portal.content.public import PublicContentService
from portal.proxy.service import DataProxy
from portal.server.middleware import SecurityHeadersMiddleware, SlashNormalizationMiddleware
from portal.server.policy import admin_function, public_route, validate_route_policy
from portal.server.settings import PortalSettings
from portal.views import (
    admin_auth,
    admin_data,
    ai_image,
    ai_writer,
    health,
    public_collection,
    site_settings,
    verse_of_the_day,
)
from shared.auth import AdminAuthService, AuthSettings, TokenRevocationList
from shared.db import Database, SqliteRecordRepository
from shared.logging import setup_logging
from shared.ratelimit import RateLimiter
from shared.storage import LocalAssetStorage
from writer.client import AIGatewayClient
from writer.service import ImageGenerationService, TextGenerationService
from writer.settings import AISettings

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    import httpx

# Headers the dashboard's function client sends, including its platform and runtime tags.
CORS_ALLOW_HEADERS = [
    "authorization",
    "x-client-info",
    "apikey",
    "content-type",
    "x-supabase-client-platform",
    "x-supabase-client-platform-version",
    "x-supabase-client-runtime",
    "x-supabase-client-runtime-version",
]


def create_app(
    settings: PortalSettings | None = None,
    auth_settings: AuthSettings | None = None,
    ai_settings: AISettings | None = None,
    *,
    ai_transport: httpx.AsyncBaseTransport | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = PortalSettings()
    if auth_settings is None:  # pragma: no cover
        auth_settings = AuthSettings()
    if ai_settings is None:  # pragma: no cover
        ai_settings = AISettings()

    if not auth_settings.is_configured:
        logger.warning("ADMIN_SECRET not configured, admin functions will answer 500")
    if not ai_settings.is_configured:
        logger.warning("AI_API_KEY not configured, content generation will answer 500")

    assets_dir = Path(settings.assets_dir).resolve()
    assets_dir.mkdir(parents=True, exist_ok=True)

    routes = [
        # Privileged functions: credentials in the body, checked on every call
        Route("/functions/v1/admin-auth", admin_function(admin_auth), methods=["POST"], name="admin_auth"),
        Route("/functions/v1/admin-data", admin_function(admin_data), methods=["POST"], name="admin_data"),
        Route("/functions/v1/ai-writer", admin_function(ai_writer), methods=["POST"], name="ai_writer"),
        Route("/functions/v1/ai-image", admin_function(ai_image), methods=["POST"], name="ai_image"),
        # Public routes
        Route("/health", public_route(health), methods=["GET"], name="health"),
        Route("/api/public/site-settings", public_route(site_settings), methods=["GET"], name="site_settings"),
        Route(
            "/api/public/verse-of-the-day",
            public_route(verse_of_the_day),
            methods=["GET"],
            name="verse_of_the_day",
        ),
        Route(
            "/api/public/{collection}",
            public_route(public_collection),
            methods=["GET"],
            name="public_collection",
        ),
        Mount("/assets", app=StaticFiles(directory=str(assets_dir)), name="assets"),
    ]

    validate_route_policy(routes)

    db = Database(settings.database_path)
    db.connect()
    db.seed_from_json(settings.seed_file)
    repository = SqliteRecordRepository(db)

    revocations = TokenRevocationList()
    auth_service = AdminAuthService(auth_settings, revocations)
    ai_client = AIGatewayClient(ai_settings, transport=ai_transport)
    storage = LocalAssetStorage(str(assets_dir), settings.assets_base_url)

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncGenerator[None]:  # pragma: no cover
        revocations.start_cleanup()
        yield
        await revocations.stop_cleanup()
        db.close()

    app = Starlette(routes=routes, lifespan=lifespan)
    app.add_middleware(SlashNormalizationMiddleware)  # type: ignore[arg-type]
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=CORS_ALLOW_HEADERS,
    )
    app.add_middleware(SecurityHeadersMiddleware)  # type: ignore[arg-type]

    app.state.db = db
    app.state.settings = settings
    app.state.auth_settings = auth_settings
    app.state.auth_service = auth_service
    app.state.data_proxy = DataProxy(auth_service, repository)
    app.state.public_content = PublicContentService(repository)
    app.state.text_service = TextGenerationService(
        auth_service,
        ai_client,
        RateLimiter(limit=ai_settings.text_rate_limit),
    )
    app.state.image_service = ImageGenerationService(
        auth_service,
        ai_client,
        RateLimiter(limit=ai_settings.image_rate_limit),
        storage,
    )

    logger.info("portal server ready", database=settings.database_path)
    return app


def get_app() -> Starlette:  # pragma: no cover  # deadcode: ignore
    """Factory function for uvicorn --factory portal.server.app:get_app."""
    s = PortalSettings()
    setup_logging(log_dir=s.log_dir)
    return create_app(settings=s, auth_settings=AuthSettings(), ai_settings=AISettings())
