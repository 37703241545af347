"""Public read endpoints for the portfolio site."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.responses import JSONResponse

from portal.content.public import VERSE_PLACEMENTS
from shared.build_info import APP_VERSION, GIT_COMMIT
from shared.errors import ValidationError

if TYPE_CHECKING:
    from starlette.requests import Request

    from portal.content.public import PublicContentService


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok", "version": APP_VERSION, "commit": GIT_COMMIT})


async def public_collection(request: Request) -> JSONResponse:
    """GET /api/public/{collection} - published records of a public collection."""
    content: PublicContentService = request.app.state.public_content
    records = await content.list_published(request.path_params["collection"])
    return JSONResponse({"data": records})


async def site_settings(request: Request) -> JSONResponse:
    content: PublicContentService = request.app.state.public_content
    return JSONResponse({"data": await content.site_settings()})


async def verse_of_the_day(request: Request) -> JSONResponse:
    """GET /api/public/verse-of-the-day?placement=homepage|footer"""
    placement = request.query_params.get("placement", "homepage")
    if placement not in VERSE_PLACEMENTS:
        raise ValidationError("Invalid placement")
    content: PublicContentService = request.app.state.public_content
    return JSONResponse({"verse": await content.verse_of_the_day(placement)})
