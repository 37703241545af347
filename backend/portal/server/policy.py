"""Route policy helpers for fail-closed authorization.

Each helper wraps a route endpoint and sets the ``ROUTE_POLICY_ATTR`` marker
so that startup validation can verify every route has an explicit policy.
Both wrappers also form the error boundary: a ``PortfolioError`` becomes
``{"error": public_message}`` with its status, anything else becomes a
generic 500 after being logged.
"""

from __future__ import annotations

import functools
from http import HTTPStatus
from typing import TYPE_CHECKING

import structlog
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route

from shared.errors import PortfolioError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.routing import BaseRoute

    Endpoint = Callable[[Request], Awaitable[Response]]

logger = structlog.get_logger()

ROUTE_POLICY_ATTR = "__route_policy__"
INTERNAL_ERROR_MESSAGE = "Internal server error"


def error_response(exc: PortfolioError) -> JSONResponse:
    return JSONResponse({"error": exc.public_message}, status_code=exc.status_code)


def _with_error_boundary(endpoint: Endpoint) -> Endpoint:
    @functools.wraps(endpoint)
    async def wrapper(request: Request) -> Response:
        try:
            return await endpoint(request)
        except PortfolioError as e:
            logger.info(
                "request rejected",
                path=request.url.path,
                error=type(e).__name__,
                status=int(e.status_code),
            )
            return error_response(e)
        except Exception:
            logger.exception("unhandled error", path=request.url.path)
            return JSONResponse({"error": INTERNAL_ERROR_MESSAGE}, status_code=HTTPStatus.INTERNAL_SERVER_ERROR)

    return wrapper


def admin_function(endpoint: Endpoint) -> Endpoint:
    """Mark endpoint as a privileged function.

    There is no session middleware: the handler authorizes the credentials in
    the request body on every call. The marker records that it must.
    """
    wrapped = _with_error_boundary(endpoint)
    setattr(wrapped, ROUTE_POLICY_ATTR, "admin_function")
    return wrapped


def public_route(endpoint: Endpoint) -> Endpoint:
    """Mark endpoint as explicitly public (no credentials required).

    Returns a thin wrapper so the marker lives on the wrapper, not on the
    original callable.
    """
    wrapped = _with_error_boundary(endpoint)
    setattr(wrapped, ROUTE_POLICY_ATTR, "public")
    return wrapped


def validate_route_policy(routes: list[BaseRoute]) -> None:
    """Verify every Route has a policy marker. Mount routes are exempt.

    Raises RuntimeError listing all unclassified routes if any are found.
    """
    unclassified: list[str] = []
    for route in routes:
        if isinstance(route, Mount):
            continue
        if isinstance(route, Route) and not hasattr(route.endpoint, ROUTE_POLICY_ATTR):
            name = route.name or getattr(route.endpoint, "__name__", "unknown")
            unclassified.append(f"{route.path} ({name})")

    if unclassified:
        details = ", ".join(unclassified)
        msg = f"Unclassified routes missing policy: {details}"
        raise RuntimeError(msg)
