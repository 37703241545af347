"""Privileged function endpoints: data proxy and content generation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.responses import JSONResponse

from portal.views.common import read_json_body

if TYPE_CHECKING:
    from starlette.requests import Request

    from portal.proxy.service import DataProxy
    from writer.service import ImageGenerationService, TextGenerationService


async def admin_data(request: Request) -> JSONResponse:
    """POST /functions/v1/admin-data - one CRUD action against one collection."""
    proxy: DataProxy = request.app.state.data_proxy
    data = await proxy.execute(await read_json_body(request))
    return JSONResponse({"data": data})


async def ai_writer(request: Request) -> JSONResponse:
    """POST /functions/v1/ai-writer - generate portfolio copy for one action."""
    service: TextGenerationService = request.app.state.text_service
    text = await service.generate(await read_json_body(request))
    return JSONResponse({"text": text})


async def ai_image(request: Request) -> JSONResponse:
    """POST /functions/v1/ai-image - generate, store, and link a thumbnail."""
    service: ImageGenerationService = request.app.state.image_service
    url = await service.generate(await read_json_body(request))
    return JSONResponse({"url": url})
