from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from imagegen.adapter import GenerationFailure, GenerationRequest, ImageGenerationAdapter
from imagegen.http import HttpClient
from imagegen.settings import AppSettings

logger = logging.getLogger(__name__)

INVALID_REQUEST_MESSAGE = 'Invalid generation request'


def build_adapter(settings: AppSettings | None = None) -> ImageGenerationAdapter:
    settings = settings or AppSettings()
    return ImageGenerationAdapter.from_settings(http_client=HttpClient(timeout=settings.request_timeout))


def get_adapter(request: Request) -> ImageGenerationAdapter:
    return request.app.state.adapter


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f'Rejected request to {request.url.path}: {exc.errors()}')
    return JSONResponse(status_code=400, content={'error': INVALID_REQUEST_MESSAGE})


def create_app(adapter: ImageGenerationAdapter | None = None) -> FastAPI:
    """
    Build the HTTP application.

    Args:
        adapter (ImageGenerationAdapter | None, optional): The adapter requests are dispatched to.
            Defaults to an adapter built from environment settings.
    """
    app = FastAPI(title='imagegen', description='Text to image generation across vendors')
    app.state.adapter = adapter or build_adapter()
    app.add_exception_handler(RequestValidationError, handle_validation_error)  # type: ignore

    @app.post('/api/generate')
    async def generate(
        generation_request: GenerationRequest,
        adapter: ImageGenerationAdapter = Depends(get_adapter),
    ) -> JSONResponse:
        result = await adapter.async_generate(generation_request)
        if isinstance(result, GenerationFailure):
            return JSONResponse(status_code=result.status_code, content={'error': result.message})
        images = [image.model_dump(by_alias=True, exclude_none=True) for image in result.images]
        return JSONResponse(status_code=200, content={'images': images})

    @app.get('/api/models')
    async def list_models(adapter: ImageGenerationAdapter = Depends(get_adapter)) -> Dict[str, Any]:
        return {'models': adapter.model_ids}

    return app
