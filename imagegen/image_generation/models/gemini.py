from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional

import httpx
from httpx import Response
from pydantic import Field
from typing_extensions import Annotated, Unpack, override

from imagegen.exceptions import UpstreamError
from imagegen.http import HttpClient, HttpxPostKwargs
from imagegen.image_generation.base import (
    GeneratedImage,
    ImageGenerationOutput,
    RemoteImageGenerationModel,
    to_data_uri,
)
from imagegen.model import ModelParameters, ModelParametersDict
from imagegen.platforms.gemini import GeminiSettings

logger = logging.getLogger(__name__)

NO_IMAGE_ERROR_MESSAGE = 'Failed to generate image'


class GeminiImageGenerationParameters(ModelParameters):
    n: Annotated[int, Field(ge=1)] = 1
    temperature: Optional[Annotated[float, Field(ge=0, le=2)]] = None


class GeminiImageGenerationParametersDict(ModelParametersDict, total=False):
    n: int
    temperature: Optional[float]


class GeminiImageGeneration(RemoteImageGenerationModel):
    """
    Image generation through the Gemini `generateContent` endpoint.

    The endpoint returns at most one image per call, so `n` images cost `n` calls.
    Negative prompts are appended to the instruction text since Gemini has no native field for them.
    """

    model_type = 'gemini'

    parameters: GeminiImageGenerationParameters
    settings: GeminiSettings

    def __init__(
        self,
        parameters: GeminiImageGenerationParameters | None = None,
        settings: GeminiSettings | None = None,
        http_client: HttpClient | None = None,
    ) -> None:
        parameters = parameters or GeminiImageGenerationParameters()
        settings = settings or GeminiSettings()  # type: ignore
        http_client = http_client or HttpClient()
        super().__init__(parameters=parameters, settings=settings, http_client=http_client)

    def _get_request_parameters(
        self, prompt: str, negative_prompt: str | None, parameters: GeminiImageGenerationParameters
    ) -> HttpxPostKwargs:
        api_key = self.settings.require_api_key()
        text = f'{prompt}. Avoid: {negative_prompt}' if negative_prompt else prompt
        generation_config: dict[str, Any] = {'responseModalities': ['TEXT', 'IMAGE']}
        if parameters.temperature is not None:
            generation_config['temperature'] = parameters.temperature
        return {
            'url': f'{self.settings.api_base}models/{self.settings.image_model}:generateContent',
            'json': {
                'contents': [{'parts': [{'text': text}]}],
                'generationConfig': generation_config,
            },
            'headers': {
                'Content-Type': 'application/json',
                'x-goog-api-key': api_key,
            },
        }

    @override
    def generate(
        self, prompt: str, negative_prompt: str | None = None, **kwargs: Unpack[GeminiImageGenerationParametersDict]
    ) -> ImageGenerationOutput:
        parameters = self.parameters.clone_with_changes(**kwargs)
        request_parameters = self._get_request_parameters(prompt, negative_prompt, parameters)
        images: List[GeneratedImage] = []
        for _ in range(parameters.n):
            try:
                response = self.http_client.post(request_parameters=request_parameters)
            except httpx.HTTPStatusError as e:
                raise self._upstream_error(e.response) from e
            images.append(self._parse_image(response))
        return ImageGenerationOutput(model_info=self.model_info, images=images)

    @override
    async def async_generate(
        self, prompt: str, negative_prompt: str | None = None, **kwargs: Unpack[GeminiImageGenerationParametersDict]
    ) -> ImageGenerationOutput:
        parameters = self.parameters.clone_with_changes(**kwargs)
        request_parameters = self._get_request_parameters(prompt, negative_prompt, parameters)
        results = await asyncio.gather(
            *(self.http_client.async_post(request_parameters=request_parameters) for _ in range(parameters.n)),
            return_exceptions=True,
        )
        responses: List[Response] = []
        for result in results:
            if isinstance(result, httpx.HTTPStatusError):
                raise self._upstream_error(result.response) from result
            if isinstance(result, BaseException):
                raise result
            responses.append(result)
        return ImageGenerationOutput(model_info=self.model_info, images=[self._parse_image(i) for i in responses])

    def _upstream_error(self, response: Response) -> UpstreamError:
        try:
            message = response.json()['error']['message']
        except (ValueError, KeyError, TypeError):
            message = None
        logger.warning(f'Gemini returned {response.status_code}: {message}')
        return UpstreamError(message or NO_IMAGE_ERROR_MESSAGE)

    def _parse_image(self, response: Response) -> GeneratedImage:
        candidates = response.json().get('candidates') or []
        if not candidates:
            raise UpstreamError(NO_IMAGE_ERROR_MESSAGE)
        parts = (candidates[0].get('content') or {}).get('parts') or []
        for part in parts:
            inline_data = part.get('inlineData') or part.get('inline_data')
            if inline_data and inline_data.get('data'):
                mime_type = inline_data.get('mimeType') or inline_data.get('mime_type') or 'image/png'
                return GeneratedImage(url=to_data_uri(inline_data['data'], mime_type))
        raise UpstreamError(NO_IMAGE_ERROR_MESSAGE)

    @property
    @override
    def name(self) -> str:
        return self.settings.image_model
