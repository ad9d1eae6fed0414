from __future__ import annotations

import logging
from typing import Literal, Optional

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
from imagegen.platforms.openai import OpenAISettings

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = 'Failed to generate images with DALL-E'


class OpenAIImageGenerationParameters(ModelParameters):
    quality: Optional[Literal['hd', 'standard']] = 'standard'
    response_format: Optional[Literal['url', 'b64_json']] = None
    size: Optional[Literal['256x256', '512x512', '1024x1024', '1792x1024', '1024x1792']] = '1024x1024'
    style: Optional[Literal['vivid', 'natural']] = 'natural'
    n: Optional[Annotated[int, Field(ge=1)]] = 1
    user: Optional[str] = None


class OpenAIImageGenerationParametersDict(ModelParametersDict, total=False):
    quality: Optional[Literal['hd', 'standard']]
    response_format: Optional[Literal['url', 'b64_json']]
    size: Optional[Literal['256x256', '512x512', '1024x1024', '1792x1024', '1024x1792']]
    style: Optional[Literal['vivid', 'natural']]
    n: Optional[int]
    user: Optional[str]


def combine_prompt(prompt: str, negative_prompt: str | None = None) -> str:
    if negative_prompt:
        return f'{prompt}. Avoid: {negative_prompt}'
    return prompt


class OpenAIImageGeneration(RemoteImageGenerationModel):
    """DALL-E has no negative prompt, so it is folded into the prompt text."""

    model_type = 'openai'

    parameters: OpenAIImageGenerationParameters
    settings: OpenAISettings

    def __init__(
        self,
        model: str = 'dall-e-3',
        parameters: OpenAIImageGenerationParameters | None = None,
        settings: OpenAISettings | None = None,
        http_client: HttpClient | None = None,
    ) -> None:
        parameters = parameters or OpenAIImageGenerationParameters()
        settings = settings or OpenAISettings()  # type: ignore
        http_client = http_client or HttpClient()
        super().__init__(parameters=parameters, settings=settings, http_client=http_client)

        self.model = model

    def _get_request_parameters(self, prompt: str, parameters: OpenAIImageGenerationParameters) -> HttpxPostKwargs:
        api_key = self.settings.require_api_key()
        headers = {
            'Content-Type': 'application/json',
            'Authorization': f'Bearer {api_key}',
        }
        json_data = {
            'model': self.model,
            'prompt': prompt,
            **parameters.custom_model_dump(),
        }
        return {
            'url': self.settings.api_base + 'images/generations',
            'json': json_data,
            'headers': headers,
        }

    @override
    def generate(
        self, prompt: str, negative_prompt: str | None = None, **kwargs: Unpack[OpenAIImageGenerationParametersDict]
    ) -> ImageGenerationOutput:
        parameters = self.parameters.clone_with_changes(**kwargs)
        request_parameters = self._get_request_parameters(combine_prompt(prompt, negative_prompt), parameters)
        try:
            response = self.http_client.post(request_parameters=request_parameters)
        except httpx.HTTPStatusError as e:
            raise self._upstream_error(e.response) from e
        return self._construct_model_output(response)

    @override
    async def async_generate(
        self, prompt: str, negative_prompt: str | None = None, **kwargs: Unpack[OpenAIImageGenerationParametersDict]
    ) -> ImageGenerationOutput:
        parameters = self.parameters.clone_with_changes(**kwargs)
        request_parameters = self._get_request_parameters(combine_prompt(prompt, negative_prompt), parameters)
        try:
            response = await self.http_client.async_post(request_parameters=request_parameters)
        except httpx.HTTPStatusError as e:
            raise self._upstream_error(e.response) from e
        return self._construct_model_output(response)

    def _upstream_error(self, response: Response) -> UpstreamError:
        try:
            message = response.json()['error']['message']
        except (ValueError, KeyError, TypeError):
            message = DEFAULT_ERROR_MESSAGE
        logger.warning(f'OpenAI returned {response.status_code}: {message}')
        return UpstreamError(message or DEFAULT_ERROR_MESSAGE)

    def _construct_model_output(self, response: Response) -> ImageGenerationOutput:
        response_data = response.json()
        generated_images: list[GeneratedImage] = []
        for image_data in response_data['data']:
            url = image_data.get('url')
            if not url:
                b64 = image_data.get('b64_json')
                if b64 is None:
                    raise UpstreamError('No URL or b64_json found in response')
                url = to_data_uri(b64)
            generated_images.append(GeneratedImage(url=url, revised_prompt=image_data.get('revised_prompt')))
        return ImageGenerationOutput(model_info=self.model_info, images=generated_images)

    @property
    @override
    def name(self) -> str:
        return self.model
