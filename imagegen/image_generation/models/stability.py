from __future__ import annotations

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
from imagegen.platforms.stability import StabilitySettings

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = 'Failed to generate images with Stable Diffusion'


class StabilityImageGenerationParameters(ModelParameters):
    cfg_scale: Annotated[float, Field(ge=0, le=35)] = 7
    height: int = 1024
    width: int = 1024
    n: Annotated[int, Field(ge=1)] = 1
    steps: Annotated[int, Field(ge=10, le=50)] = 30
    style_preset: Optional[str] = 'photographic'
    seed: Optional[int] = None

    def custom_model_dump(self) -> dict[str, Any]:
        output_data = super().custom_model_dump()
        output_data['samples'] = output_data.pop('n')
        return output_data


class StabilityImageGenerationParametersDict(ModelParametersDict, total=False):
    cfg_scale: float
    height: int
    width: int
    n: int
    steps: int
    style_preset: Optional[str]
    seed: Optional[int]


def build_text_prompts(prompt: str, negative_prompt: str | None = None) -> List[dict[str, Any]]:
    text_prompts: List[dict[str, Any]] = [{'text': prompt, 'weight': 1}]
    if negative_prompt:
        text_prompts.append({'text': negative_prompt, 'weight': -1})
    return text_prompts


class StabilityImageGeneration(RemoteImageGenerationModel):
    model_type = 'stability'

    parameters: StabilityImageGenerationParameters
    settings: StabilitySettings

    def __init__(
        self,
        parameters: StabilityImageGenerationParameters | None = None,
        settings: StabilitySettings | None = None,
        http_client: HttpClient | None = None,
    ) -> None:
        parameters = parameters or StabilityImageGenerationParameters()
        settings = settings or StabilitySettings()  # type: ignore
        http_client = http_client or HttpClient()
        super().__init__(parameters=parameters, settings=settings, http_client=http_client)

    def _get_request_parameters(
        self, prompt: str, negative_prompt: str | None, parameters: StabilityImageGenerationParameters
    ) -> HttpxPostKwargs:
        api_key = self.settings.require_api_key()
        headers = {
            'Content-Type': 'application/json',
            'Accept': 'application/json',
            'Authorization': f'Bearer {api_key}',
        }
        json_data = {
            'text_prompts': build_text_prompts(prompt, negative_prompt),
            **parameters.custom_model_dump(),
        }
        return {
            'url': f'{self.settings.api_host}/v1/generation/{self.settings.engine_id}/text-to-image',
            'json': json_data,
            'headers': headers,
        }

    @override
    def generate(
        self, prompt: str, negative_prompt: str | None = None, **kwargs: Unpack[StabilityImageGenerationParametersDict]
    ) -> ImageGenerationOutput:
        parameters = self.parameters.clone_with_changes(**kwargs)
        request_parameters = self._get_request_parameters(prompt, negative_prompt, parameters)
        logger.info(f'Generating {parameters.n} image(s) with Stable Diffusion')
        try:
            response = self.http_client.post(request_parameters=request_parameters)
        except httpx.HTTPStatusError as e:
            raise self._upstream_error(e.response) from e
        return self._construct_model_output(response)

    @override
    async def async_generate(
        self, prompt: str, negative_prompt: str | None = None, **kwargs: Unpack[StabilityImageGenerationParametersDict]
    ) -> ImageGenerationOutput:
        parameters = self.parameters.clone_with_changes(**kwargs)
        request_parameters = self._get_request_parameters(prompt, negative_prompt, parameters)
        logger.info(f'Generating {parameters.n} image(s) with Stable Diffusion')
        try:
            response = await self.http_client.async_post(request_parameters=request_parameters)
        except httpx.HTTPStatusError as e:
            raise self._upstream_error(e.response) from e
        return self._construct_model_output(response)

    def _upstream_error(self, response: Response) -> UpstreamError:
        try:
            message = response.json().get('message')
        except (ValueError, AttributeError):
            message = None
        logger.warning(f'Stability returned {response.status_code}: {message}')
        return UpstreamError(message or DEFAULT_ERROR_MESSAGE)

    def _construct_model_output(self, response: Response) -> ImageGenerationOutput:
        artifacts = response.json()['artifacts']
        images = [GeneratedImage(url=to_data_uri(artifact['base64'], 'image/png')) for artifact in artifacts]
        return ImageGenerationOutput(model_info=self.model_info, images=images)

    @property
    @override
    def name(self) -> str:
        return self.settings.engine_id
