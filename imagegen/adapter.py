from __future__ import annotations

import logging
from enum import Enum
from typing import List, Literal, Mapping, Optional, Union, get_args

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Self

from imagegen.exceptions import ConfigurationError, ImageGenerationError, ModelNotSupportedError, UpstreamError
from imagegen.http import HttpClient
from imagegen.image_generation import (
    GeminiImageGeneration,
    GeneratedImage,
    ImageGenerationModel,
    ImageGenerationOutput,
    OpenAIImageGeneration,
    StabilityImageGeneration,
)
from imagegen.platforms import GeminiSettings, OpenAISettings, StabilitySettings

logger = logging.getLogger(__name__)

ModelId = Literal['dall-e-3', 'dall-e-2', 'stable-diffusion', 'gemini']
SUPPORTED_MODEL_IDS: tuple[str, ...] = get_args(ModelId)
GENERIC_ERROR_MESSAGE = 'Failed to generate images'


class GenerationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    prompt: str = Field(min_length=1)
    negative_prompt: Optional[str] = Field(default=None, alias='negativePrompt')
    num_images: int = Field(default=1, ge=1, alias='numImages')
    model: str


class ErrorKind(str, Enum):
    configuration = 'configuration'
    validation = 'validation'
    upstream = 'upstream'
    unexpected = 'unexpected'

    @property
    def status_code(self) -> int:
        if self is ErrorKind.validation:
            return 501
        return 500


class GenerationSuccess(BaseModel):
    images: List[GeneratedImage]


class GenerationFailure(BaseModel):
    kind: ErrorKind
    message: str

    @property
    def status_code(self) -> int:
        return self.kind.status_code


GenerationResult = Union[GenerationSuccess, GenerationFailure]


def error_kind_of(error: ImageGenerationError) -> ErrorKind:
    if isinstance(error, ConfigurationError):
        return ErrorKind.configuration
    if isinstance(error, ModelNotSupportedError):
        return ErrorKind.validation
    if isinstance(error, UpstreamError):
        return ErrorKind.upstream
    return ErrorKind.unexpected


class ImageGenerationAdapter:
    """
    Dispatches a generation request to the image generation model registered for its model id.

    Every failure is converted into a `GenerationFailure`, nothing raised by a vendor model escapes `generate`.

    Args:
        models (Mapping[str, ImageGenerationModel]): Image generation models keyed by model id.
    """

    def __init__(self, models: Mapping[str, ImageGenerationModel]) -> None:
        unknown_ids = set(models) - set(SUPPORTED_MODEL_IDS)
        if unknown_ids:
            raise ValueError(f'Unknown model ids: {sorted(unknown_ids)}, expected ids in {SUPPORTED_MODEL_IDS}')
        self.models = dict(models)

    @classmethod
    def from_settings(
        cls,
        openai_settings: OpenAISettings | None = None,
        stability_settings: StabilitySettings | None = None,
        gemini_settings: GeminiSettings | None = None,
        http_client: HttpClient | None = None,
    ) -> Self:
        http_client = http_client or HttpClient()
        openai_settings = openai_settings or OpenAISettings()  # type: ignore
        stability_settings = stability_settings or StabilitySettings()  # type: ignore
        gemini_settings = gemini_settings or GeminiSettings()  # type: ignore
        models: dict[str, ImageGenerationModel] = {
            'dall-e-3': OpenAIImageGeneration(model='dall-e-3', settings=openai_settings, http_client=http_client),
            'dall-e-2': OpenAIImageGeneration(model='dall-e-2', settings=openai_settings, http_client=http_client),
            'stable-diffusion': StabilityImageGeneration(settings=stability_settings, http_client=http_client),
            'gemini': GeminiImageGeneration(settings=gemini_settings, http_client=http_client),
        }
        return cls(models)

    @property
    def model_ids(self) -> List[str]:
        return [model_id for model_id in SUPPORTED_MODEL_IDS if model_id in self.models]

    def get_model(self, model_id: str) -> ImageGenerationModel:
        if model_id not in self.models:
            raise ModelNotSupportedError(model_id, self.model_ids)
        return self.models[model_id]

    def generate(self, request: GenerationRequest) -> GenerationResult:
        try:
            model = self.get_model(request.model)
            logger.info(f'Generating {request.num_images} image(s) with {request.model}')
            output = model.generate(request.prompt, negative_prompt=request.negative_prompt, n=request.num_images)
        except Exception as e:
            return self._to_failure(request, e)
        return self._to_success(output)

    async def async_generate(self, request: GenerationRequest) -> GenerationResult:
        try:
            model = self.get_model(request.model)
            logger.info(f'Generating {request.num_images} image(s) with {request.model}')
            output = await model.async_generate(request.prompt, negative_prompt=request.negative_prompt, n=request.num_images)
        except Exception as e:
            return self._to_failure(request, e)
        return self._to_success(output)

    def _to_success(self, output: ImageGenerationOutput) -> GenerationSuccess:
        return GenerationSuccess(images=output.images)

    def _to_failure(self, request: GenerationRequest, error: Exception) -> GenerationFailure:
        if isinstance(error, ImageGenerationError):
            kind = error_kind_of(error)
            logger.warning(f'Image generation with {request.model!r} failed ({kind.value}): {error}')
            return GenerationFailure(kind=kind, message=str(error))
        logger.exception('Error generating images', exc_info=error)
        return GenerationFailure(kind=ErrorKind.unexpected, message=GENERIC_ERROR_MESSAGE)
