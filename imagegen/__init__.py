from imagegen.adapter import (
    SUPPORTED_MODEL_IDS,
    ErrorKind,
    GenerationFailure,
    GenerationRequest,
    GenerationResult,
    GenerationSuccess,
    ImageGenerationAdapter,
    ModelId,
)
from imagegen.exceptions import ConfigurationError, ImageGenerationError, ModelNotSupportedError, UpstreamError
from imagegen.gallery import GalleryEntry, GalleryError, GalleryStore
from imagegen.http import HttpClient
from imagegen.image_generation import (
    GeminiImageGeneration,
    GeminiImageGenerationParameters,
    GeneratedImage,
    ImageGenerationModel,
    ImageGenerationOutput,
    OpenAIImageGeneration,
    OpenAIImageGenerationParameters,
    StabilityImageGeneration,
    StabilityImageGenerationParameters,
)
from imagegen.platforms import GeminiSettings, OpenAISettings, PlatformSettings, StabilitySettings

__version__ = '0.1.0'

__all__ = [
    'ImageGenerationAdapter',
    'GenerationRequest',
    'GenerationResult',
    'GenerationSuccess',
    'GenerationFailure',
    'ErrorKind',
    'ModelId',
    'SUPPORTED_MODEL_IDS',
    'ImageGenerationError',
    'ConfigurationError',
    'ModelNotSupportedError',
    'UpstreamError',
    'GalleryEntry',
    'GalleryError',
    'GalleryStore',
    'HttpClient',
    'GeneratedImage',
    'ImageGenerationModel',
    'ImageGenerationOutput',
    'OpenAIImageGeneration',
    'OpenAIImageGenerationParameters',
    'StabilityImageGeneration',
    'StabilityImageGenerationParameters',
    'GeminiImageGeneration',
    'GeminiImageGenerationParameters',
    'PlatformSettings',
    'OpenAISettings',
    'StabilitySettings',
    'GeminiSettings',
]
