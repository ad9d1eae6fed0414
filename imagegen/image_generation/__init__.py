from imagegen.image_generation.base import (
    GeneratedImage,
    ImageGenerationModel,
    ImageGenerationOutput,
    RemoteImageGenerationModel,
)
from imagegen.image_generation.models import (
    FakeImageGeneration,
    FakeImageGenerationParameters,
    GeminiImageGeneration,
    GeminiImageGenerationParameters,
    OpenAIImageGeneration,
    OpenAIImageGenerationParameters,
    StabilityImageGeneration,
    StabilityImageGenerationParameters,
)

__all__ = [
    'ImageGenerationModel',
    'ImageGenerationOutput',
    'RemoteImageGenerationModel',
    'GeneratedImage',
    'OpenAIImageGeneration',
    'OpenAIImageGenerationParameters',
    'StabilityImageGeneration',
    'StabilityImageGenerationParameters',
    'GeminiImageGeneration',
    'GeminiImageGenerationParameters',
    'FakeImageGeneration',
    'FakeImageGenerationParameters',
]
