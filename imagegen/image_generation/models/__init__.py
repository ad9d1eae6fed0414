from imagegen.image_generation.models.gemini import GeminiImageGeneration, GeminiImageGenerationParameters
from imagegen.image_generation.models.openai import OpenAIImageGeneration, OpenAIImageGenerationParameters
from imagegen.image_generation.models.stability import StabilityImageGeneration, StabilityImageGenerationParameters
from imagegen.image_generation.models.test import FakeImageGeneration, FakeImageGenerationParameters

__all__ = [
    'OpenAIImageGeneration',
    'OpenAIImageGenerationParameters',
    'StabilityImageGeneration',
    'StabilityImageGenerationParameters',
    'GeminiImageGeneration',
    'GeminiImageGenerationParameters',
    'FakeImageGeneration',
    'FakeImageGenerationParameters',
]
