from imagegen.platforms.base import PlatformSettings
from imagegen.platforms.gemini import GeminiSettings
from imagegen.platforms.openai import OpenAISettings
from imagegen.platforms.stability import StabilitySettings

__all__ = [
    'GeminiSettings',
    'OpenAISettings',
    'PlatformSettings',
    'StabilitySettings',
]
