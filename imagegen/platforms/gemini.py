from pydantic_settings import SettingsConfigDict

from imagegen.platforms.base import PlatformSettings


class GeminiSettings(PlatformSettings):
    model_config = SettingsConfigDict(extra='ignore', env_prefix='gemini_', env_file='.env')

    api_base: str = 'https://generativelanguage.googleapis.com/v1beta/'
    image_model: str = 'gemini-2.0-flash-preview-image-generation'
    platform_url: str = 'https://ai.google.dev/gemini-api/docs'
