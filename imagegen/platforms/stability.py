from pydantic_settings import SettingsConfigDict

from imagegen.platforms.base import PlatformSettings


class StabilitySettings(PlatformSettings):
    model_config = SettingsConfigDict(extra='ignore', env_prefix='stability_', env_file='.env')

    api_host: str = 'https://api.stability.ai'
    engine_id: str = 'stable-diffusion-xl-1024-v1-0'
    platform_url: str = 'https://platform.stability.ai/docs'
