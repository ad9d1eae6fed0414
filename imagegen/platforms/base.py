from __future__ import annotations

from typing import Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings

from imagegen.exceptions import ConfigurationError


class PlatformSettings(BaseSettings):
    platform_url: str
    api_key: Optional[SecretStr] = None

    @property
    def platform_name(self) -> str:
        return self.__class__.__name__.replace('Settings', '')

    def require_api_key(self) -> str:
        if self.api_key is None or not self.api_key.get_secret_value():
            raise ConfigurationError(self.platform_name)
        return self.api_key.get_secret_value()

    @classmethod
    def how_to_settings(cls) -> str:
        settings_fields = cls.model_fields
        platform_url = settings_fields['platform_url'].default
        prefix = cls.model_config.get('env_prefix', '')
        platform_name = cls.__name__.replace('Settings', '')
        keys = [(prefix + name).upper() for name in settings_fields if name != 'platform_url']
        return f"""# Platform
{platform_name}

# Environment Variables
{keys}

You can get more information from this link: {platform_url}

tips: You can also set these variables in the .env file, and imagegen will automatically load them."""
