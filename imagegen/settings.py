from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal['DEBUG', 'INFO', 'WARNING', 'ERROR']


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(extra='ignore', env_prefix='imagegen_', env_file='.env')

    host: str = '127.0.0.1'
    port: int = Field(default=8000, ge=1, le=65535)
    log_level: LogLevel = 'INFO'
    gallery_path: Path = Path.home() / '.imagegen' / 'gallery.json'
    request_timeout: int = Field(default=120, ge=1)
