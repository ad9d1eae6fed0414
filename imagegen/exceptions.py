from __future__ import annotations

from typing import Any, Sequence


class ImageGenerationError(Exception):
    ...


class ConfigurationError(ImageGenerationError):
    def __init__(self, platform: str, *args: object) -> None:
        message = f'{platform} API key not configured'
        super().__init__(message, *args)
        self.platform = platform


class ModelNotSupportedError(ImageGenerationError):
    def __init__(self, model: Any, supported_models: Sequence[str], *args: object) -> None:
        message = 'This model is not implemented yet'
        super().__init__(message, *args)
        self.model = model
        self.supported_models = tuple(supported_models)


class UpstreamError(ImageGenerationError):
    ...
