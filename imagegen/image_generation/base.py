from __future__ import annotations

from abc import ABC
from typing import ClassVar, List, Optional, get_type_hints

from pydantic import BaseModel, Field

from imagegen.http import HttpClient
from imagegen.model import GenerateModel, ModelOutput, ModelParameters
from imagegen.platforms.base import PlatformSettings


class GeneratedImage(BaseModel):
    url: str
    revised_prompt: Optional[str] = Field(default=None, serialization_alias='revisedPrompt')


class ImageGenerationOutput(ModelOutput):
    images: List[GeneratedImage] = []


class ImageGenerationModel(GenerateModel[str, ImageGenerationOutput], ABC):
    model_task: ClassVar[str] = 'image_generation'
    model_type: ClassVar[str]


class RemoteImageGenerationModel(ImageGenerationModel):
    settings: PlatformSettings
    http_client: HttpClient

    def __init__(
        self,
        parameters: ModelParameters,
        settings: PlatformSettings,
        http_client: HttpClient,
    ) -> None:
        self.parameters = parameters
        self.settings = settings
        self.http_client = http_client

    @classmethod
    def how_to_settings(cls) -> str:
        return f'{cls.__name__} Settings\n\n' + get_type_hints(cls)['settings'].how_to_settings()


def to_data_uri(b64_data: str, mime_type: str = 'image/png') -> str:
    return f'data:{mime_type};base64,{b64_data}'
