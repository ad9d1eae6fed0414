from __future__ import annotations

from typing_extensions import Unpack

from imagegen.image_generation.base import GeneratedImage, ImageGenerationModel, ImageGenerationOutput
from imagegen.model import ModelParameters, ModelParametersDict


class FakeImageGenerationParameters(ModelParameters):
    n: int = 1
    url_prefix: str = 'https://images.example.com/'


class FakeImageGenerationParametersDict(ModelParametersDict, total=False):
    n: int
    url_prefix: str


class FakeImageGeneration(ImageGenerationModel):
    model_type = 'test'

    def __init__(self, parameters: FakeImageGenerationParameters | None = None) -> None:
        self.parameters = parameters or FakeImageGenerationParameters()
        self.calls: list[tuple[str, str | None]] = []

    def generate(
        self, prompt: str, negative_prompt: str | None = None, **kwargs: Unpack[FakeImageGenerationParametersDict]
    ) -> ImageGenerationOutput:
        self.calls.append((prompt, negative_prompt))
        parameters = self.parameters.clone_with_changes(**kwargs)
        images = [GeneratedImage(url=f'{parameters.url_prefix}{index}.png') for index in range(parameters.n)]
        return ImageGenerationOutput(model_info=self.model_info, images=images)

    async def async_generate(
        self, prompt: str, negative_prompt: str | None = None, **kwargs: Unpack[FakeImageGenerationParametersDict]
    ) -> ImageGenerationOutput:
        return self.generate(prompt, negative_prompt, **kwargs)

    @property
    def name(self) -> str:
        return 'Fake'
