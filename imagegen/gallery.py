from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from imagegen.exceptions import ImageGenerationError
from imagegen.image_generation.base import GeneratedImage

logger = logging.getLogger(__name__)

GALLERY_KEY = 'generated-images'


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GalleryEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    url: str
    prompt: str
    created_at: datetime = Field(default_factory=_utc_now, alias='createdAt')


GalleryEntries = TypeAdapter(List[GalleryEntry])


class GalleryError(ImageGenerationError):
    def __init__(self, path: Path, *args: object) -> None:
        message = f'Gallery file {path} is not valid JSON'
        super().__init__(message, *args)
        self.path = path


class GalleryStore:
    """
    Client side store of generated images, kept in a JSON file.

    The file holds one object with the list of entries under `generated-images`.
    A file holding a bare list of entries is read as well, the next write rewraps it.
    Nothing here is shared with the server, removing the file loses the gallery.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def list(self) -> List[GalleryEntry]:
        if not self.path.exists():
            return []
        text = self.path.read_text(encoding='utf-8')
        if not text.strip():
            return []
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise GalleryError(self.path) from e
        if isinstance(data, dict):
            data = data.get(GALLERY_KEY) or []
        return GalleryEntries.validate_python(data)

    def append(self, entry: GalleryEntry) -> GalleryEntry:
        self.extend([entry])
        return entry

    def extend(self, entries: Iterable[GalleryEntry]) -> None:
        self._write([*self.list(), *entries])

    def add_images(self, images: Iterable[GeneratedImage], prompt: str) -> List[GalleryEntry]:
        entries = [GalleryEntry(url=image.url, prompt=prompt) for image in images]
        self.extend(entries)
        logger.debug(f'Added {len(entries)} image(s) to gallery {self.path}')
        return entries

    def clear(self) -> None:
        self._write([])

    def _write(self, entries: List[GalleryEntry]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {GALLERY_KEY: GalleryEntries.dump_python(entries, mode='json', by_alias=True)}
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding='utf-8')

    def __len__(self) -> int:
        return len(self.list())
