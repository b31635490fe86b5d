from __future__ import annotations

import io
import logging
from pathlib import Path

from PIL import Image as PILImage
from PIL import UnidentifiedImageError
from pydantic import BaseModel, ConfigDict
from typing_extensions import Self

from .errors import XlsxError
from .sync import ValueHandle

logger = logging.getLogger(__name__)

_SUPPORTED_FORMATS = frozenset({"PNG", "JPEG", "GIF", "BMP"})


class ImageSpec(BaseModel):
    """Frozen image payload with display options. Sizes are in pixels."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    image_format: str
    width: int
    height: int
    scale_width: float = 1.0
    scale_height: float = 1.0
    alt_text: str | None = None

    @property
    def scaled_width(self) -> float:
        return self.width * self.scale_width

    @property
    def scaled_height(self) -> float:
        return self.height * self.scale_height


def _read_image(data: bytes) -> ImageSpec:
    try:
        with PILImage.open(io.BytesIO(data)) as opened:
            image_format = opened.format or ""
            width, height = opened.size
    except (UnidentifiedImageError, OSError) as exc:
        raise XlsxError.from_code("ImageError", f"Unable to read image: {exc}") from exc
    if image_format not in _SUPPORTED_FORMATS:
        raise XlsxError.from_code(
            "ImageError",
            f"Unsupported image format: {image_format or 'unknown'}",
            hint="Use PNG, JPEG, GIF or BMP.",
        )
    return ImageSpec(data=data, image_format=image_format, width=width, height=height)


class Image(ValueHandle[ImageSpec]):
    """Image handle. Build with ``Image.new(path)`` or ``Image.new_from_buffer``."""

    @classmethod
    def new(cls, path: str | Path) -> Image:
        try:
            data = Path(path).read_bytes()
        except OSError as exc:
            raise XlsxError.from_code(
                "ImageError", f"Unable to open image file {path}: {exc}"
            ) from exc
        logger.debug("Loaded image %s (%d bytes).", path, len(data))
        return cls.new_from_buffer(data)

    @classmethod
    def new_from_buffer(cls, data: bytes) -> Image:
        handle = cls.__new__(cls)
        handle._init_value(_read_image(bytes(data)))
        return handle

    @property
    def width(self) -> int:
        return self.snapshot().width

    @property
    def height(self) -> int:
        return self.snapshot().height

    def set_scale_width(self, scale: float) -> Self:
        return self._update(scale_width=float(scale))

    def set_scale_height(self, scale: float) -> Self:
        return self._update(scale_height=float(scale))

    def set_alt_text(self, alt_text: str) -> Self:
        return self._update(alt_text=alt_text)
