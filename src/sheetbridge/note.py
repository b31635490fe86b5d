from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from typing_extensions import Self

from .color import Color, ColorLike, to_color
from .sync import ValueHandle

_DEFAULT_WIDTH = 128
_DEFAULT_HEIGHT = 74


class NoteSpec(BaseModel):
    """Frozen cell note (legacy comment). Sizes are in pixels."""

    model_config = ConfigDict(frozen=True)

    text: str
    author: str | None = None
    author_prefix: bool = True
    width: int = _DEFAULT_WIDTH
    height: int = _DEFAULT_HEIGHT
    visible: bool = False
    background_color: Color | None = None
    font_name: str | None = None
    font_size: float | None = None

    def display_text(self) -> str:
        """Return the stored text, prefixed with ``"Author:\\n"`` when enabled."""
        if self.author and self.author_prefix:
            return f"{self.author}:\n{self.text}"
        return self.text


class Note(ValueHandle[NoteSpec]):
    def __init__(self, text: str) -> None:
        self._init_value(NoteSpec(text=text))

    def set_author(self, author: str) -> Self:
        return self._update(author=author)

    def add_author_prefix(self, enable: bool = True) -> Self:
        return self._update(author_prefix=enable)

    def set_width(self, width: int) -> Self:
        return self._update(width=width)

    def set_height(self, height: int) -> Self:
        return self._update(height=height)

    def set_visible(self, enable: bool = True) -> Self:
        return self._update(visible=enable)

    def set_background_color(self, color: ColorLike) -> Self:
        return self._update(background_color=to_color(color))

    def set_font_name(self, name: str) -> Self:
        return self._update(font_name=name)

    def set_font_size(self, size: float) -> Self:
        return self._update(font_size=float(size))
