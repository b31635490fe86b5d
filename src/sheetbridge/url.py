from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from typing_extensions import Self

from .sync import ValueHandle

_INTERNAL_PREFIX = "internal:"
_EXTERNAL_PREFIX = "external:"


class UrlSpec(BaseModel):
    """Frozen hyperlink value."""

    model_config = ConfigDict(frozen=True)

    link: str
    text: str | None = None
    tip: str | None = None

    @property
    def is_internal(self) -> bool:
        return self.link.startswith(_INTERNAL_PREFIX)

    @property
    def target(self) -> str | None:
        """External target, or ``None`` for in-workbook locations."""
        if self.is_internal:
            return None
        if self.link.startswith(_EXTERNAL_PREFIX):
            return self.link[len(_EXTERNAL_PREFIX) :]
        return self.link

    @property
    def location(self) -> str | None:
        """In-workbook location such as ``Sheet2!A1``."""
        if not self.is_internal:
            return None
        return self.link[len(_INTERNAL_PREFIX) :]

    def display_text(self) -> str:
        if self.text is not None:
            return self.text
        return self.location or self.target or self.link


class Url(ValueHandle[UrlSpec]):
    """Hyperlink handle.

    ``link`` may be a web/mail URL, ``external:`` followed by a file path, or
    ``internal:`` followed by a location in the workbook (``internal:Sheet2!A1``).
    """

    def __init__(self, link: str) -> None:
        self._init_value(UrlSpec(link=link))

    def set_text(self, text: str) -> Self:
        return self._update(text=text)

    def set_tip(self, tip: str) -> Self:
        return self._update(tip=tip)
