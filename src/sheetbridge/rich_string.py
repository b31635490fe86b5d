from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from typing_extensions import Self

from .format import Format, FormatSpec
from .sync import ValueHandle


class RichFragment(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    format: FormatSpec | None = None


class RichStringSpec(BaseModel):
    """Ordered text fragments, each with an optional font format."""

    model_config = ConfigDict(frozen=True)

    fragments: tuple[RichFragment, ...] = ()

    def plain_text(self) -> str:
        return "".join(fragment.text for fragment in self.fragments)


class RichString(ValueHandle[RichStringSpec]):
    """Rich text handle.

    ``append`` snapshots the format at call time, so later changes to the
    ``Format`` handle do not alter fragments already appended.
    """

    def __init__(self) -> None:
        self._init_value(RichStringSpec())

    def append(self, format: Format, text: str) -> Self:
        fragment = RichFragment(text=text, format=format.snapshot())
        return self._transform(
            lambda value: value.model_copy(
                update={"fragments": (*value.fragments, fragment)}
            )
        )

    def append_plain(self, text: str) -> Self:
        fragment = RichFragment(text=text)
        return self._transform(
            lambda value: value.model_copy(
                update={"fragments": (*value.fragments, fragment)}
            )
        )
