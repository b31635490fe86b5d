"""Lock-protected value cells shared by sub-object handles.

Engine sub-objects are frozen pydantic models: every builder step produces a
new value instead of mutating the old one. A handle therefore owns a
``SharedValue`` and applies each mutation as take -> transform -> store under
the value's lock. Copying a handle aliases the cell, deep-copying it clones the
current value into a fresh cell.

``SharedField`` projects one nested value out of a parent cell, so locator
handles (a chart's title, axes, legend or series) mutate the parent value under
the parent's single lock.
"""

from __future__ import annotations

from collections.abc import Callable
import threading
from typing import Any, Generic, Protocol, TypeVar

from pydantic import BaseModel, ValidationError
from typing_extensions import Self

from .errors import XlsxError

TValue = TypeVar("TValue", bound=BaseModel)
TParent = TypeVar("TParent", bound=BaseModel)


class ValueCell(Protocol[TValue]):
    def get(self) -> TValue: ...

    def replace(self, transform: Callable[[TValue], TValue]) -> TValue: ...


class SharedValue(Generic[TValue]):
    """Exclusive-access owner of one frozen engine value."""

    __slots__ = ("_lock", "_value")

    def __init__(self, value: TValue) -> None:
        self._lock = threading.Lock()
        self._value = value

    def get(self) -> TValue:
        """Return the current value."""
        with self._lock:
            return self._value

    def replace(self, transform: Callable[[TValue], TValue]) -> TValue:
        """Apply one transformation atomically and store the result.

        Args:
            transform: Pure function from the current value to the next one.
                It must not call back into host code.

        Returns:
            The stored value.
        """
        with self._lock:
            self._value = transform(self._value)
            return self._value


class SharedField(Generic[TParent, TValue]):
    """View of one value nested inside a parent ``ValueCell``.

    Args:
        parent: Cell holding the enclosing value.
        getter: Extracts the nested value from a parent value.
        setter: Returns a new parent value with the nested value replaced.
    """

    __slots__ = ("_getter", "_parent", "_setter")

    def __init__(
        self,
        parent: ValueCell[TParent],
        getter: Callable[[TParent], TValue],
        setter: Callable[[TParent, TValue], TParent],
    ) -> None:
        self._parent = parent
        self._getter = getter
        self._setter = setter

    def get(self) -> TValue:
        return self._getter(self._parent.get())

    def replace(self, transform: Callable[[TValue], TValue]) -> TValue:
        stored: list[TValue] = []

        def _apply(parent: TParent) -> TParent:
            child = transform(self._getter(parent))
            stored.append(child)
            return self._setter(parent, child)

        self._parent.replace(_apply)
        return stored[0]


class ValueHandle(Generic[TValue]):
    """Base class for handles backed by a ``ValueCell``."""

    _shared: ValueCell[TValue]

    def _init_value(self, value: TValue) -> None:
        self._shared = SharedValue(value)

    @classmethod
    def _from_shared(cls, shared: ValueCell[TValue]) -> Self:
        handle = cls.__new__(cls)
        handle._shared = shared
        return handle

    def snapshot(self) -> TValue:
        """Return the current frozen engine value."""
        return self._shared.get()

    def is_alias_of(self, other: object) -> bool:
        """Return True when both handles point at the same value cell."""
        return isinstance(other, ValueHandle) and other._shared is self._shared

    def _update(self, **changes: Any) -> Self:
        self._shared.replace(lambda value: _validated(value, changes))
        return self

    def _transform(self, transform: Callable[[TValue], TValue]) -> Self:
        self._shared.replace(transform)
        return self

    def __copy__(self) -> Self:
        return self._from_shared(self._shared)

    def __deepcopy__(self, memo: dict[int, object]) -> Self:
        return self._from_shared(SharedValue(self.snapshot()))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.snapshot()!r})"


def snapshot_of(handle: ValueHandle[TValue] | None) -> TValue | None:
    """Return the handle's value, passing ``None`` through."""
    if handle is None:
        return None
    return handle.snapshot()


def _validated(value: TValue, changes: dict[str, Any]) -> TValue:
    """Return ``value`` with ``changes`` applied, re-running field validation."""
    try:
        return type(value).model_validate({**dict(value), **changes})
    except ValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or type(value).__name__
        raise XlsxError.from_code(
            "ParameterError", f"Invalid value for {field}: {error['msg']}"
        ) from exc
