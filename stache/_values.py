"""Wrappers giving the renderer a uniform view of host data.

The renderer never inspects Python objects directly. It goes through the
`HostValue` capabilities: membership, member lookup, text conversion,
truthiness and conversion to a list for section iteration.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, cast

from stache._utils import SafeString, is_blocked_attribute

# Exceptions from attribute access that mean the member does not exist
_ABSENT_ERRORS = (AttributeError, KeyError, IndexError)


class HostValue(ABC):
    """A piece of host data as seen by the renderer."""

    __slots__ = ('raw',)

    def __init__(self, raw: Any) -> None:
        self.raw = raw

    def has(self, name: str) -> bool:
        """Check if this value exposes a member called `name`."""
        return False

    def lookup(self, name: str) -> HostValue:
        """Return the member called `name`.

        Raises:
            KeyError: If the value has no such member.
        """
        raise KeyError(name)

    def to_text(self) -> str:
        return str(self.raw)

    @abstractmethod
    def is_truthy(self) -> bool: ...

    def to_list(self) -> list[HostValue]:
        """View this value as the list a section iterates over."""
        return [self] if self.is_truthy() else []

    @property
    def is_safe(self) -> bool:
        """Whether the text of this value must not be escaped."""
        return isinstance(self.raw, SafeString)

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.raw!r})'


class ScalarValue(HostValue):
    """`None`, booleans, numbers and strings."""

    __slots__ = ()

    def to_text(self) -> str:
        if self.raw is None:
            return ''
        if isinstance(self.raw, bool):
            return 'true' if self.raw else 'false'
        return str(self.raw)

    def is_truthy(self) -> bool:
        if self.raw is None:
            return False
        if isinstance(self.raw, bool):
            return self.raw
        if isinstance(self.raw, str):
            return self.raw != ''
        if isinstance(self.raw, (int, float)):
            return self.raw != 0
        return True


class SequenceValue(HostValue):
    """Lists, tuples and other non-string sequences. Members are indices."""

    __slots__ = ()

    def _index(self, name: str) -> int | None:
        try:
            index = int(name)
        except ValueError:
            return None
        if 0 <= index < len(self.raw):
            return index
        return None

    def has(self, name: str) -> bool:
        return self._index(name) is not None

    def lookup(self, name: str) -> HostValue:
        index = self._index(name)
        if index is None:
            raise KeyError(name)
        return reflect(cast('Sequence[Any]', self.raw)[index])

    def is_truthy(self) -> bool:
        return len(self.raw) > 0

    def to_list(self) -> list[HostValue]:
        return [reflect(item) for item in self.raw]


class MappingValue(HostValue):
    """Dicts and other mappings. Always truthy, even when empty."""

    __slots__ = ()

    def has(self, name: str) -> bool:
        return name in self.raw

    def lookup(self, name: str) -> HostValue:
        return reflect(cast('Mapping[str, Any]', self.raw)[name])

    def is_truthy(self) -> bool:
        return True


class ObjectValue(HostValue):
    """Arbitrary objects. Members are their non-dunder attributes."""

    __slots__ = ()

    def has(self, name: str) -> bool:
        try:
            self.lookup(name)
        except KeyError:
            return False
        return True

    def lookup(self, name: str) -> HostValue:
        if is_blocked_attribute(name):
            raise KeyError(name)
        # Any other exception raised by the attribute propagates
        try:
            return reflect(getattr(self.raw, name))
        except _ABSENT_ERRORS:
            raise KeyError(name) from None

    def is_truthy(self) -> bool:
        return True


class AbsentValue(HostValue):
    """The value of a name that could not be resolved."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(None)

    def to_text(self) -> str:
        return ''

    def is_truthy(self) -> bool:
        return False


ABSENT = AbsentValue()


def reflect(data: Any) -> HostValue:
    """Wrap a Python value in the matching `HostValue` variant.

    Args:
        data: Any Python value. `HostValue` instances are returned unchanged.

    Returns:
        The wrapped value.
    """
    if isinstance(data, HostValue):
        return data
    if data is None or isinstance(data, (bool, int, float, str)):
        return ScalarValue(data)
    if isinstance(data, Mapping):
        return MappingValue(data)
    if isinstance(data, Sequence) and not isinstance(data, (bytes, bytearray)):
        return SequenceValue(data)
    return ObjectValue(data)
