"""The scope stack names are resolved against."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from stache._exceptions import ResolutionError
from stache._values import HostValue, reflect


class Context:
    """One frame of the scope stack.

    Frames are immutable and share their parents, so extending the context for
    each section iteration never copies the outer scopes.
    """

    __slots__ = ('value', 'parent')

    def __init__(self, value: HostValue, parent: Context | None = None) -> None:
        self.value = value
        self.parent = parent

    @classmethod
    def root(cls, data: Any) -> Context:
        """Create the outermost frame for the given host data."""
        if isinstance(data, Context):
            return data
        return cls(reflect(data))

    def extend(self, value: HostValue) -> Context:
        """Return a new innermost frame bound to `value`."""
        return Context(value, parent=self)

    def frames(self) -> Iterator[Context]:
        """Iterate from the innermost frame outward."""
        frame: Context | None = self
        while frame is not None:
            yield frame
            frame = frame.parent

    def resolve(self, name: str) -> HostValue:
        """Resolve a bare or dotted name.

        `.` is the innermost value. For `a.b.c` the first frame exposing `a`
        wins, then `b` and `c` are looked up on that value only.

        Raises:
            ResolutionError: If no frame exposes the first segment, or a later
                segment is missing.
        """
        if name == '.':
            return self.value

        first, *rest = name.split('.')
        for frame in self.frames():
            if frame.value.has(first):
                value = frame.value.lookup(first)
                break
        else:
            raise ResolutionError(name)

        for part in rest:
            if not value.has(part):
                raise ResolutionError(name)
            value = value.lookup(part)
        return value

    def __repr__(self) -> str:
        return f'Context({[frame.value for frame in self.frames()]!r})'
