"""Partial template stores."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any, Protocol, runtime_checkable

from stache._exceptions import PartialNotFoundError


@runtime_checkable
class PartialStore(Protocol):
    """Anything that can return the source text of a partial by name."""

    def get(self, name: str) -> str:
        """Return the template text registered under `name`.

        Raises:
            PartialNotFoundError: If there is no such partial.
        """
        ...  # pragma: no cover


class DictPartials(Mapping[str, str]):
    """A read-only partial store backed by a mapping of names to template text."""

    def __init__(self, partials: Mapping[str, str] | None = None) -> None:
        self._partials: dict[str, str] = dict(partials or {})

    def get(self, name: str) -> str:  # type: ignore[override]
        try:
            return self._partials[name]
        except KeyError:
            raise PartialNotFoundError(name) from None

    def __getitem__(self, name: str) -> str:
        return self._partials[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._partials)

    def __len__(self) -> int:
        return len(self._partials)

    def __repr__(self) -> str:
        return f'DictPartials({self._partials!r})'


class ChainedPartials:
    """Look a partial up in each store in turn, returning the first hit."""

    def __init__(self, *stores: PartialStore) -> None:
        self._stores = stores

    def get(self, name: str) -> str:
        for store in self._stores:
            try:
                return store.get(name)
            except PartialNotFoundError:
                continue
        raise PartialNotFoundError(name)


def as_partial_store(partials: Any) -> PartialStore:
    """Coerce `None`, a mapping or a store into a `PartialStore`."""
    if partials is None:
        return DictPartials()
    if isinstance(partials, (DictPartials, ChainedPartials)):
        return partials
    if isinstance(partials, Mapping):
        return DictPartials(partials)  # pyright: ignore[reportUnknownArgumentType]
    if isinstance(partials, PartialStore):
        return partials
    raise TypeError(f'Expected a mapping or a partial store, got {type(partials).__name__}')
