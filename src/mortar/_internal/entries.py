from __future__ import annotations

from collections.abc import Generator, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

from mortar.exceptions import MortarCircularDependencyError
from mortar.providers import ProviderDefinition

_MISSING: Any = object()


@dataclass(slots=True, eq=False)
class Entry:
    """A wired subject stored under a key on exactly one context."""

    key: str
    provider: ProviderDefinition
    subject: Any
    """The configured subject, as returned by ``provider.configure``."""
    cache: Any = field(default=_MISSING)

    @property
    def cached(self) -> bool:
        return self.cache is not _MISSING

    def store(self, value: Any) -> None:
        self.cache = value

    def clear(self) -> None:
        self.cache = _MISSING


class EntryStore:
    """Map keys to entries for a single context. Ancestors are not consulted."""

    def __init__(self) -> None:
        self._entries: dict[str, Entry] = {}

    def add(self, entry: Entry) -> None:
        self._entries[entry.key] = entry

    def get(self, key: str) -> Entry | None:
        return self._entries.get(key)

    def remove(self, key: str) -> Entry | None:
        entry = self._entries.pop(key, None)
        if entry is not None:
            entry.clear()
        return entry

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


# Entries currently being materialized in this execution context, outermost first.
_resolution_stack: ContextVar[tuple[Entry, ...]] = ContextVar("mortar_resolution_stack", default=())


@contextmanager
def materializing(entry: Entry) -> Generator[None, None, None]:
    """Track ``entry`` as in-flight and fail if it is already being built."""
    stack = _resolution_stack.get()
    if any(active is entry for active in stack):
        path = [active.key for active in stack]
        start = next(index for index, active in enumerate(stack) if active is entry)
        raise MortarCircularDependencyError([*path[start:], entry.key])

    token = _resolution_stack.set((*stack, entry))
    try:
        yield
    finally:
        _resolution_stack.reset(token)
