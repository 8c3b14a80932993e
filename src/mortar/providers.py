from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, TypeAlias

from mortar.exceptions import MortarDuplicateProviderError, MortarInvalidProviderError

logger = logging.getLogger(__name__)

Configure: TypeAlias = Callable[[Any], Any]
"""Hook turning a raw wired subject into the object stored on the entry."""

ProviderSource: TypeAlias = "ProviderDefinition | Mapping[str, Any] | Configure"
"""Anything accepted by ``ProviderRegistry.register``."""


class Lifetime(Enum):
    """Define how a configured subject becomes a retrieved value."""

    TRANSIENT = auto()
    """Resolve and invoke the configured factory on every retrieval."""

    SCOPED = auto()
    """Resolve and invoke once per owning entry, then reuse the cached result.

    Each context owns its entries, so sibling contexts wiring the same factory
    get separate instances and a child never shares its parent's cache.
    """


def _identity(subject: Any) -> Any:
    return subject


@dataclass(frozen=True, slots=True)
class ProviderDefinition:
    """Describe a named provider strategy.

    ``configure`` runs once at wiring time. Its result is stored on the entry
    and, unless ``lifetime`` is ``None``, resolved and invoked at retrieval
    time. A ``None`` lifetime returns the configured object untouched.
    """

    name: str
    configure: Configure = _identity
    lifetime: Lifetime | None = Lifetime.TRANSIENT

    @property
    def invokes(self) -> bool:
        return self.lifetime is not None

    @property
    def caches(self) -> bool:
        return self.lifetime is Lifetime.SCOPED


SINGLETON = ProviderDefinition("singleton", lifetime=Lifetime.SCOPED)
PRODUCER = ProviderDefinition("producer", lifetime=Lifetime.TRANSIENT)
VALUE = ProviderDefinition("value", lifetime=None)

BUILTIN_PROVIDERS: tuple[ProviderDefinition, ...] = (SINGLETON, PRODUCER, VALUE)


class ProviderRegistry:
    """Store provider strategies by name.

    Registration is append-only: names cannot be replaced or removed once
    registered. Every context constructed with the same registry sees new
    strategies immediately through ``context.wire(...).as_.<name>(key)``.
    """

    def __init__(self, definitions: tuple[ProviderDefinition, ...] = ()) -> None:
        self._definitions: dict[str, ProviderDefinition] = {}
        for definition in definitions:
            self.register(definition)

    @classmethod
    def with_builtins(cls) -> ProviderRegistry:
        """Return a registry holding ``singleton``, ``producer`` and ``value``."""
        return cls(BUILTIN_PROVIDERS)

    def register(self, source: ProviderSource) -> ProviderDefinition:
        """Add a provider strategy to the registry.

        Args:
            source: A ``ProviderDefinition``, a mapping with ``name`` and
                ``configure`` (and optionally ``lifetime``), or a named
                function used as ``configure`` whose ``__name__`` becomes the
                strategy name.

        Returns:
            The normalized definition that was stored.

        Raises:
            MortarDuplicateProviderError: If the name is already registered.
            MortarInvalidProviderError: If the definition is malformed.

        """
        name = self._extract_name(source)
        if name in self._definitions:
            raise MortarDuplicateProviderError(name)

        definition = self._normalize(name, source)
        self._definitions[name] = definition
        logger.debug("Registered provider strategy %r (lifetime=%s)", name, definition.lifetime)
        return definition

    def has(self, name: str) -> bool:
        return name in self._definitions

    def get(self, name: str) -> ProviderDefinition | None:
        return self._definitions.get(name)

    @property
    def names(self) -> frozenset[str]:
        return frozenset(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __repr__(self) -> str:
        return f"ProviderRegistry({sorted(self._definitions)!r})"

    def _extract_name(self, source: ProviderSource) -> str:
        if isinstance(source, ProviderDefinition):
            name: Any = source.name
        elif isinstance(source, Mapping):
            name = source.get("name")
        elif callable(source):
            name = getattr(source, "__name__", None)
            if name == "<lambda>":
                msg = "Cannot register an anonymous function as a provider; give it a name."
                raise MortarInvalidProviderError(msg)
        else:
            msg = f"Expected a provider definition, mapping or named function, got {source!r}."
            raise MortarInvalidProviderError(msg)

        if not isinstance(name, str) or not name:
            msg = f"Provider name must be a non-empty string, got {name!r}."
            raise MortarInvalidProviderError(msg)
        return name

    def _normalize(self, name: str, source: ProviderSource) -> ProviderDefinition:
        if isinstance(source, ProviderDefinition):
            configure: Any = source.configure
            lifetime: Any = source.lifetime
        elif isinstance(source, Mapping):
            configure = source.get("configure")
            lifetime = source.get("lifetime", Lifetime.TRANSIENT)
        else:
            configure = source
            lifetime = Lifetime.TRANSIENT

        if not callable(configure):
            msg = f"Provider {name!r} must define a callable 'configure', got {configure!r}."
            raise MortarInvalidProviderError(msg)
        if lifetime is not None and not isinstance(lifetime, Lifetime):
            msg = f"Provider {name!r} lifetime must be a Lifetime or None, got {lifetime!r}."
            raise MortarInvalidProviderError(msg)

        return ProviderDefinition(name=name, configure=configure, lifetime=lifetime)
