from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from mortar._internal.entries import Entry, EntryStore
from mortar.exceptions import MortarDuplicateKeyError, MortarInvalidKeyError
from mortar.providers import ProviderRegistry

if TYPE_CHECKING:
    from mortar.context import Context

logger = logging.getLogger(__name__)

_NO_KEY: Any = None


class WireBuilder:
    """Stage a subject until a provider strategy and key are chosen.

    ``finalize(strategy, key)`` is the single entry point that validates the
    key, configures the subject and stores the entry. ``as_`` exposes one
    shortcut per registered strategy name, so ``builder.as_.singleton("db")``
    is equivalent to ``builder.finalize("singleton", "db")``.
    """

    def __init__(
        self,
        subject: Any,
        *,
        context: Context,
        store: EntryStore,
        registry: ProviderRegistry,
    ) -> None:
        self._subject = subject
        self._context = context
        self._store = store
        self._registry = registry

    @property
    def as_(self) -> StrategyAccessor:
        return StrategyAccessor(self)

    def finalize(self, strategy: str, key: str = _NO_KEY) -> Context:
        """Store the staged subject under ``key`` using ``strategy``.

        Args:
            strategy: Registered provider strategy name.
            key: Non-empty string key, unique within the owning context.

        Returns:
            The owning context, so calls can be chained.

        Raises:
            MortarInvalidKeyError: If ``key`` is not a non-empty string.
            MortarDuplicateKeyError: If the owning context already holds ``key``.
            AttributeError: If ``strategy`` is not registered.

        """
        provider = self._registry.get(strategy)
        if provider is None:
            msg = f"Unknown provider strategy {strategy!r}."
            raise AttributeError(msg)
        if not isinstance(key, str) or not key:
            raise MortarInvalidKeyError(key)
        if key in self._store:
            raise MortarDuplicateKeyError(key)

        subject = provider.configure(self._subject)
        self._store.add(Entry(key=key, provider=provider, subject=subject))
        logger.debug("Wired %r as %s on %r", key, provider.name, self._context)
        return self._context


class StrategyAccessor:
    """Expose ``finalize`` as one attribute per registered strategy name."""

    def __init__(self, builder: WireBuilder) -> None:
        self._builder = builder

    def __getattr__(self, name: str) -> Callable[..., Context]:
        builder = self.__dict__.get("_builder")
        if builder is None or name.startswith("__") or not builder._registry.has(name):  # noqa: SLF001
            msg = f"{type(self).__name__!r} object has no attribute {name!r}"
            raise AttributeError(msg)
        return functools.partial(builder.finalize, name)

    def __dir__(self) -> list[str]:
        return sorted(self._builder._registry.names)  # noqa: SLF001
