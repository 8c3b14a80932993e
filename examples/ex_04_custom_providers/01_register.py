"""Register custom provider strategies.

This module covers:

1. Registering a named function as a strategy.
2. Registering a ``ProviderDefinition`` with a cached lifetime.
3. ``MortarDuplicateProviderError`` for taken names.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from mortar import (
    Context,
    Lifetime,
    MortarDuplicateProviderError,
    ProviderDefinition,
    ProviderRegistry,
)


class AppContext(Context):
    providers = ProviderRegistry.with_builtins()


def counted(subject: Callable[..., Any]) -> Callable[..., Any]:
    calls = {"count": 0}

    def factory() -> tuple[Any, int]:
        calls["count"] += 1
        return subject(), calls["count"]

    return factory


def copied(subject: dict[str, Any]) -> Callable[[], dict[str, Any]]:
    return lambda: dict(subject)


def main() -> None:
    AppContext.register(counted)
    AppContext.register(ProviderDefinition("config", configure=copied, lifetime=Lifetime.SCOPED))

    context = AppContext()
    context.wire(list).as_.counted("numbers")
    context.wire({"debug": True}).as_.config("config")

    context.retrieve("numbers")
    print(context.retrieve("numbers"))  # => ([], 2)
    print(context.retrieve("config") is context.retrieve("config"))  # => True

    try:
        AppContext.register(ProviderDefinition("singleton"))
    except MortarDuplicateProviderError as error:
        print(error)  # => provider 'singleton' is already registered


if __name__ == "__main__":
    main()
