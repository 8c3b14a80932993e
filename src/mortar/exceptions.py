from __future__ import annotations

from typing import Any


class MortarError(Exception):
    """Represent a base class for all Mortar-specific failures.

    Catch this type when you want to handle any Mortar error path without
    matching each concrete exception class individually.
    """


class MortarNotCallableError(MortarError, TypeError):
    """Signal that a callable was expected but something else was given.

    Raised by ``Context.get_dependencies`` and ``Context.resolve`` (including
    ``OverrideView.resolve``) for any non-callable argument.
    """

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"{value!r} is not a function")


class MortarInvalidKeyError(MortarError, KeyError):
    """Signal a wiring key that is not a non-empty string.

    Raised by ``WireBuilder.finalize`` and the ``builder.as_.<strategy>(key)``
    shortcuts.

    Typical fix is passing a descriptive string key, for example
    ``context.wire(engine).as_.value("engine")``.
    """

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f"cannot use {key!r} as key")

    def __str__(self) -> str:
        return str(self.args[0])


class MortarDuplicateKeyError(MortarError):
    """Signal wiring a key that the same context already holds.

    Only the context's own store is checked: wiring a key that an ancestor
    already provides is allowed and shadows the ancestor's entry.

    Typical fixes include ``release`` before re-wiring, or spawning a child
    context and wiring the replacement there.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"key {key!r} already exists")


class MortarDuplicateProviderError(MortarError):
    """Signal registering a provider strategy name that is already taken."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"provider {name!r} is already registered")


class MortarInvalidProviderError(MortarError, TypeError):
    """Signal a malformed provider strategy definition.

    Raised by ``ProviderRegistry.register`` when the definition has no usable
    name or its ``configure`` hook is not callable. Anonymous lambdas cannot
    be registered as bare functions because their name is not usable as a
    strategy name.
    """


class MortarDependencyNotFoundError(MortarError, LookupError):
    """Signal that a key is not wired anywhere in the context chain.

    Raised by ``retrieve`` and ``resolve`` once the context, all of its
    ancestors and any active override source have been searched.

    Typical fixes include wiring the key on the context (or an ancestor), or
    supplying it for a single call through ``context.using({...})``.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"key {key!r} not found")


class MortarInvalidOverrideError(MortarError, TypeError):
    """Signal an override source that is not a mapping, function, or context.

    Raised by ``Context.using`` directly, and when a function source does not
    produce a mapping.
    """

    def __init__(self, source: Any) -> None:
        self.source = source
        super().__init__(f"expected object, function or Context, got {source!r}")


class MortarMisuseError(MortarError):
    """Signal calling an API in a way it does not support.

    Raised when a ``Context`` instance is called like a function and when
    ``Context.require`` is used on a context built without an owning module.
    """


class MortarCircularDependencyError(MortarError):
    """Signal a factory whose resolution requires its own value.

    ``path`` lists the keys being materialized, ending with the key that
    closed the cycle.

    Typical fix is breaking the cycle by wiring one side as a ``value`` or
    restructuring the factories so neither needs the other at build time.
    """

    def __init__(self, path: list[str]) -> None:
        self.path = path
        super().__init__(f"circular dependency detected: {' -> '.join(path)}")


class MortarModuleLoadError(MortarError, ImportError):
    """Signal that ``Context.require`` could not load the requested module.

    Raised when the resolved file does not exist, cannot be executed, or does
    not define the requested attribute.
    """
