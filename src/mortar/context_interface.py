from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class ContextProtocol(Protocol):
    """Public contract shared by every object usable as a Mortar context.

    ``is_context`` checks this contract structurally, so contexts built by
    other means (subclasses, proxies, test doubles) qualify as long as they
    expose the same operations.
    """

    def wire(self, subject: Any) -> Any: ...

    def retrieve(self, key: str) -> Any: ...

    def resolve(self, fn: Callable[..., T]) -> T: ...

    def has(self, key: str) -> bool: ...

    def release(self, key: str) -> None: ...

    def spawn(self) -> Any: ...

    def using(self, source: Any) -> Any: ...


def is_context(value: object) -> bool:
    """Return whether ``value`` is a context instance.

    Classes are rejected even when they define the protocol methods, so the
    ``Context`` type itself is not mistaken for an instance.
    """
    return not isinstance(value, type) and isinstance(value, ContextProtocol)
