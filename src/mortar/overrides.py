from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from mortar.context_interface import ContextProtocol, is_context
from mortar.exceptions import MortarDependencyNotFoundError, MortarInvalidOverrideError

if TYPE_CHECKING:
    from mortar.context import Context

T = TypeVar("T")

_ABSENT: Any = object()


class OverrideView:
    """Overlay a single resolution with values from another source.

    Each dependency of the resolved function is looked up in the override
    source first, falsy values included. Names the source does not provide
    fall back to the owning context's normal chain. Nested dependencies of
    factories are not overridden, and nothing is written to any store.
    """

    def __init__(self, context: Context, source: Mapping[str, Any] | ContextProtocol) -> None:
        self._context = context
        self._source = source

    @classmethod
    def from_source(cls, context: Context, source: Any) -> OverrideView:
        """Normalize ``source`` into an override view bound to ``context``.

        Raises:
            MortarInvalidOverrideError: If ``source`` is not a mapping, function,
                or context, or a function source does not return a mapping.

        """
        if is_context(source) or isinstance(source, Mapping):
            return cls(context, source)
        if callable(source):
            produced = context.resolve(source)
            if not isinstance(produced, Mapping):
                raise MortarInvalidOverrideError(produced)
            return cls(context, produced)
        raise MortarInvalidOverrideError(source)

    def resolve(self, fn: Callable[..., T]) -> T:
        """Call ``fn`` with its dependencies, consulting the override source first."""
        return self._context._invoke(fn, self.retrieve)  # noqa: SLF001

    def retrieve(self, key: str) -> Any:
        value = self._lookup(key)
        if value is _ABSENT:
            return self._context.retrieve(key)
        return value

    def _lookup(self, key: str) -> Any:
        if isinstance(self._source, Mapping):
            return self._source.get(key, _ABSENT)

        try:
            return self._source.retrieve(key)
        except MortarDependencyNotFoundError as error:
            if error.key != key:
                raise
            return _ABSENT

    def __repr__(self) -> str:
        return f"OverrideView(context={self._context!r}, source={self._source!r})"
