from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from mortar.exceptions import MortarNotCallableError

_SKIPPED_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True, slots=True)
class Dependency:
    """A single named dependency of a callable."""

    name: str
    keyword_only: bool


class DependenciesExtractor:
    """Extract dependency names from callables by parameter name.

    Positional-only, positional-or-keyword and keyword-only parameters are
    reported in declaration order. ``*args`` and ``**kwargs`` are skipped and
    default values are ignored. Callables without an introspectable signature
    (some builtins) report no dependencies.
    """

    def extract(self, fn: Any) -> list[Dependency]:
        """Return the dependencies of ``fn``.

        Raises:
            MortarNotCallableError: If ``fn`` is not callable.

        """
        if not callable(fn):
            raise MortarNotCallableError(fn)

        try:
            signature = inspect.signature(fn)
        except (ValueError, TypeError):
            return []

        return [
            Dependency(
                name=parameter.name,
                keyword_only=parameter.kind is inspect.Parameter.KEYWORD_ONLY,
            )
            for parameter in signature.parameters.values()
            if parameter.kind not in _SKIPPED_KINDS
        ]

    def names(self, fn: Any) -> list[str]:
        return [dependency.name for dependency in self.extract(fn)]


_EXTRACTOR = DependenciesExtractor()


def get_dependencies(fn: Callable[..., Any]) -> list[str]:
    """Return the ordered parameter names ``fn`` would be resolved with.

    Examples:
        .. code-block:: python

            def build(engine, config, *, debug): ...

            get_dependencies(build)  # ['engine', 'config', 'debug']

    """
    return _EXTRACTOR.names(fn)
