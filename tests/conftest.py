"""Shared pytest fixtures for mortar tests."""

import pytest

from mortar import Context, ProviderRegistry


@pytest.fixture()
def context() -> Context:
    """Fresh root context using the shared provider registry."""
    return Context()


@pytest.fixture()
def isolated_context_class() -> type[Context]:
    """Context subclass with its own registry, so custom strategies do not leak."""

    class IsolatedContext(Context):
        providers = ProviderRegistry.with_builtins()

    return IsolatedContext
