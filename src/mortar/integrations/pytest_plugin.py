from __future__ import annotations

import pytest

from mortar.context import Context


@pytest.fixture()
def mortar_context() -> Context:
    """Root context for a test.

    Override this fixture in a ``conftest.py`` to return a context with the
    application's wiring already in place.

    """
    return Context()


@pytest.fixture()
def mortar_scope(mortar_context: Context) -> Context:
    """Child of ``mortar_context`` that only lives for the current test.

    Wire test doubles here: they shadow the root's entries without touching
    its store or its cached singletons.

    """
    return mortar_context.spawn()
