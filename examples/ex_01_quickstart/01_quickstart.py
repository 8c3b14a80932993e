"""Quickstart: wire values and factories, then resolve by parameter name.

This module covers:

1. ``value`` entries returned as-is.
2. ``singleton`` factories built once per context.
3. ``producer`` factories built on every retrieval.
4. ``resolve`` supplying arguments by parameter name.
"""

from __future__ import annotations

from mortar import Context


class Engine:
    def __init__(self, dsn: str) -> None:
        self.dsn = dsn


class Session:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine


def main() -> None:
    context = Context()
    context.wire("sqlite:///app.db").as_.value("dsn")
    context.wire(Engine).as_.singleton("engine")
    context.wire(Session).as_.producer("session")

    engine = context.retrieve("engine")
    print(f"engine_is_cached={context.retrieve('engine') is engine}")  # => engine_is_cached=True

    first = context.retrieve("session")
    second = context.retrieve("session")
    print(f"sessions_are_distinct={first is not second}")  # => sessions_are_distinct=True

    def describe(dsn: str, session: Session) -> str:
        return f"{dsn} via {type(session).__name__}"

    print(context.resolve(describe))  # => sqlite:///app.db via Session


if __name__ == "__main__":
    main()
