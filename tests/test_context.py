"""Tests for Context construction, retrieval, resolution and lifecycle."""

from __future__ import annotations

import pytest

from mortar import (
    Context,
    MortarCircularDependencyError,
    MortarDependencyNotFoundError,
    MortarMisuseError,
    MortarNotCallableError,
    is_context,
)

FALSY_VALUES: list[object] = [False, 0, "", None, 0.0, [], {}]
ANSWER_KEY = "the answer to life, the universe and everything"


def noop() -> None:
    return None


class TestConstruction:
    def test_instance_is_context(self) -> None:
        assert is_context(Context())

    def test_create_returns_context(self) -> None:
        instance = Context.create()

        assert isinstance(instance, Context)
        assert is_context(instance)

    def test_create_passes_arguments_through(self) -> None:
        instance = Context.create(__name__)

        assert instance.module == __name__

    def test_calling_instance_directly_raises(self, context: Context) -> None:
        with pytest.raises(MortarMisuseError, match="(?i)cannot call"):
            context()

    def test_class_is_not_an_instance(self) -> None:
        assert not is_context(Context)

    def test_non_contexts_are_rejected(self) -> None:
        for value in [None, {}, [], noop, "context", object()]:
            assert not is_context(value)

    def test_structural_lookalike_is_a_context(self) -> None:
        class Lookalike:
            def wire(self, subject): ...
            def retrieve(self, key): ...
            def resolve(self, fn): ...
            def has(self, key): ...
            def release(self, key): ...
            def spawn(self): ...
            def using(self, source): ...

        assert is_context(Lookalike())

    def test_default_registry_is_class_providers(self, context: Context) -> None:
        assert context.registry is Context.providers


class TestRetrieve:
    def test_raises_when_key_not_found(self, context: Context) -> None:
        with pytest.raises(MortarDependencyNotFoundError, match="not found") as exc_info:
            context.retrieve("not found")

        assert exc_info.value.key == "not found"

    def test_value_is_returned_unchanged(self, context: Context) -> None:
        subject = object()
        context.wire(subject).as_.value("subject")

        assert context.retrieve("subject") is subject

    def test_value_is_never_invoked(self, context: Context) -> None:
        calls: list[int] = []

        def factory() -> None:
            calls.append(1)

        context.wire(factory).as_.value("factory")

        assert context.retrieve("factory") is factory
        assert calls == []

    @pytest.mark.parametrize("falsy", FALSY_VALUES)
    def test_falsy_values_are_retrieved(self, context: Context, falsy: object) -> None:
        context.wire(falsy).as_.value("falsy")

        assert context.retrieve("falsy") is falsy

    def test_singleton_returns_same_instance(self, context: Context) -> None:
        context.wire(lambda: {}).as_.singleton("singleton")

        first = context.retrieve("singleton")
        second = context.retrieve("singleton")

        assert first is not None
        assert first is second

    def test_singleton_factory_runs_once(self, context: Context) -> None:
        calls: list[int] = []

        def factory() -> object:
            calls.append(1)
            return object()

        context.wire(factory).as_.singleton("singleton")
        context.retrieve("singleton")
        context.retrieve("singleton")

        assert calls == [1]

    def test_singleton_caches_falsy_results(self, context: Context) -> None:
        calls: list[int] = []

        def factory() -> None:
            calls.append(1)

        context.wire(factory).as_.singleton("nothing")

        assert context.retrieve("nothing") is None
        assert context.retrieve("nothing") is None
        assert calls == [1]

    def test_singletons_are_separate_per_key(self, context: Context) -> None:
        def factory() -> dict[str, str]:
            return {}

        context.wire(factory).as_.singleton("s1")
        context.wire(factory).as_.singleton("s2")

        assert context.retrieve("s1") is not context.retrieve("s2")

    def test_singletons_are_separate_per_sibling(self, context: Context) -> None:
        def factory() -> dict[str, str]:
            return {}

        left = context.spawn()
        right = context.spawn()
        left.wire(factory).as_.singleton("shared")
        right.wire(factory).as_.singleton("shared")

        assert left.retrieve("shared") is not right.retrieve("shared")

    def test_child_shadowing_singleton_does_not_share_parent_cache(self, context: Context) -> None:
        def factory() -> dict[str, str]:
            return {}

        child = context.spawn()
        context.wire(factory).as_.singleton("service")
        child.wire(factory).as_.singleton("service")

        assert child.retrieve("service") is not context.retrieve("service")

    def test_inherited_singleton_is_cached_on_owner(self, context: Context) -> None:
        context.wire(lambda: {}).as_.singleton("service")
        child = context.spawn()

        assert child.retrieve("service") is context.retrieve("service")

    def test_producer_returns_new_instances(self, context: Context) -> None:
        context.wire(lambda: {}).as_.producer("producer")

        assert context.retrieve("producer") is not context.retrieve("producer")

    def test_factory_dependencies_are_resolved(self, context: Context) -> None:
        context.wire("sqlite://").as_.value("dsn")
        context.wire(lambda dsn: {"dsn": dsn}).as_.singleton("engine")
        context.wire(lambda engine: [engine]).as_.producer("session")

        session = context.retrieve("session")

        assert session == [{"dsn": "sqlite://"}]
        assert session[0] is context.retrieve("engine")

    def test_classes_can_be_wired_as_factories(self, context: Context) -> None:
        class Engine:
            def __init__(self, dsn: str) -> None:
                self.dsn = dsn

        context.wire("sqlite://").as_.value("dsn")
        context.wire(Engine).as_.producer("engine")

        assert context.retrieve("engine").dsn == "sqlite://"

    def test_builtin_callables_are_invoked_without_arguments(self, context: Context) -> None:
        context.wire(dict).as_.producer("mapping")

        assert context.retrieve("mapping") == {}

    def test_upstream_value_is_retrieved(self, context: Context) -> None:
        child = context.spawn().spawn().spawn()
        context.wire(42).as_.value(ANSWER_KEY)

        assert child.retrieve(ANSWER_KEY) == 42

    def test_downstream_value_overrides_upstream(self, context: Context) -> None:
        child = context.spawn().spawn().spawn()
        context.wire(0).as_.value(ANSWER_KEY)
        child.wire(42).as_.value(ANSWER_KEY)

        assert child.retrieve(ANSWER_KEY) == 42

    def test_downstream_value_is_invisible_upstream(self, context: Context) -> None:
        child = context.spawn().spawn().spawn()
        context.wire(0).as_.value(ANSWER_KEY)
        child.wire(42).as_.value(ANSWER_KEY)

        assert context.retrieve(ANSWER_KEY) == 0

    def test_parent_never_sees_child_only_keys(self, context: Context) -> None:
        child = context.spawn()
        child.wire("child").as_.value("only_child")

        with pytest.raises(MortarDependencyNotFoundError):
            context.retrieve("only_child")

    def test_factory_error_does_not_populate_cache(self, context: Context) -> None:
        attempts: list[int] = []

        def flaky() -> str:
            attempts.append(1)
            if len(attempts) == 1:
                msg = "boom"
                raise RuntimeError(msg)
            return "ok"

        context.wire(flaky).as_.singleton("flaky")

        with pytest.raises(RuntimeError, match="boom"):
            context.retrieve("flaky")
        assert context.retrieve("flaky") == "ok"

    def test_self_dependency_raises_circular_error(self, context: Context) -> None:
        context.wire(lambda loop: loop).as_.singleton("loop")

        with pytest.raises(MortarCircularDependencyError) as exc_info:
            context.retrieve("loop")

        assert exc_info.value.path == ["loop", "loop"]

    def test_indirect_cycle_reports_path(self, context: Context) -> None:
        context.wire(lambda second: second).as_.producer("first")
        context.wire(lambda third: third).as_.producer("second")
        context.wire(lambda first: first).as_.singleton("third")

        with pytest.raises(MortarCircularDependencyError, match="first -> second -> third -> first"):
            context.retrieve("first")

    def test_cycle_does_not_poison_later_resolution(self, context: Context) -> None:
        context.wire(lambda loop: loop).as_.singleton("loop")
        context.wire("fine").as_.value("fine")

        with pytest.raises(MortarCircularDependencyError):
            context.retrieve("loop")
        assert context.retrieve("fine") == "fine"

    def test_same_factory_under_two_keys_is_not_a_cycle(self, context: Context) -> None:
        context.wire(lambda: "leaf").as_.producer("leaf")
        context.wire(lambda leaf: leaf * 2).as_.producer("left")
        context.wire(lambda leaf, left: leaf + left).as_.producer("root")

        assert context.retrieve("root") == "leafleafleaf"


class TestResolve:
    def test_resolves_dependencies_in_order(self, context: Context) -> None:
        context.wire("foo").as_.value("foo")
        context.wire("baz").as_.value("baz")
        context.wire("qux").as_.value("qux")

        def f(foo, baz, qux):
            return [foo, baz, qux]

        assert context.resolve(f) == ["foo", "baz", "qux"]

    def test_raises_when_dependency_not_found(self, context: Context) -> None:
        with pytest.raises(MortarDependencyNotFoundError, match="not found"):
            context.resolve(lambda foo: foo)

    def test_default_values_do_not_skip_lookup(self, context: Context) -> None:
        def f(foo="fallback"):
            return foo

        with pytest.raises(MortarDependencyNotFoundError):
            context.resolve(f)

    @pytest.mark.parametrize("falsy", FALSY_VALUES)
    def test_resolves_falsy_dependencies(self, context: Context, falsy: object) -> None:
        assert context.wire(falsy).as_.value("foo").resolve(lambda foo: foo) is falsy

    @pytest.mark.parametrize("invalid", [*FALSY_VALUES, 42, "function"])
    def test_raises_for_non_callables(self, context: Context, invalid: object) -> None:
        with pytest.raises(MortarNotCallableError, match="function"):
            context.resolve(invalid)  # type: ignore[arg-type]

    def test_non_callable_error_is_type_error(self, context: Context) -> None:
        with pytest.raises(TypeError):
            context.resolve(None)  # type: ignore[arg-type]

    def test_calls_function_without_dependencies(self, context: Context) -> None:
        called: list[bool] = []

        context.resolve(lambda: called.append(True))

        assert called == [True]

    def test_returns_function_result(self, context: Context) -> None:
        assert context.resolve(lambda: 42) == 42

    def test_keyword_only_dependencies_are_passed_by_keyword(self, context: Context) -> None:
        context.wire("engine").as_.value("engine")
        context.wire(True).as_.value("debug")

        def f(engine, *, debug):
            return engine, debug

        assert context.resolve(f) == ("engine", True)

    def test_variadic_parameters_are_not_resolved(self, context: Context) -> None:
        context.wire("engine").as_.value("engine")

        def f(engine, *args, **kwargs):
            return engine, args, kwargs

        assert context.resolve(f) == ("engine", (), {})

    def test_bound_methods_skip_self(self, context: Context) -> None:
        class Handler:
            def handle(self, request):
                return request

        context.wire("request").as_.value("request")

        assert context.resolve(Handler().handle) == "request"

    def test_child_resolves_through_parent(self, context: Context) -> None:
        context.wire("root").as_.value("foo")
        child = context.spawn()
        child.wire("child").as_.value("baz")

        assert child.resolve(lambda foo, baz: (foo, baz)) == ("root", "child")


class TestSpawn:
    def test_creates_child_context(self, context: Context) -> None:
        child = context.spawn()

        assert is_context(child)
        assert child.parent is context

    def test_root_has_no_parent(self, context: Context) -> None:
        assert context.parent is None

    def test_child_starts_empty(self, context: Context) -> None:
        context.wire(1).as_.value("one")

        child = context.spawn()

        assert not child.has("one")
        assert child.retrieve("one") == 1

    def test_child_sees_entries_wired_after_spawn(self, context: Context) -> None:
        child = context.spawn()
        context.wire("late").as_.value("late")

        assert child.retrieve("late") == "late"

    def test_child_shares_registry_and_module(self) -> None:
        parent = Context(__name__)

        child = parent.spawn()

        assert child.registry is parent.registry
        assert child.module == __name__

    def test_child_keeps_type(self, isolated_context_class: type[Context]) -> None:
        child = isolated_context_class().spawn()

        assert type(child) is isolated_context_class


class TestHasAndRelease:
    def test_release_unregisters_dependency(self, context: Context) -> None:
        context.wire(noop).as_.singleton("singleton")

        context.release("singleton")

        assert not context.has("singleton")

    def test_release_unknown_key_is_noop(self, context: Context) -> None:
        context.release("singleton")

        assert not context.has("singleton")

    def test_release_allows_rewiring(self, context: Context) -> None:
        context.wire(1).as_.value("number")
        context.release("number")
        context.wire(2).as_.value("number")

        assert context.retrieve("number") == 2

    def test_release_drops_cached_singleton(self, context: Context) -> None:
        def factory() -> dict[str, str]:
            return {}

        context.wire(factory).as_.singleton("service")
        first = context.retrieve("service")
        context.release("service")
        context.wire(factory).as_.singleton("service")

        assert context.retrieve("service") is not first

    def test_release_only_affects_own_store(self, context: Context) -> None:
        context.wire("root").as_.value("foo")
        child = context.spawn()

        child.release("foo")

        assert context.has("foo")
        assert child.retrieve("foo") == "root"

    def test_release_reveals_parent_entry(self, context: Context) -> None:
        context.wire("root").as_.value("foo")
        child = context.spawn()
        child.wire("child").as_.value("foo")

        child.release("foo")

        assert child.retrieve("foo") == "root"

    def test_has_ignores_ancestors(self, context: Context) -> None:
        context.wire("root").as_.value("foo")

        assert context.has("foo")
        assert not context.spawn().has("foo")
