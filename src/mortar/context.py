from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from mortar._internal.entries import Entry, EntryStore, materializing
from mortar.dependencies import DependenciesExtractor
from mortar.exceptions import MortarDependencyNotFoundError, MortarMisuseError
from mortar.loader import ModuleHandle, ModuleLoader
from mortar.overrides import OverrideView
from mortar.providers import ProviderDefinition, ProviderRegistry, ProviderSource
from mortar.wiring import WireBuilder

if TYPE_CHECKING:
    from typing_extensions import Self

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Context:
    """Wire values and factories by key and resolve functions by parameter name.

    A context owns an entry store and optionally points at a parent. Lookups
    walk from the context towards the root, so a child sees everything its
    ancestors wire while its own entries shadow theirs and stay invisible to
    them. Each entry caches on the context that owns it, which keeps
    ``singleton`` instances separate between siblings and between a child and
    its parent.

    Provider strategies live in a ``ProviderRegistry`` shared by every context
    built from the same class (``Context.providers``) unless a registry is
    passed explicitly. Spawned children always share their parent's registry.

    Examples:
        .. code-block:: python

            root = Context()
            root.wire("sqlite://").as_.value("dsn")
            root.wire(Engine).as_.singleton("engine")

            request = root.spawn()
            request.wire(Session).as_.producer("session")
            session = request.retrieve("session")

            report = request.using({"dsn": "sqlite://:memory:"}).resolve(
                lambda dsn, engine: (dsn, engine),
            )

    """

    providers: ClassVar[ProviderRegistry] = ProviderRegistry.with_builtins()
    """Provider strategies shared by contexts that do not pass ``registry``."""

    _dependencies_extractor: ClassVar[DependenciesExtractor] = DependenciesExtractor()
    _module_loader: ClassVar[ModuleLoader] = ModuleLoader()

    def __init__(
        self,
        module: ModuleHandle | None = None,
        *,
        registry: ProviderRegistry | None = None,
        parent: Context | None = None,
    ) -> None:
        """Initialize an empty context.

        Args:
            module: Owning module used by ``require`` to resolve relative paths.
                Accepts a module object or a name present in ``sys.modules``.
            registry: Provider strategies available to ``wire``. Defaults to the
                class-level ``providers`` registry.
            parent: Context consulted when a key is not wired locally. Usually
                set through ``spawn`` rather than passed directly.

        """
        self._store = EntryStore()
        self._module = module
        self._registry = registry if registry is not None else type(self).providers
        self._parent = parent

    @classmethod
    def create(cls, *args: Any, **kwargs: Any) -> Self:
        """Alternate constructor, equivalent to calling the class."""
        return cls(*args, **kwargs)

    @classmethod
    def register(cls, source: ProviderSource) -> ProviderDefinition:
        """Register a provider strategy on the class-level registry.

        Args:
            source: A ``ProviderDefinition``, a mapping with ``name`` and
                ``configure``, or a named function used as ``configure``.

        Raises:
            MortarDuplicateProviderError: If the name is already registered.
            MortarInvalidProviderError: If the definition is malformed.

        """
        return cls.providers.register(source)

    @classmethod
    def get_dependencies(cls, fn: Callable[..., Any]) -> list[str]:
        """Return the ordered parameter names of ``fn``.

        Raises:
            MortarNotCallableError: If ``fn`` is not callable.

        """
        return cls._dependencies_extractor.names(fn)

    @property
    def parent(self) -> Context | None:
        return self._parent

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    @property
    def module(self) -> ModuleHandle | None:
        return self._module

    def wire(self, subject: Any) -> WireBuilder:
        """Stage ``subject`` for wiring; finish with ``.as_.<strategy>(key)``.

        Any subject is accepted, falsy values included.
        """
        return WireBuilder(subject, context=self, store=self._store, registry=self._registry)

    def require(self, target: str) -> WireBuilder:
        """Load ``target`` relative to the owning module and stage it for wiring.

        Args:
            target: ``"relative/path.py:attribute"``. Without ``:attribute`` the
                module object itself is staged.

        Raises:
            MortarMisuseError: If the context was created without a module.
            MortarModuleLoadError: If the file or attribute cannot be found.

        """
        subject = self._module_loader.load(self._module, target)
        return self.wire(subject)

    def retrieve(self, key: str) -> Any:
        """Return the value wired under ``key`` on this context or its nearest ancestor.

        Raises:
            MortarDependencyNotFoundError: If no context in the chain wires ``key``.
            MortarCircularDependencyError: If building the value requires itself.

        """
        context: Context | None = self
        while context is not None:
            entry = context._store.get(key)
            if entry is not None:
                return context._materialize(entry)
            context = context._parent
        raise MortarDependencyNotFoundError(key)

    def resolve(self, fn: Callable[..., T]) -> T:
        """Call ``fn`` with arguments retrieved by parameter name.

        Raises:
            MortarNotCallableError: If ``fn`` is not callable.
            MortarDependencyNotFoundError: If any parameter cannot be retrieved.

        """
        return self._invoke(fn, self.retrieve)

    def using(self, source: Any) -> OverrideView:
        """Return a view that resolves with ``source`` taking precedence.

        Args:
            source: A mapping of key to value, another context, or a function
                that is resolved immediately on this context and must return a
                mapping.

        Raises:
            MortarInvalidOverrideError: If ``source`` has any other shape.

        """
        return OverrideView.from_source(self, source)

    def has(self, key: str) -> bool:
        """Return whether ``key`` is wired on this context itself, ignoring ancestors."""
        return key in self._store

    def release(self, key: str) -> None:
        """Remove ``key`` and its cached value from this context. Missing keys are ignored."""
        if self._store.remove(key) is not None:
            logger.debug("Released %r from %r", key, self)

    def spawn(self) -> Self:
        """Return a child context that falls back to this one for lookups."""
        return type(self)(self._module, registry=self._registry, parent=self)

    def __call__(self, *_args: Any, **_kwargs: Any) -> Any:
        msg = "Cannot call a Context directly; use resolve() or retrieve() instead."
        raise MortarMisuseError(msg)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} keys={sorted(self._store)!r}>"

    def _materialize(self, entry: Entry) -> Any:
        provider = entry.provider
        if not provider.invokes:
            return entry.subject
        if entry.cached:
            return entry.cache

        with materializing(entry):
            value = self.resolve(entry.subject)

        if provider.caches:
            entry.store(value)
            logger.debug("Cached %s %r on %r", provider.name, entry.key, self)
        return value

    def _invoke(self, fn: Callable[..., T], retrieve: Callable[[str], Any]) -> T:
        dependencies = self._dependencies_extractor.extract(fn)
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for dependency in dependencies:
            value = retrieve(dependency.name)
            if dependency.keyword_only:
                kwargs[dependency.name] = value
            else:
                args.append(value)
        return fn(*args, **kwargs)
