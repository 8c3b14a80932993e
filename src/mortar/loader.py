from __future__ import annotations

import hashlib
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, TypeAlias

from mortar.exceptions import MortarMisuseError, MortarModuleLoadError

logger = logging.getLogger(__name__)

ModuleHandle: TypeAlias = "ModuleType | str"
"""An owning module, given as a module object or a name in ``sys.modules``."""

_ATTRIBUTE_SEPARATOR = ":"


class ModuleLoader:
    """Load modules by file path relative to an owning module.

    Targets are written as ``"relative/path.py:attribute"``. The ``.py``
    suffix is optional and a directory loads its ``__init__.py``. Loaded
    modules are cached by absolute path, so requiring the same file twice
    returns the same objects.
    """

    def __init__(self) -> None:
        self._modules: dict[Path, ModuleType] = {}

    def load(self, owner: ModuleHandle | None, target: str) -> Any:
        """Return the object named by ``target``.

        Raises:
            MortarMisuseError: If ``owner`` is ``None``.
            MortarModuleLoadError: If the file or attribute cannot be found.

        """
        if owner is None:
            msg = (
                "Cannot require modules from a Context created without a module. "
                "Pass the owning module, for example Context(sys.modules[__name__])."
            )
            raise MortarMisuseError(msg)

        relative, _, attribute = target.partition(_ATTRIBUTE_SEPARATOR)
        path = self._resolve_path(self._owner_directory(owner), relative)
        module = self._modules.get(path)
        if module is None:
            module = self._execute(path)
            self._modules[path] = module

        if not attribute:
            return module
        try:
            return getattr(module, attribute)
        except AttributeError as error:
            msg = f"Module {str(path)!r} has no attribute {attribute!r}."
            raise MortarModuleLoadError(msg, path=str(path)) from error

    def _owner_directory(self, owner: ModuleHandle) -> Path:
        module = sys.modules.get(owner) if isinstance(owner, str) else owner
        filename = getattr(module, "__file__", None)
        if module is None or filename is None:
            msg = f"Owning module {owner!r} has no file to resolve paths against."
            raise MortarMisuseError(msg)
        return Path(filename).resolve().parent

    def _resolve_path(self, directory: Path, relative: str) -> Path:
        candidate = (directory / relative).resolve()
        for path in (candidate, candidate.with_name(candidate.name + ".py"), candidate / "__init__.py"):
            if path.is_file() and path.suffix == ".py":
                return path
        msg = f"Cannot find module {relative!r} relative to {str(directory)!r}."
        raise MortarModuleLoadError(msg)

    def _execute(self, path: Path) -> ModuleType:
        digest = hashlib.sha1(str(path).encode(), usedforsecurity=False).hexdigest()[:12]
        module_name = f"_mortar_required_{path.stem}_{digest}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            msg = f"Cannot load module from {str(path)!r}."
            raise MortarModuleLoadError(msg, path=str(path))

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            del sys.modules[module_name]
            raise
        logger.info("Loaded module %s from %s", module_name, path)
        return module
