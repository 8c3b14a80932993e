from mortar.context import Context
from mortar.context_interface import ContextProtocol, is_context
from mortar.dependencies import get_dependencies
from mortar.exceptions import (
    MortarCircularDependencyError,
    MortarDependencyNotFoundError,
    MortarDuplicateKeyError,
    MortarDuplicateProviderError,
    MortarError,
    MortarInvalidKeyError,
    MortarInvalidOverrideError,
    MortarInvalidProviderError,
    MortarMisuseError,
    MortarModuleLoadError,
    MortarNotCallableError,
)
from mortar.overrides import OverrideView
from mortar.providers import Lifetime, ProviderDefinition, ProviderRegistry
from mortar.wiring import WireBuilder

__all__ = [
    "Context",
    "ContextProtocol",
    "Lifetime",
    "MortarCircularDependencyError",
    "MortarDependencyNotFoundError",
    "MortarDuplicateKeyError",
    "MortarDuplicateProviderError",
    "MortarError",
    "MortarInvalidKeyError",
    "MortarInvalidOverrideError",
    "MortarInvalidProviderError",
    "MortarMisuseError",
    "MortarModuleLoadError",
    "MortarNotCallableError",
    "OverrideView",
    "ProviderDefinition",
    "ProviderRegistry",
    "WireBuilder",
    "get_dependencies",
    "is_context",
]
