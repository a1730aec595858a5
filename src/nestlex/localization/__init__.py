"""Multi-locale localization package for Localizer.

Provides the full resolution stack: type aliases, resource loading
infrastructure, the per-pair resource store, key resolution, formatting
with locale fallback, and the orchestrator tying them together.

Submodules:
    types        - PEP 695 type aliases (LocaleCode, ModuleName, KeyPath, Resource, ...)
    loading      - ResourceLoader protocol, PathResourceLoader, FallbackInfo,
                   ResourceLoadResult, LoadSummary
    store        - ResourceStore (per-pair load records and notifiers)
    resolver     - KeyResolver (lookup and nesting expansion)
    formatter    - MessageFormatter (compiled-message cache, locale fallback)
    orchestrator - Localizer

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from nestlex.enums import LoadStatus
from nestlex.localization.formatter import MessageFormatter, missing_translation
from nestlex.localization.loading import (
    AsyncPathResourceLoader,
    FallbackInfo,
    LoadSummary,
    PathResourceLoader,
    ResourceLoader,
    ResourceLoadResult,
    validate_resource,
)
from nestlex.localization.orchestrator import Localizer, create_localizer
from nestlex.localization.resolver import KeyResolver
from nestlex.localization.store import ResourceStore
from nestlex.localization.types import (
    KeyPath,
    LocaleCode,
    ModuleName,
    Resource,
)

__all__ = [
    # Main orchestrator
    "Localizer",
    "create_localizer",
    # Components
    "ResourceStore",
    "KeyResolver",
    "MessageFormatter",
    "missing_translation",
    # Loader protocol and implementations
    "ResourceLoader",
    "PathResourceLoader",
    "AsyncPathResourceLoader",
    "validate_resource",
    # Load tracking
    "LoadStatus",
    "LoadSummary",
    "ResourceLoadResult",
    # Fallback observability
    "FallbackInfo",
    # Type aliases for user code type annotations
    "KeyPath",
    "LocaleCode",
    "ModuleName",
    "Resource",
]
