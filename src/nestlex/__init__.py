"""nestlex - nested key-path localization with locale fallback.

Resolves translation strings on demand per (locale, module) pair and exposes
them as a navigable tree: ``localizer.t.base.errors.not_found(values)``.
Strings may reference each other (``<:other.key/>``) and carry inline markup
(``<a>link</a>``) rendered through caller-supplied tag wrappers.

Public API:
    Localizer - Multi-locale, multi-module orchestrator
    create_localizer - Factory for Localizer
    PathResourceLoader - JSON resource loader with {locale} path templates
    AsyncPathResourceLoader - Same, reading in a worker thread
    compile_message - Babel-backed parse collaborator
    LoadSummary - Aggregated load results returned by Localizer.wait()

Exceptions:
    LocalizerError - Base exception class
    KeyResolutionError - Key could not be resolved in one locale
    LoadFailureError - Loader failed without an exception of its own

Submodules:
    nestlex.localization - Store, resolver, formatter and loaders
    nestlex.markup - Inline tag parsing
    nestlex.proxy - Key-path tree nodes
    nestlex.runtime - Babel LocaleContext and message compiler
    nestlex.introspection - Raw string introspection and stub generation
    nestlex.diagnostics - Error types
"""

# Essential Public API - Minimal exports for clean namespace
from .diagnostics import (
    KeyResolutionError,
    LoadFailureError,
    LocalizerError,
)
from .localization import (
    AsyncPathResourceLoader,
    LoadSummary,
    Localizer,
    PathResourceLoader,
    create_localizer,
)
from .runtime import compile_message

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("nestlex")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "AsyncPathResourceLoader",
    "KeyResolutionError",
    "LoadFailureError",
    "LoadSummary",
    "Localizer",
    "LocalizerError",
    "PathResourceLoader",
    "__version__",
    "compile_message",
    "create_localizer",
]
