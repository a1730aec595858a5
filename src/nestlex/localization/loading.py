"""Resource loading infrastructure for Localizer.

Provides the protocol for resource loaders, filesystem implementations
with path-traversal security, resource shape validation, and
result/summary data structures for tracking load attempts.

Components:
    ResourceLoader - Protocol for loading resources (structural typing)
    PathResourceLoader - Disk-based JSON loader with path-traversal prevention
    AsyncPathResourceLoader - Same, reading in a worker thread
    validate_resource - String-tree invariant check
    FallbackInfo - Immutable record of a locale fallback event
    ResourceLoadResult - Immutable result of a single resource load attempt
    LoadSummary - Immutable aggregate of load results

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from nestlex.constants import MAX_RESOURCE_DEPTH
from nestlex.diagnostics.errors import ResourceShapeError
from nestlex.enums import LoadStatus
from nestlex.localization.types import KeyPath, LocaleCode, ModuleName, Resource

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocol
    "ResourceLoader",
    # Concrete loaders
    "PathResourceLoader",
    "AsyncPathResourceLoader",
    # Validation
    "validate_resource",
    # Fallback observability
    "FallbackInfo",
    # Load result types
    "ResourceLoadResult",
    "LoadSummary",
]


class ResourceLoader(Protocol):
    """Protocol for loading resources for a (locale, module) pair.

    Any callable with this signature qualifies, including plain functions
    and async functions. Results are cached for the localizer lifetime, so
    a loader must return the same tree for the same arguments.

    Example:
        >>> def load(locale: str, module: str) -> dict[str, object]:
        ...     return TRANSLATIONS[locale][module]
        >>> localizer = Localizer(load)
    """

    def __call__(
        self, locale: LocaleCode, module: ModuleName
    ) -> Resource | Awaitable[Resource]:
        """Load the resource tree for one pair.

        Raises:
            FileNotFoundError: If the resource doesn't exist for this locale
            Exception: Any other failure; recorded as a load error
        """
        ...


def validate_resource(value: Any, path: KeyPath = ()) -> Resource:
    """Check that value is a mapping tree with string keys and string leaves.

    Args:
        value: Loaded value to check
        path: Key path of value inside the root (for error messages)

    Returns:
        The same value, typed as Resource

    Raises:
        ResourceShapeError: On the first non-mapping root, non-string key,
            non-string, non-mapping leaf, mapping containing one of its own
            ancestors, or nesting deeper than MAX_RESOURCE_DEPTH
    """
    if not isinstance(value, Mapping):
        where = ".".join(path) or "<root>"
        msg = f"Resource node at '{where}' must be a mapping, got {type(value).__name__}"
        raise ResourceShapeError(msg, path=path)
    _validate_children(value, tuple(path), {id(value)})
    return value


def _validate_children(node: Mapping[Any, Any], path: KeyPath, ancestors: set[int]) -> None:
    if len(path) >= MAX_RESOURCE_DEPTH:
        msg = f"Resource nesting exceeds {MAX_RESOURCE_DEPTH} levels at '{'.'.join(path)}'"
        raise ResourceShapeError(msg, path=path)
    for key, child in node.items():
        if not isinstance(key, str):
            msg = f"Resource keys must be strings, got {type(key).__name__} under {path!r}"
            raise ResourceShapeError(msg, path=path)
        if isinstance(child, str):
            continue
        child_path = (*path, key)
        where = ".".join(child_path)
        if not isinstance(child, Mapping):
            msg = f"Resource leaf at '{where}' must be a string, got {type(child).__name__}"
            raise ResourceShapeError(msg, path=child_path)
        if id(child) in ancestors:
            msg = f"Resource node at '{where}' contains itself"
            raise ResourceShapeError(msg, path=child_path)
        ancestors.add(id(child))
        _validate_children(child, child_path, ancestors)
        ancestors.discard(id(child))


@dataclass(frozen=True, slots=True)
class PathResourceLoader:
    """File system resource loader using path templates.

    Loads ``<base_path with {locale} substituted>/<module><suffix>`` as JSON.

    Security:
        Validates both locale and module to prevent directory traversal attacks.
        Locale codes or module names containing path separators or ".." are
        rejected. All resolved paths are validated against a fixed root directory.

    Example:
        >>> loader = PathResourceLoader("locales/{locale}")
        >>> resource = loader("en-US", "base")
        # Loads from: locales/en-US/base.json

    Attributes:
        base_path: Path template with {locale} placeholder
        root_dir: Fixed root directory for path traversal validation.
                  Defaults to the static prefix of base_path.
        suffix: File suffix appended to the module name
    """

    base_path: str
    root_dir: str | None = None
    suffix: str = ".json"
    _resolved_root: Path = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Cache resolved root directory and validate template at initialization.

        Raises:
            ValueError: If base_path does not contain {locale} placeholder
        """
        if "{locale}" not in self.base_path:
            msg = (
                f"base_path must contain '{{locale}}' placeholder for locale substitution, "
                f"got: '{self.base_path}'"
            )
            raise ValueError(msg)

        if self.root_dir is not None:
            resolved = Path(self.root_dir).resolve()
        else:
            # "locales/{locale}" -> "locales"
            static_prefix = self.base_path.split("{locale}")[0].rstrip("/\\")
            resolved = Path(static_prefix).resolve() if static_prefix else Path.cwd().resolve()
        object.__setattr__(self, "_resolved_root", resolved)

    @staticmethod
    def _validate_segment(kind: str, value: str) -> None:
        """Validate a locale code or module name for path traversal attacks.

        Raises:
            ValueError: If value is empty, padded, or contains unsafe path components
        """
        if not value:
            msg = f"{kind} cannot be empty"
            raise ValueError(msg)
        if value.strip() != value:
            msg = f"{kind} contains leading/trailing whitespace: {value!r}"
            raise ValueError(msg)
        if ".." in value:
            msg = f"Path traversal sequences not allowed in {kind.lower()}: '{value}'"
            raise ValueError(msg)
        if "/" in value or "\\" in value:
            msg = f"Path separators not allowed in {kind.lower()}: '{value}'"
            raise ValueError(msg)

    def describe_path(self, locale: LocaleCode, module: ModuleName) -> str:
        """Return human-readable path for diagnostics."""
        locale_path = self.base_path.replace("{locale}", locale)
        return f"{locale_path}/{module}{self.suffix}"

    def resolve_path(self, locale: LocaleCode, module: ModuleName) -> Path:
        """Resolve and validate the file path for one pair.

        Raises:
            ValueError: If locale or module is unsafe, or the resolved path
                escapes the root directory
        """
        self._validate_segment("Locale", locale)
        self._validate_segment("Module", module)

        # replace() instead of format(): templates may contain other braces
        locale_path = self.base_path.replace("{locale}", locale)
        full_path = (Path(locale_path) / f"{module}{self.suffix}").resolve()

        try:
            full_path.relative_to(self._resolved_root)
        except ValueError:
            msg = (
                f"Path traversal detected: resolved path escapes root directory. "
                f"locale='{locale}', module='{module}'"
            )
            raise ValueError(msg) from None
        return full_path

    def __call__(self, locale: LocaleCode, module: ModuleName) -> Resource:
        """Load and validate a JSON resource from disk.

        Raises:
            ValueError: If locale or module is unsafe
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file is not valid JSON
            ResourceShapeError: If the JSON is not a string tree
        """
        full_path = self.resolve_path(locale, module)
        with full_path.open(encoding="utf-8") as handle:
            return validate_resource(json.load(handle))


@dataclass(frozen=True, slots=True)
class AsyncPathResourceLoader:
    """Asynchronous variant of PathResourceLoader.

    Delegates to a PathResourceLoader in a worker thread so that disk reads
    never block the event loop.

    Example:
        >>> loader = AsyncPathResourceLoader(PathResourceLoader("locales/{locale}"))
        >>> localizer = Localizer(loader)
    """

    loader: PathResourceLoader

    def describe_path(self, locale: LocaleCode, module: ModuleName) -> str:
        """Return human-readable path for diagnostics."""
        return self.loader.describe_path(locale, module)

    async def __call__(self, locale: LocaleCode, module: ModuleName) -> Resource:
        """Load a resource in a worker thread."""
        return await asyncio.to_thread(self.loader, locale, module)


@dataclass(frozen=True, slots=True)
class FallbackInfo:
    """Information about a locale fallback event.

    Provided to the on_fallback callback when Localizer resolves a key
    using a fallback locale instead of the primary locale.

    Attributes:
        requested_locale: The primary (first) locale in the chain
        resolved_locale: The locale that actually contained the key
        module: Module of the resolved key
        key: Key path that was resolved

    Example:
        >>> def log_fallback(info: FallbackInfo) -> None:
        ...     print(f"Fallback: {info.module}:{'.'.join(info.key)} resolved from "
        ...           f"{info.resolved_locale} (requested {info.requested_locale})")
        >>> localizer = Localizer(load, on_fallback=log_fallback)
    """

    requested_locale: LocaleCode
    resolved_locale: LocaleCode
    module: ModuleName
    key: KeyPath


@dataclass(frozen=True, slots=True)
class ResourceLoadResult:
    """Result of loading a single resource.

    Attributes:
        locale: Locale code for this resource
        module: Module name for this resource
        status: Load status (loading, success, not_found, error)
        error: Exception if status is NOT_FOUND or ERROR, None otherwise
        source_path: Human-readable path to resource (if the loader knows it)
    """

    locale: LocaleCode
    module: ModuleName
    status: LoadStatus
    error: Exception | None = None
    source_path: str | None = None

    @property
    def is_loading(self) -> bool:
        """Check if the load has not settled yet."""
        return self.status == LoadStatus.LOADING

    @property
    def is_success(self) -> bool:
        """Check if resource loaded successfully."""
        return self.status == LoadStatus.SUCCESS

    @property
    def is_not_found(self) -> bool:
        """Check if resource was not found (expected for optional locales)."""
        return self.status == LoadStatus.NOT_FOUND

    @property
    def is_error(self) -> bool:
        """Check if resource load failed with an error."""
        return self.status == LoadStatus.ERROR


@dataclass(frozen=True, slots=True)
class LoadSummary:
    """Immutable aggregate of resource load results.

    All statistics are computed properties derived from the ``results`` tuple.

    Attributes:
        results: All individual load results (immutable tuple)

    Example:
        >>> summary = await localizer.wait()
        >>> if summary.has_errors:
        ...     for result in summary.get_errors():
        ...         print(f"Failed: {result.locale}/{result.module}: {result.error}")
    """

    results: tuple[ResourceLoadResult, ...]

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"LoadSummary(total={self.total_attempted}, "
            f"ok={self.successful}, "
            f"not_found={self.not_found}, "
            f"errors={self.errors}, "
            f"pending={self.pending})"
        )

    @property
    def total_attempted(self) -> int:
        """Total number of load attempts."""
        return len(self.results)

    @property
    def successful(self) -> int:
        """Number of successful loads."""
        return sum(1 for r in self.results if r.is_success)

    @property
    def not_found(self) -> int:
        """Number of resources not found."""
        return sum(1 for r in self.results if r.is_not_found)

    @property
    def errors(self) -> int:
        """Number of load errors."""
        return sum(1 for r in self.results if r.is_error)

    @property
    def pending(self) -> int:
        """Number of loads not settled yet."""
        return sum(1 for r in self.results if r.is_loading)

    def get_errors(self) -> tuple[ResourceLoadResult, ...]:
        """Get all results with errors."""
        return tuple(r for r in self.results if r.is_error)

    def get_not_found(self) -> tuple[ResourceLoadResult, ...]:
        """Get all results where resource was not found."""
        return tuple(r for r in self.results if r.is_not_found)

    def get_successful(self) -> tuple[ResourceLoadResult, ...]:
        """Get all successful load results."""
        return tuple(r for r in self.results if r.is_success)

    def get_by_locale(self, locale: LocaleCode) -> tuple[ResourceLoadResult, ...]:
        """Get all results for a specific locale."""
        return tuple(r for r in self.results if r.locale == locale)

    def get_by_module(self, module: ModuleName) -> tuple[ResourceLoadResult, ...]:
        """Get all results for a specific module."""
        return tuple(r for r in self.results if r.module == module)

    @property
    def has_errors(self) -> bool:
        """Check if any resources failed to load with errors."""
        return self.errors > 0

    @property
    def all_settled(self) -> bool:
        """Check if no load is still in flight."""
        return self.pending == 0

    @property
    def all_successful(self) -> bool:
        """Check if all attempted resources loaded successfully.

        Returns:
            True if every result has SUCCESS status
        """
        return self.successful == self.total_attempted
