"""nestlex exception hierarchy.

Every failure kind the localizer recovers from has its own type, so the
recovery paths (empty resource, next locale, placeholder string) are
visible in signatures and in the load summary rather than hidden behind
a bare catch-and-continue.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Sequence

__all__ = [
    "CyclicReferenceError",
    "DepthLimitExceededError",
    "KeyMissingError",
    "KeyPartialError",
    "KeyResolutionError",
    "LoadFailureError",
    "LocalizerError",
    "MessageFormatError",
    "ResourceShapeError",
]


class LocalizerError(Exception):
    """Base exception for all nestlex errors."""


class LoadFailureError(LocalizerError):
    """Resource load failed without an exception of its own.

    Raised for cancelled loader tasks. Loader exceptions are recorded as-is.

    Fallback: the pair settles to an empty resource.

    Attributes:
        locale: Locale of the failed pair
        module: Module of the failed pair
    """

    def __init__(self, message: str, *, locale: str = "", module: str = "") -> None:
        super().__init__(message)
        self.locale = locale
        self.module = module


class ResourceShapeError(LocalizerError, ValueError):
    """Loaded value is not a tree of string leaves.

    Attributes:
        path: Key path of the offending node (empty for the root)
    """

    def __init__(self, message: str, *, path: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.path = tuple(path)


class KeyResolutionError(LocalizerError):
    """Key could not be resolved for one locale.

    Fallback: the formatter tries the next locale in priority order.

    Attributes:
        locale: Locale that was searched
        module: Module that was searched
        key: Key path that failed
    """

    def __init__(
        self,
        message: str,
        *,
        locale: str,
        module: str,
        key: Sequence[str],
    ) -> None:
        super().__init__(message)
        self.locale = locale
        self.module = module
        self.key = tuple(key)


class KeyMissingError(KeyResolutionError):
    """No leaf exists at the key path (absent or empty string)."""


class KeyPartialError(KeyResolutionError):
    """Key path ends on an intermediate mapping instead of a string."""


class CyclicReferenceError(KeyResolutionError):
    """Nesting reference chain refers back to a key being expanded.

    Example:
        {"a": "<:b/>", "b": "<:a/>"}  <- Infinite loop!

    Attributes:
        cycle: Reference identifiers from the first expansion to the repeat
    """

    def __init__(
        self,
        message: str,
        *,
        locale: str,
        module: str,
        key: Sequence[str],
        cycle: Sequence[str],
    ) -> None:
        super().__init__(message, locale=locale, module=module, key=key)
        self.cycle = tuple(cycle)


class DepthLimitExceededError(KeyResolutionError):
    """Nesting reference chain exceeds the configured maximum depth."""


class MessageFormatError(LocalizerError):
    """Locale-aware placeholder formatting failed.

    Attributes:
        fallback_value: Plain rendering of the value that failed to format
    """

    def __init__(self, message: str, fallback_value: str) -> None:
        super().__init__(message)
        self.fallback_value = fallback_value
