"""Error types for nestlex.

Python 3.13+. Zero external dependencies.
"""

from .errors import (
    CyclicReferenceError,
    DepthLimitExceededError,
    KeyMissingError,
    KeyPartialError,
    KeyResolutionError,
    LoadFailureError,
    LocalizerError,
    MessageFormatError,
    ResourceShapeError,
)

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
