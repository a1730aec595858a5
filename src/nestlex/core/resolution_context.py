"""Resolution context for nesting-reference expansion.

Tracks the chain of references currently being expanded so that
self-referential resources fail with a distinct error instead of running
into Python's recursion limit.

Thread Safety:
    ResolutionContext is created per read() call for full isolation.

Python 3.13+.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

from nestlex.constants import MAX_DEPTH

__all__ = ["ResolutionContext", "depth_clamp"]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ResolutionContext:
    """Explicit per-read state for nesting expansion.

    Performance: Uses both list (for ordered path) and set (for O(1) lookup)
    to optimize cycle detection while preserving path information for errors.

    Attributes:
        stack: Reference identifiers being expanded, outermost first
        max_depth: Maximum expansion depth
    """

    stack: list[str] = field(default_factory=list)
    _seen: set[str] = field(default_factory=set)
    max_depth: int = MAX_DEPTH

    def push(self, ref_id: str) -> None:
        """Push reference identifier onto the expansion stack."""
        self.stack.append(ref_id)
        self._seen.add(ref_id)

    def pop(self) -> str:
        """Pop reference identifier from the expansion stack."""
        ref_id = self.stack.pop()
        self._seen.discard(ref_id)
        return ref_id

    def contains(self, ref_id: str) -> bool:
        """Check if reference is already being expanded (cycle detection)."""
        return ref_id in self._seen

    @property
    def depth(self) -> int:
        """Current expansion depth."""
        return len(self.stack)

    def is_depth_exceeded(self) -> bool:
        """Check if maximum depth has been reached."""
        return self.depth >= self.max_depth

    def get_cycle_path(self, ref_id: str) -> list[str]:
        """Get the cycle path for error reporting."""
        start = self.stack.index(ref_id) if ref_id in self._seen else 0
        return [*self.stack[start:], ref_id]


def depth_clamp(requested_depth: int, reserve_frames: int = 50) -> int:
    """Clamp requested depth against Python recursion limit.

    Each nesting level costs several interpreter frames (read, regex
    substitution callback, expansion), so the safe depth is well below
    sys.getrecursionlimit(). Logs warning if clamping occurs.

    Args:
        requested_depth: Desired maximum depth
        reserve_frames: Stack frames to reserve for call overhead (default: 50)

    Returns:
        Safe depth value, clamped if necessary

    Example:
        >>> import sys
        >>> sys.setrecursionlimit(1000)
        >>> depth_clamp(100)
        100
        >>> depth_clamp(500)  # Exceeds limit, clamped
        316
    """
    max_safe_depth = max(1, (sys.getrecursionlimit() - reserve_frames) // 3)
    if requested_depth > max_safe_depth:
        logger.warning(
            "Requested depth %d exceeds Python recursion limit (%d). "
            "Clamping to %d to prevent RecursionError. "
            "Consider increasing sys.setrecursionlimit() if needed.",
            requested_depth,
            sys.getrecursionlimit(),
            max_safe_depth,
        )
        return max_safe_depth
    return requested_depth
