"""Core utilities shared across localization and runtime layers.

Exports:
    ResolutionContext: Expansion stack with cycle and depth detection
    depth_clamp: Clamp a depth limit against the interpreter recursion limit

Python 3.13+.
"""

from .resolution_context import ResolutionContext, depth_clamp

__all__ = ["ResolutionContext", "depth_clamp"]
