"""Shared constants for nestlex.

Single source of truth for limits, token patterns and fallback strings used
across the localization, markup and runtime packages. Placing them here
avoids circular imports between those packages.

Python 3.13+. Zero external dependencies.
"""

import re

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Depth limits
    "MAX_DEPTH",
    "MAX_RESOURCE_DEPTH",
    # Cache limits
    "MAX_LOCALE_CACHE_SIZE",
    # Token patterns
    "NESTING_PATTERN",
    "TAG_PATTERN",
    "PLACEHOLDER_PATTERN",
    # Fallback strings
    "FALLBACK_SEPARATOR",
    "FALLBACK_MISSING_TRANSLATION",
    "ROOT_TAG",
    "KEY_SEPARATOR",
    "MODULE_SEPARATOR",
]

# ============================================================================
# DEPTH LIMITS
# ============================================================================

# Maximum nesting-reference expansion depth (<:a/> -> <:b/> -> ...).
# Real resources nest a handful of levels; anything near 100 is a runaway
# chain. Clamped against sys.getrecursionlimit() at resolver construction.
MAX_DEPTH: int = 100

# Maximum nesting of mappings inside one loaded resource tree.
MAX_RESOURCE_DEPTH: int = 100

# ============================================================================
# CACHE LIMITS
# ============================================================================

# Maximum cached LocaleContext instances (process-wide Babel locale cache).
MAX_LOCALE_CACHE_SIZE: int = 128

# ============================================================================
# TOKEN PATTERNS
# ============================================================================

# Self-closing nesting reference: <:key.path/> or <:module:key.path/>
NESTING_PATTERN: re.Pattern[str] = re.compile(r"<:(.+?)/>")

# Markup tag: <name>, </name>, <name/>. Names never contain ':' (nesting),
# '>', '/' or whitespace.
TAG_PATTERN: re.Pattern[str] = re.compile(r"<(/?)([^:>/\s]+)(/?)>")

# Babel message placeholder: {name} or {name, kind} or {name, kind, style}
PLACEHOLDER_PATTERN: re.Pattern[str] = re.compile(
    r"\{\s*([A-Za-z_][\w.]*)\s*(?:,\s*([A-Za-z]+)\s*(?:,\s*([^{}]+?)\s*)?)?\}"
)

# ============================================================================
# FALLBACK STRINGS
# ============================================================================

# Separator of attempted locales in the missing-translation marker.
FALLBACK_SEPARATOR: str = "|"

# Visible marker returned when every locale fails, e.g. "pt-BR|en-US:base:a.b".
# Format string - use .format(locales=..., module=..., key=...).
FALLBACK_MISSING_TRANSLATION: str = "{locales}:{module}:{key}"

# Tag name passed to the fallback wrapper when aggregating the root frame.
ROOT_TAG: str = ""

# Separator between key path segments in flattened keys and references.
KEY_SEPARATOR: str = "."

# Separator between module and key inside a nesting reference.
MODULE_SEPARATOR: str = ":"
