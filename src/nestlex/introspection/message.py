"""Raw translation string introspection.

Extracts what a raw string depends on without resolving it: nesting
references, markup tag names and Babel placeholders. Useful for linting
resources (dangling references, tags without wrappers, values a caller
must supply) before they reach a Localizer.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from nestlex.constants import NESTING_PATTERN, TAG_PATTERN
from nestlex.localization.resolver import parse_reference
from nestlex.localization.types import KeyPath, ModuleName
from nestlex.runtime.message_format import Placeholder, parse_segments

__all__ = [
    "MessageIntrospection",
    "extract_placeholders",
    "extract_references",
    "extract_tags",
    "introspect_message",
]


@dataclass(frozen=True, slots=True)
class MessageIntrospection:
    """Dependencies of one raw string.

    Attributes:
        references: (module, key) pairs referenced with ``<:.../>``
        tags: Markup tag names, opening, closing and self-closing
        placeholders: Placeholder names (without kind or style)
    """

    references: frozenset[tuple[ModuleName, KeyPath]]
    tags: frozenset[str]
    placeholders: frozenset[str]

    def requires_values(self) -> bool:
        """Check if rendering needs a values mapping."""
        return bool(self.placeholders)

    def has_markup(self) -> bool:
        """Check if the string needs tag parsing."""
        return bool(self.tags)


def extract_references(raw: str, module: ModuleName) -> frozenset[tuple[ModuleName, KeyPath]]:
    """Get the nesting references of a raw string.

    Args:
        raw: Raw translation string
        module: Module the string belongs to (default for unqualified references)

    Example:
        >>> sorted(extract_references("<:a.b/> and <:md:c/>", "base"))
        [('base', ('a', 'b')), ('md', ('c',))]
    """
    return frozenset(parse_reference(ref, module) for ref in NESTING_PATTERN.findall(raw))


def extract_tags(raw: str) -> frozenset[str]:
    """Get the markup tag names of a raw string.

    Nesting references are not tags.

    Example:
        >>> sorted(extract_tags("<a>x</a><br/><:k/>"))
        ['a', 'br']
    """
    return frozenset(match.group(2) for match in TAG_PATTERN.finditer(raw))


def extract_placeholders(raw: str) -> frozenset[str]:
    """Get the Babel placeholder names of a raw string.

    Raises:
        ValueError: If a placeholder is invalid (see parse_segments)
    """
    return frozenset(
        segment.name for segment in parse_segments(raw) if isinstance(segment, Placeholder)
    )


def introspect_message(raw: str, module: ModuleName) -> MessageIntrospection:
    """Collect every dependency of a raw string.

    Raises:
        ValueError: If a placeholder is invalid
    """
    return MessageIntrospection(
        references=extract_references(raw, module),
        tags=extract_tags(raw),
        placeholders=extract_placeholders(raw),
    )
