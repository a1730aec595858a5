"""Inline markup parsing for resolved translation strings.

Supported formats are ``<tag>``, ``</tag>``, and ``<tag/>``. Tags whose
name contains ``:`` are nesting references, already expanded by the
resolver, and are never matched here.

Parsing is a single left-to-right scan keeping a stack of child lists,
one per open tag, with the root frame always present. Closing is decided
by stack depth, not by tag name, so unbalanced markup produces an
unexpected tree but never raises:

    - an excess closer at the root wraps everything read so far;
    - frames left open at the end are flattened into the result in order.

The flattened children are passed to the fallback wrapper once more with
an empty tag name to aggregate them into a single value.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from nestlex.constants import ROOT_TAG, TAG_PATTERN

__all__ = ["TagParser", "TagWrapper", "join_children"]

type TagWrapper = Callable[[list[Any], str], Any]
"""Renders a tag name and its children into an output value."""


def join_children(children: list[Any], tag: str) -> str:
    """Default fallback wrapper: concatenate children as text, dropping the tag.

    Example:
        >>> join_children(["a", "b"], "em")
        'ab'
    """
    return "".join(str(child) for child in children)


class TagParser[TTag]:
    """Parser replacing tags in text with wrapper function results.

    Example:
        >>> def wrap(children, tag):
        ...     return f"<{tag}>{''.join(children)}</{tag}>"
        >>> parser = TagParser()
        >>> parser.parse("0<a>1<b/>2</a>3", {"a": wrap, "b": wrap})
        '0<a>1<b></b>2</a>3'
    """

    __slots__ = ("_fallback",)

    def __init__(self, fallback: TagWrapper = join_children) -> None:
        """Initialize parser.

        Args:
            fallback: Wrapper for tags missing from the per-call map, also
                used with an empty tag name to aggregate the root
        """
        self._fallback = fallback

    @property
    def fallback(self) -> TagWrapper:
        """Wrapper used for unmapped tags and root aggregation."""
        return self._fallback

    def parse(self, text: str = "", tags: Mapping[str, TagWrapper] | None = None) -> TTag | str:
        """Parse markup in text into a single aggregated value.

        Args:
            text: Text containing tags
            tags: Wrappers by tag name; missing names use the fallback

        Returns:
            Result of the fallback wrapper applied to the root children
        """
        tags = tags if tags is not None else {}
        stack: list[list[TTag | str]] = [[]]
        done = 0
        for match in TAG_PATTERN.finditer(text):
            children = stack[-1]
            if done < match.start():
                children.append(text[done : match.start()])
            closing, name, self_closing = match.groups()
            wrapper = tags.get(name) or self._fallback
            if self_closing:
                children.append(wrapper([], name))
            elif not closing:
                stack.append([])
            elif len(stack) > 1:
                stack.pop()
                stack[-1].append(wrapper(children, name))
            else:
                stack[0] = [wrapper(list(children), name)]
            done = match.end()
        if done < len(text):
            stack[-1].append(text[done:])
        return self._fallback([child for frame in stack for child in frame], ROOT_TAG)

    def __call__(self, text: str = "", tags: Mapping[str, TagWrapper] | None = None) -> TTag | str:
        """Alias for parse()."""
        return self.parse(text, tags)
