"""Lazy key-path navigation tree.

The root node has neither module nor key. The first attribute read on it
selects the module; every further read appends a key segment::

    t.base.errors.not_found()          # module "base", key ("errors", "not_found")
    t.base["not-found"]()              # segments that are not identifiers
    getattr(t.base.errors, "$")[name]  # "$" returns the node itself

Children are created on first access and memoized per parent, so repeated
navigation of the same path returns the same node. Calling a node formats
its key path and, only when tag wrappers are given, parses the markup.

Nodes carry no public attributes: every non-dunder attribute name is a
key segment. Use key_path_of() to inspect a node.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from nestlex.localization.types import KeyPath, MessageValues, ModuleName
from nestlex.markup.tagger import TagParser, TagWrapper

__all__ = ["ESCAPE_SEGMENT", "KeyPathNode", "key_path_of"]

ESCAPE_SEGMENT = "$"
"""Segment returning the current node (explicit dynamic-access marker)."""

type FormatFunc = Callable[[ModuleName, Sequence[str], MessageValues | None], Any]


class KeyPathNode:
    """One node of the key-path tree, identified by (module, key so far)."""

    __slots__ = ("__children", "__format", "__key", "__module", "__tagger")

    # Dynamic segments are looked up via __getitem__; iterating would never end
    __iter__ = None

    def __init__(
        self,
        format_func: FormatFunc,
        tagger: TagParser[Any],
        module: ModuleName = "",
        key: KeyPath = (),
    ) -> None:
        self.__format = format_func
        self.__tagger = tagger
        self.__module = module
        self.__key = key
        self.__children: dict[str, KeyPathNode] = {}

    def __getattr__(self, name: str) -> KeyPathNode:
        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)
        return self[name]

    def __getitem__(self, segment: str) -> KeyPathNode:
        if not isinstance(segment, str):
            msg = f"Key segments must be strings, got {type(segment).__name__}"
            raise TypeError(msg)
        if segment == ESCAPE_SEGMENT:
            return self
        child = self.__children.get(segment)
        if child is None:
            if self.__module:
                child = KeyPathNode(
                    self.__format, self.__tagger, self.__module, (*self.__key, segment)
                )
            else:
                child = KeyPathNode(self.__format, self.__tagger, segment, self.__key)
            self.__children[segment] = child
        return child

    def __call__(
        self,
        values: MessageValues | None = None,
        tags: Mapping[str, TagWrapper] | None = None,
    ) -> Any:
        """Format this node's key path.

        Args:
            values: Values for the compiled message
            tags: Tag wrappers; when given, string results are parsed for markup

        Returns:
            Rendered value or missing-translation marker
        """
        text = self.__format(self.__module, self.__key, values)
        if tags is not None and isinstance(text, str):
            return self.__tagger.parse(text, tags)
        return text

    def __repr__(self) -> str:
        return f"KeyPathNode(module={self.__module!r}, key={self.__key!r})"


def key_path_of(node: KeyPathNode) -> tuple[ModuleName, KeyPath]:
    """Get the (module, key) a node formats.

    Example:
        >>> key_path_of(localizer.t.base.app.name)
        ('base', ('app', 'name'))
    """
    return node._KeyPathNode__module, node._KeyPathNode__key  # noqa: SLF001
