"""Static typing for the key-path tree.

Localizer.t is built lazily, so type checkers cannot see which keys exist.
render_stub() turns sample resources into Python source declaring one
``typing.Protocol`` per tree node; annotate ``localizer.t`` with the root
protocol to get attribute completion and typo detection::

    source = render_stub({"base": load("en-US", "base")})
    Path("translations.pyi").write_text(source)

Segments that are not identifiers (or are keywords or dunders) are left out
of the protocols; they remain reachable through ``node[segment]``.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import keyword
from collections.abc import Mapping
from dataclasses import dataclass, field

from nestlex.constants import KEY_SEPARATOR
from nestlex.localization.types import ModuleName, Resource

__all__ = ["MESSAGE_PROTOCOL", "render_stub"]

MESSAGE_PROTOCOL = "Message"
"""Name of the protocol describing callable leaves."""

_HEADER = '''\
"""Key-path protocols generated by nestlex.introspection.render_stub. Do not edit."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class Message(Protocol):
    def __call__(
        self,
        values: Mapping[str, Any] | None = ...,
        tags: Mapping[str, Any] | None = ...,
    ) -> Any: ...

    def __getitem__(self, segment: str) -> Any: ...
'''


@dataclass(slots=True)
class _StubNode:
    children: dict[str, _StubNode] = field(default_factory=dict)
    is_leaf: bool = False

    def child(self, segment: str) -> _StubNode:
        return self.children.setdefault(segment, _StubNode())


def _is_attribute(segment: str) -> bool:
    return (
        segment.isidentifier()
        and not keyword.iskeyword(segment)
        and not (segment.startswith("__") and segment.endswith("__"))
    )


def _merge(node: _StubNode, resource: Resource) -> None:
    for raw_key, value in resource.items():
        target = node
        for segment in raw_key.split(KEY_SEPARATOR):
            target = target.child(segment)
        if isinstance(value, Mapping):
            _merge(target, value)
        else:
            target.is_leaf = True


def _class_name(parent: str, segment: str) -> str:
    return parent + "".join(part[:1].upper() + part[1:] for part in segment.split("_"))


def _render_class(name: str, node: _StubNode, taken: set[str], out: list[str]) -> None:
    bases = f"{MESSAGE_PROTOCOL}, Protocol" if node.is_leaf else "Protocol"
    lines = ["", "", f"class {name}({bases}):"]
    nested: list[tuple[str, _StubNode]] = []

    for segment, child in node.children.items():
        if not _is_attribute(segment):
            continue
        if child.children or not child.is_leaf:
            child_name = _class_name(name, segment)
            while child_name in taken:
                child_name += "_"
            taken.add(child_name)
            nested.append((child_name, child))
            lines.append(f"    {segment}: {child_name}")
        else:
            lines.append(f"    {segment}: {MESSAGE_PROTOCOL}")

    if not node.is_leaf:
        if len(lines) > 3:
            lines.append("")
        lines.append("    def __getitem__(self, segment: str) -> Any: ...")
    elif len(lines) == 3:
        lines.append("    pass")

    out.extend(lines)
    for child_name, child in nested:
        _render_class(child_name, child, taken, out)


def render_stub(modules: Mapping[ModuleName, Resource], root: str = "Translations") -> str:
    """Render protocol declarations for a key-path tree.

    Args:
        modules: Sample resource per module (typically the primary locale's)
        root: Name of the protocol describing ``localizer.t``

    Returns:
        Python source code

    Raises:
        ValueError: If root is not a valid class name

    Example:
        ``render_stub({"base": {"app.title": "Shop"}})`` declares
        ``Translations.base: TranslationsBase``,
        ``TranslationsBase.app: TranslationsBaseApp`` and
        ``TranslationsBaseApp.title: Message``.
    """
    if not _is_attribute(root) or root == MESSAGE_PROTOCOL:
        msg = f"Invalid root protocol name: {root!r}"
        raise ValueError(msg)

    tree = _StubNode()
    for module, resource in modules.items():
        # Module names are single segments; dots are not expanded here
        _merge(tree.child(module), resource)

    out = [_HEADER.rstrip("\n")]
    _render_class(root, tree, {root, MESSAGE_PROTOCOL}, out)
    return "\n".join(out) + "\n"
