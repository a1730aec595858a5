"""Key lookup and nesting-reference expansion.

A key path addresses a leaf either through a single flattened top-level
key ("a.b.c") or through nested mappings (a -> b -> c); the flattened form
is tried first so resource authors can pick either representation.

Leaves may reference other keys with self-closing markers:
    <:key.path/>          same module
    <:module:key.path/>   another module

References are expanded recursively within the same locale before any
message compilation, so compiled messages never see unexpanded markers.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from nestlex.constants import KEY_SEPARATOR, MAX_DEPTH, MODULE_SEPARATOR, NESTING_PATTERN
from nestlex.core.resolution_context import ResolutionContext, depth_clamp
from nestlex.diagnostics.errors import (
    CyclicReferenceError,
    DepthLimitExceededError,
    KeyMissingError,
    KeyPartialError,
)
from nestlex.localization.store import ResourceStore
from nestlex.localization.types import KeyPath, LocaleCode, ModuleName, Resource

__all__ = ["KeyResolver", "lookup", "parse_reference"]


def lookup(resource: Resource | None, key: Sequence[str]) -> Resource | str | None:
    """Find the raw value at key inside resource.

    Args:
        resource: Resource tree (None for unsettled pairs)
        key: Key path segments

    Returns:
        Leaf string, intermediate mapping, or None if absent

    Example:
        >>> lookup({"a.b": "x"}, ["a", "b"])
        'x'
        >>> lookup({"a": {"b": "x"}}, ["a", "b"])
        'x'
    """
    if resource is None:
        return None
    flat = resource.get(KEY_SEPARATOR.join(key))
    if flat is not None:
        return flat
    node: Resource | str | None = resource
    for segment in key:
        if not isinstance(node, Mapping):
            return None
        node = node.get(segment)
        if node is None:
            return None
    return node


def parse_reference(reference: str, module: ModuleName) -> tuple[ModuleName, KeyPath]:
    """Split the inner text of a nesting marker into (module, key).

    Pieces are read from the right: the last piece is the key, the one
    before it (if any) the module.

    Example:
        >>> parse_reference("app.name", "base")
        ('base', ('app', 'name'))
        >>> parse_reference("common:app.name", "base")
        ('common', ('app', 'name'))
    """
    pieces = reference.split(MODULE_SEPARATOR)[::-1]
    target_module = pieces[1] if len(pieces) > 1 else module
    return target_module, tuple(pieces[0].split(KEY_SEPARATOR))


class KeyResolver:
    """Resolves key paths to expanded strings for one locale at a time."""

    __slots__ = ("_max_depth", "_store")

    def __init__(self, store: ResourceStore, *, max_depth: int = MAX_DEPTH) -> None:
        """Initialize resolver.

        Args:
            store: Resource store providing settled resources and notifiers
            max_depth: Maximum nesting-reference depth (clamped against the
                interpreter recursion limit)
        """
        self._store = store
        self._max_depth = depth_clamp(max_depth)

    @property
    def max_depth(self) -> int:
        """Effective maximum nesting depth."""
        return self._max_depth

    def lookup(
        self, locale: LocaleCode, module: ModuleName, key: Sequence[str]
    ) -> Resource | str | None:
        """Find the raw value at key and report the access to the pair's notifier."""
        raw = lookup(self._store.get_resource(locale, module), key)
        notifier = self._store.get_notifier(locale, module)
        if notifier is not None:
            notifier(tuple(key), raw)
        return raw

    def read(self, locale: LocaleCode, module: ModuleName, key: Sequence[str]) -> str:
        """Resolve key to a string with every nesting reference expanded.

        Args:
            locale: Locale to read from
            module: Module to read from
            key: Key path segments

        Returns:
            Expanded leaf string

        Raises:
            KeyMissingError: No leaf at key (absent or empty string)
            KeyPartialError: Key ends on an intermediate mapping
            CyclicReferenceError: A reference chain refers back to itself
            DepthLimitExceededError: A reference chain is deeper than max_depth
        """
        context = ResolutionContext(max_depth=self._max_depth)
        return self._read(locale, module, tuple(key), context)

    def _read(
        self,
        locale: LocaleCode,
        module: ModuleName,
        key: KeyPath,
        context: ResolutionContext,
    ) -> str:
        raw = self.lookup(locale, module, key)
        dotted = KEY_SEPARATOR.join(key)
        if raw is None or raw == "":
            msg = f"Key '{dotted}' missing in {locale}:{module}"
            raise KeyMissingError(msg, locale=locale, module=module, key=key)
        if not isinstance(raw, str):
            msg = f"Key '{dotted}' is partial in {locale}:{module}"
            raise KeyPartialError(msg, locale=locale, module=module, key=key)

        if NESTING_PATTERN.search(raw) is None:
            return raw

        ref_id = f"{module}{MODULE_SEPARATOR}{dotted}"
        if context.contains(ref_id):
            cycle = context.get_cycle_path(ref_id)
            msg = f"Cyclic reference in {locale}: {' -> '.join(cycle)}"
            raise CyclicReferenceError(msg, locale=locale, module=module, key=key, cycle=cycle)
        if context.is_depth_exceeded():
            msg = f"Nesting depth {context.max_depth} exceeded at {locale}:{ref_id}"
            raise DepthLimitExceededError(msg, locale=locale, module=module, key=key)

        context.push(ref_id)
        try:
            return NESTING_PATTERN.sub(
                lambda match: self._read(
                    locale, *parse_reference(match.group(1), module), context
                ),
                raw,
            )
        finally:
            context.pop()
