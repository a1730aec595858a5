"""Tests for KeyResolver lookup and nesting-reference expansion.

Covers:
- Flattened vs nested addressing (flattened key wins)
- Missing, empty and partial keys
- Same-module and cross-module references
- Cycle detection and depth limiting
- Notifier invocation on every access

Python 3.13+.
"""

from __future__ import annotations

import sys
from typing import Any

import pytest
from hypothesis import given

from nestlex.diagnostics.errors import (
    CyclicReferenceError,
    DepthLimitExceededError,
    KeyMissingError,
    KeyPartialError,
    KeyResolutionError,
)
from nestlex.localization.resolver import KeyResolver, lookup, parse_reference
from nestlex.localization.store import ResourceStore
from tests.strategies.localization import flatten, leaf_paths, resource_trees


def make_resolver(
    resources: dict[str, dict[str, Any]],
    locale: str = "en",
    *,
    max_depth: int = 100,
    notify: Any = None,
) -> KeyResolver:
    store = ResourceStore(lambda loc, module: resources[module], notify=notify)
    store.set_locales(locale)
    store.set_modules(*resources)
    return KeyResolver(store, max_depth=max_depth)


class TestLookup:
    """Module-level lookup over a resource tree."""

    def test_flattened_key(self) -> None:
        assert lookup({"a.b": "x"}, ["a", "b"]) == "x"

    def test_nested_key(self) -> None:
        assert lookup({"a": {"b": "x"}}, ["a", "b"]) == "x"

    def test_flattened_wins_over_nested(self) -> None:
        """When both forms exist, the flattened key is used."""
        assert lookup({"a.b": "flat", "a": {"b": "nested"}}, ["a", "b"]) == "flat"

    def test_intermediate_mapping_returned(self) -> None:
        assert lookup({"a": {"b": "x"}}, ["a"]) == {"b": "x"}

    def test_through_leaf_is_absent(self) -> None:
        """Descending through a string yields None."""
        assert lookup({"a": "x"}, ["a", "b"]) is None

    def test_unsettled_resource(self) -> None:
        assert lookup(None, ["a"]) is None

    @given(tree=resource_trees())
    def test_flattened_and_nested_equivalent(self, tree: dict[str, Any]) -> None:
        """Every leaf resolves identically in the nested and flattened forms."""
        flat = flatten(tree)
        for path in leaf_paths(tree):
            assert lookup(tree, path) == lookup(flat, path) == flat[".".join(path)]


class TestParseReference:
    """Reference text split into module and key."""

    def test_same_module(self) -> None:
        assert parse_reference("app.name", "base") == ("base", ("app", "name"))

    def test_other_module(self) -> None:
        assert parse_reference("md:title", "base") == ("md", ("title",))

    def test_extra_pieces_read_from_the_right(self) -> None:
        """Only the last two pieces matter."""
        assert parse_reference("x:md:title", "base") == ("md", ("title",))


class TestRead:
    """KeyResolver.read failures and expansion."""

    def test_plain_leaf(self) -> None:
        resolver = make_resolver({"base": {"hello": "Hello"}})
        assert resolver.read("en", "base", ["hello"]) == "Hello"

    def test_missing_key(self) -> None:
        resolver = make_resolver({"base": {"hello": "Hello"}})
        with pytest.raises(KeyMissingError) as exc_info:
            resolver.read("en", "base", ["bye"])
        assert exc_info.value.key == ("bye",)
        assert exc_info.value.locale == "en"
        assert exc_info.value.module == "base"

    def test_empty_string_is_missing(self) -> None:
        """Empty leaves count as absent so fallback locales can supply them."""
        resolver = make_resolver({"base": {"hello": ""}})
        with pytest.raises(KeyMissingError):
            resolver.read("en", "base", ["hello"])

    def test_partial_key(self) -> None:
        resolver = make_resolver({"base": {"errors": {"not_found": "Nope"}}})
        with pytest.raises(KeyPartialError):
            resolver.read("en", "base", ["errors"])

    def test_unloaded_pair_is_missing(self) -> None:
        resolver = make_resolver({"base": {"hello": "Hello"}})
        with pytest.raises(KeyMissingError):
            resolver.read("de", "base", ["hello"])

    def test_nesting_same_module(self) -> None:
        resolver = make_resolver({"base": {"app": "X", "welcome": "Hi <:app/>"}})
        assert resolver.read("en", "base", ["welcome"]) == "Hi X"

    def test_nesting_nested_key(self) -> None:
        resolver = make_resolver({"base": {"app": {"name": "Shop"}, "title": "<:app.name/>!"}})
        assert resolver.read("en", "base", ["title"]) == "Shop!"

    def test_nesting_cross_module(self) -> None:
        resolver = make_resolver({"m1": {"k": "see <:m2:other/>"}, "m2": {"other": "O"}})
        assert resolver.read("en", "m1", ["k"]) == "see O"

    def test_nesting_is_recursive(self) -> None:
        resolver = make_resolver({"base": {"a": "[<:b/>]", "b": "(<:c/>)", "c": "c"}})
        assert resolver.read("en", "base", ["a"]) == "[(c)]"

    def test_repeated_reference_is_not_a_cycle(self) -> None:
        resolver = make_resolver({"base": {"a": "<:b/>-<:b/>", "b": "x"}})
        assert resolver.read("en", "base", ["a"]) == "x-x"

    def test_missing_reference_fails_whole_read(self) -> None:
        resolver = make_resolver({"base": {"a": "Hi <:nope/>"}})
        with pytest.raises(KeyMissingError) as exc_info:
            resolver.read("en", "base", ["a"])
        assert exc_info.value.key == ("nope",)

    def test_tags_are_left_untouched(self) -> None:
        resolver = make_resolver({"base": {"a": "<b>bold</b> <:c/>", "c": "<i/>"}})
        assert resolver.read("en", "base", ["a"]) == "<b>bold</b> <i/>"


class TestCyclesAndDepth:
    """Explicit resolution context bounds expansion."""

    def test_self_reference(self) -> None:
        resolver = make_resolver({"base": {"a": "<:a/>"}})
        with pytest.raises(CyclicReferenceError) as exc_info:
            resolver.read("en", "base", ["a"])
        assert exc_info.value.cycle == ("base:a", "base:a")

    def test_mutual_reference(self) -> None:
        resolver = make_resolver({"base": {"a": "<:b/>", "b": "<:a/>"}})
        with pytest.raises(CyclicReferenceError) as exc_info:
            resolver.read("en", "base", ["a"])
        assert exc_info.value.cycle == ("base:a", "base:b", "base:a")

    def test_cross_module_cycle(self) -> None:
        resolver = make_resolver({"m1": {"a": "<:m2:b/>"}, "m2": {"b": "<:m1:a/>"}})
        with pytest.raises(CyclicReferenceError):
            resolver.read("en", "m1", ["a"])

    def test_cycle_is_a_resolution_error(self) -> None:
        """Cycles are recovered like any other key failure."""
        assert issubclass(CyclicReferenceError, KeyResolutionError)

    def test_chain_within_depth(self) -> None:
        """max_depth referencing strings expand; the plain leaf ends the chain."""
        resolver = make_resolver(
            {"base": {"a0": "<:a1/>", "a1": "<:a2/>", "a2": "<:a3/>", "a3": "end"}}, max_depth=3
        )
        assert resolver.read("en", "base", ["a0"]) == "end"

    def test_chain_beyond_depth(self) -> None:
        resolver = make_resolver(
            {"base": {"a0": "<:a1/>", "a1": "<:a2/>", "a2": "<:a3/>", "a3": "<:a4/>", "a4": "e"}},
            max_depth=3,
        )
        with pytest.raises(DepthLimitExceededError):
            resolver.read("en", "base", ["a0"])

    def test_long_chain_at_default_depth(self) -> None:
        """A 50-link chain stays below the default limit."""
        resource = {f"k{i}": f"<:k{i + 1}/>" for i in range(50)}
        resource["k50"] = "done"
        resolver = make_resolver({"base": resource})
        assert resolver.read("en", "base", ["k0"]) == "done"

    def test_max_depth_clamped_to_recursion_limit(self) -> None:
        resolver = make_resolver({"base": {}}, max_depth=sys.getrecursionlimit() * 10)
        assert resolver.max_depth < sys.getrecursionlimit()


class TestNotifier:
    """Every access reports the key and raw value to the pair's notifier."""

    def test_notifier_sees_every_lookup(self) -> None:
        accesses: list[tuple[str, str, tuple[str, ...], Any]] = []

        def notify(locale: str, module: str, future: Any) -> Any:
            return lambda key, raw: accesses.append((locale, module, key, raw))

        resolver = make_resolver(
            {"base": {"welcome": "Hi <:app/>", "app": "X"}}, notify=notify
        )
        resolver.read("en", "base", ["welcome"])

        assert accesses == [
            ("en", "base", ("welcome",), "Hi <:app/>"),
            ("en", "base", ("app",), "X"),
        ]

    def test_notifier_sees_misses(self) -> None:
        accesses: list[Any] = []

        def notify(locale: str, module: str, future: Any) -> Any:
            return lambda key, raw: accesses.append((key, raw))

        resolver = make_resolver({"base": {}}, notify=notify)
        with pytest.raises(KeyMissingError):
            resolver.read("en", "base", ["nope"])

        assert accesses == [(("nope",), None)]
