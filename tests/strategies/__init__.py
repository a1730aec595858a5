"""Hypothesis strategies for nestlex property-based testing.

Usage:
    from tests.strategies import locale_chains, resource_trees
    from tests.strategies.localization import DictResourceLoader, markup_texts

Event-Emitting Strategies (HypoFuzz-Optimized):
    locale_chains, resource_trees, markup_texts, resource_loaders
"""

from .localization import (
    AsyncDictResourceLoader,
    DictResourceLoader,
    FailingResourceLoader,
    flatten,
    key_paths,
    key_segments,
    leaf_paths,
    locale_chains,
    markup_texts,
    module_lists,
    plain_texts,
    resource_loaders,
    resource_trees,
)

__all__ = [
    "AsyncDictResourceLoader",
    "DictResourceLoader",
    "FailingResourceLoader",
    "flatten",
    "key_paths",
    "key_segments",
    "leaf_paths",
    "locale_chains",
    "markup_texts",
    "module_lists",
    "plain_texts",
    "resource_loaders",
    "resource_trees",
]
