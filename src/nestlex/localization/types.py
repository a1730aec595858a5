"""Type aliases for the localization domain.

Provides semantic type aliases used throughout the localization package
and by user code when annotating collaborator functions passed to
Localizer.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Awaitable, Callable, Mapping
from concurrent.futures import Future
from typing import Any

from nestlex.markup.tagger import TagWrapper

__all__ = [
    "CompiledMessage",
    "KeyPath",
    "LocaleCode",
    "MessageParser",
    "MessageValues",
    "ModuleName",
    "Notifier",
    "NotifyHook",
    "Resource",
    "ResourceLoaderFunc",
    "SubscriptionHandler",
    "TagWrapper",
]

type LocaleCode = str
"""Opaque locale identifier (e.g., 'en-US', 'pt-BR')."""

type ModuleName = str
"""Feature-scoped resource group identifier (e.g., 'base', 'checkout')."""

type KeyPath = tuple[str, ...]
"""Key path segments identifying a leaf (e.g., ('errors', 'not-found'))."""

type Resource = Mapping[str, Resource | str]
"""Recursive string tree returned by loaders. Leaves are always strings."""

type MessageValues = Mapping[str, Any]
"""Values passed to a compiled message."""

type CompiledMessage = Callable[[MessageValues | None], Any]
"""Formatter produced by a MessageParser for one (locale, module, key)."""

type MessageParser = Callable[[LocaleCode, ModuleName, KeyPath, str], CompiledMessage]
"""Compiles an expanded raw string into a CompiledMessage."""

type Notifier = Callable[[KeyPath, Resource | str | None], None]
"""Per-pair callback invoked with the key and raw value on every access."""

type NotifyHook = Callable[[LocaleCode, ModuleName, Future[Resource]], Notifier]
"""Invoked once per loaded pair to obtain its Notifier."""

type SubscriptionHandler = Callable[[tuple[LocaleCode, ...], tuple[ModuleName, ...]], None]
"""Observer of locale/module changes."""

type ResourceLoaderFunc = Callable[[LocaleCode, ModuleName], Resource | Awaitable[Resource]]
"""Plain-function form of the ResourceLoader protocol."""
