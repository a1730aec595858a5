"""Localizer: one object wiring store, resolver, formatter, tagger and proxy.

Key architectural decisions:
- Collaborator-based: loading, compiling, observing and tag rendering are
  caller-supplied functions with sensible defaults
- Lazy: nothing is loaded until set_locales/set_modules select pairs
- Append-only caches: loads, compiled messages and key-path nodes live
  as long as the Localizer; nothing is process-wide

Translation utilities:
- Nesting: self closing tags starting with ``:``.
  - ``<:nested.key/>``: a key in the same module as the key referencing it.
  - ``<:md:nested.key/>``: a key in the ``md`` module.
- Tagging: tags without ``:`` (configure with ``tag`` and per-call wrappers).
  - ``<tag/>``: self closing tag.
  - ``<a>link</a>``: open and close tag.
  - ``<a><:nested.key/></a>``: tags may contain nested translations.
  - ``<a><b/><c><d/></c></a><e/>``: tags can have nested tags.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from nestlex.constants import MAX_DEPTH
from nestlex.localization.formatter import MessageFormatter
from nestlex.localization.loading import FallbackInfo, LoadSummary, ResourceLoader
from nestlex.localization.resolver import KeyResolver
from nestlex.localization.store import ResourceStore
from nestlex.localization.types import (
    LocaleCode,
    MessageParser,
    MessageValues,
    ModuleName,
    NotifyHook,
    SubscriptionHandler,
)
from nestlex.markup.tagger import TagParser, TagWrapper, join_children
from nestlex.proxy import KeyPathNode

__all__ = ["Localizer", "create_localizer"]


class Localizer[TTag]:
    """Multi-locale, multi-module translation resolution.

    Locales and modules can be changed at any time. Resources are loaded
    for every new (locale, module) pair through the caller's loader and
    kept for reuse.

    Example:
        >>> localizer = Localizer(load)
        >>> localizer.set_locales("pt-BR", "en-US")
        >>> localizer.set_modules("base")
        >>> await localizer.wait()
        >>> localizer.t.base.welcome({"name": "Ana"})
        'Olá, Ana'

    Attributes:
        t: Root of the key-path tree
        tagger: Markup parser configured with the fallback tag wrapper
    """

    __slots__ = ("_formatter", "_resolver", "_store", "t", "tagger")

    def __init__(
        self,
        load: ResourceLoader | Callable[[LocaleCode, ModuleName], Any],
        *,
        parse: MessageParser | None = None,
        notify: NotifyHook | None = None,
        tag: TagWrapper = join_children,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
        max_depth: int = MAX_DEPTH,
    ) -> None:
        """Initialize localizer.

        Args:
            load: Loads the resource tree for a locale and module, sync or async
            parse: Compiles an expanded string into a callable (default: passthrough)
            notify: Observes loads, then key accesses (default: no-op)
            tag: Fallback tag wrapper, also aggregates parsed markup
            on_fallback: Invoked when a key resolves from a non-primary locale
            max_depth: Maximum nesting-reference depth
        """
        self._store = ResourceStore(load, notify=notify)
        self._resolver = KeyResolver(self._store, max_depth=max_depth)
        self._formatter = MessageFormatter(
            self._store, self._resolver, parse=parse, on_fallback=on_fallback
        )
        self.tagger: TagParser[TTag] = TagParser(tag)
        self.t = KeyPathNode(self._formatter.format, self.tagger)

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return f"Localizer(locales={self.locales!r}, modules={self.modules!r})"

    @property
    def locales(self) -> tuple[LocaleCode, ...]:
        """Active locales in fallback priority order."""
        return self._store.locales

    @property
    def modules(self) -> tuple[ModuleName, ...]:
        """Active modules."""
        return self._store.modules

    @property
    def store(self) -> ResourceStore:
        """Underlying resource store."""
        return self._store

    def set_locales(self, *locales: LocaleCode) -> None:
        """Replace the active locales (priority order) and load missing pairs."""
        self._store.set_locales(*locales)

    def set_modules(self, *modules: ModuleName) -> None:
        """Replace the active modules and load missing pairs."""
        self._store.set_modules(*modules)

    def subscribe(self, handler: SubscriptionHandler) -> None:
        """Register a locale/module change handler; it is called immediately."""
        self._store.subscribe(handler)

    def unsubscribe(self, handler: SubscriptionHandler) -> bool:
        """Remove a change handler. Returns True if it was registered."""
        return self._store.unsubscribe(handler)

    def wait(self) -> Awaitable[LoadSummary]:
        """Wait for the loads of the current locales and modules to settle."""
        return self._store.wait()

    def get_load_summary(self) -> LoadSummary:
        """Summary of every load attempted so far."""
        return self._store.get_load_summary()

    def read(self, locale: LocaleCode, module: ModuleName, key: Sequence[str]) -> str:
        """Resolve and expand a raw string for one locale (raises on failure)."""
        return self._resolver.read(locale, module, key)

    def format(
        self,
        module: ModuleName,
        key: Sequence[str],
        values: MessageValues | None = None,
    ) -> TTag | str:
        """Format a key with locale fallback. Never raises."""
        return self._formatter.format(module, key, values)


def create_localizer[TTag](
    load: ResourceLoader | Callable[[LocaleCode, ModuleName], Any],
    *,
    parse: MessageParser | None = None,
    notify: NotifyHook | None = None,
    tag: TagWrapper = join_children,
    on_fallback: Callable[[FallbackInfo], None] | None = None,
    max_depth: int = MAX_DEPTH,
) -> Localizer[TTag]:
    """Create a Localizer instance.

    Shorthand for ``Localizer(load, ...)``; see Localizer for arguments.
    """
    return Localizer(
        load,
        parse=parse,
        notify=notify,
        tag=tag,
        on_fallback=on_fallback,
        max_depth=max_depth,
    )
