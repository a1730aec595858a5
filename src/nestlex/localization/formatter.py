"""Locale-fallback message formatting.

MessageFormatter walks the active locales in priority order and returns
the first successful rendering of a key. Compiled messages are cached per
(locale, module, key) for the lifetime of the formatter and never
recompiled: resources are immutable once loaded within a session.

When every locale fails, the result is the missing-translation marker
"{locales joined by '|'}:{module}:{dotted key}", which is stable and
greppable in rendered output.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from nestlex.constants import FALLBACK_MISSING_TRANSLATION, FALLBACK_SEPARATOR, KEY_SEPARATOR
from nestlex.localization.loading import FallbackInfo
from nestlex.localization.resolver import KeyResolver
from nestlex.localization.store import ResourceStore
from nestlex.localization.types import (
    CompiledMessage,
    KeyPath,
    LocaleCode,
    MessageParser,
    MessageValues,
    ModuleName,
)

__all__ = ["MessageFormatter", "missing_translation", "passthrough_parser"]

logger = logging.getLogger(__name__)


def passthrough_parser(
    locale: LocaleCode, module: ModuleName, key: KeyPath, raw: str
) -> CompiledMessage:
    """Default parse collaborator: the compiled message ignores values."""

    def message(values: MessageValues | None = None) -> str:
        return raw

    return message


def missing_translation(
    locales: Sequence[LocaleCode], module: ModuleName, key: Sequence[str]
) -> str:
    """Build the marker returned when no locale can render a key.

    Example:
        >>> missing_translation(["pt-BR", "en-US"], "base", ["a", "b"])
        'pt-BR|en-US:base:a.b'
    """
    return FALLBACK_MISSING_TRANSLATION.format(
        locales=FALLBACK_SEPARATOR.join(locales),
        module=module,
        key=KEY_SEPARATOR.join(key),
    )


class MessageFormatter:
    """Formats keys with locale fallback and compiled-message caching."""

    __slots__ = ("_compiled", "_on_fallback", "_parse", "_resolver", "_store")

    def __init__(
        self,
        store: ResourceStore,
        resolver: KeyResolver,
        *,
        parse: MessageParser | None = None,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
    ) -> None:
        """Initialize formatter.

        Args:
            store: Resource store providing the active locales
            resolver: Key resolver for raw string expansion
            parse: Compiles expanded strings into callables (default: passthrough)
            on_fallback: Invoked when a key resolves from a non-primary locale
        """
        self._store = store
        self._resolver = resolver
        self._parse: MessageParser = parse if parse is not None else passthrough_parser
        self._on_fallback = on_fallback
        self._compiled: dict[tuple[LocaleCode, ModuleName, KeyPath], CompiledMessage] = {}

    @property
    def compiled_count(self) -> int:
        """Number of cached compiled messages."""
        return len(self._compiled)

    def compile(
        self, locale: LocaleCode, module: ModuleName, key: Sequence[str]
    ) -> CompiledMessage:
        """Get the cached compiled message for a triple, compiling it on first use.

        Raises:
            KeyResolutionError: If the key cannot be resolved in this locale
            Exception: Whatever the parse collaborator raises
        """
        cache_key = (locale, module, tuple(key))
        compiled = self._compiled.get(cache_key)
        if compiled is not None:
            # Keep dependency tracking alive for cached keys
            self._resolver.lookup(locale, module, cache_key[2])
            return compiled
        raw = self._resolver.read(locale, module, cache_key[2])
        compiled = self._parse(locale, module, cache_key[2], raw)
        self._compiled[cache_key] = compiled
        logger.debug("Compiled message %s:%s:%s", locale, module, KEY_SEPARATOR.join(key))
        return compiled

    def format(
        self,
        module: ModuleName,
        key: Sequence[str],
        values: MessageValues | None = None,
    ) -> Any:
        """Render key from the first locale that can.

        Never raises: failures for one locale fall through to the next, and
        exhausting every locale yields the missing-translation marker.

        Args:
            module: Module containing the key
            key: Key path segments
            values: Values passed to the compiled message

        Returns:
            Rendered value (str unless the parse collaborator produces tags),
            or the missing-translation marker
        """
        key = tuple(key)
        locales = self._store.locales
        for locale in locales:
            try:
                result = self.compile(locale, module, key)(values)
            except Exception as error:  # pylint: disable=broad-exception-caught
                # Unsettled pairs fail silently; settled ones indicate content problems
                if self._store.is_settled(locale, module):
                    logger.warning(
                        "Format error: locale=%s module=%s key=%s: %s: %s",
                        locale,
                        module,
                        KEY_SEPARATOR.join(key),
                        type(error).__name__,
                        error,
                    )
                continue

            if locale != locales[0]:
                self._report_fallback(
                    FallbackInfo(
                        requested_locale=locales[0],
                        resolved_locale=locale,
                        module=module,
                        key=key,
                    )
                )
            return result

        return missing_translation(locales, module, key)

    def _report_fallback(self, info: FallbackInfo) -> None:
        if self._on_fallback is None:
            return
        try:
            self._on_fallback(info)
        except Exception as error:  # pylint: disable=broad-exception-caught
            # Callback is caller code; the resolved message is still returned
            logger.warning(
                "on_fallback callback failed: module=%s key=%s: %s: %s",
                info.module,
                KEY_SEPARATOR.join(info.key),
                type(error).__name__,
                error,
            )
