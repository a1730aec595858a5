"""Locale-aware value formatting using Babel.

LocaleContext wraps one Babel Locale and formats numbers, percentages,
currency amounts, dates and times according to CLDR rules. It is used by
the Babel message compiler to render typed placeholders.

Thread Safety:
    LocaleContext is immutable. The class-level instance cache is bounded
    (MAX_LOCALE_CACHE_SIZE, LRU) and protected by an RLock.

Python 3.13+. Uses Babel for i18n.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from threading import RLock
from typing import ClassVar

from babel import Locale, UnknownLocaleError
from babel import dates as babel_dates
from babel import numbers as babel_numbers

from nestlex.constants import MAX_LOCALE_CACHE_SIZE
from nestlex.diagnostics.errors import MessageFormatError
from nestlex.locale_utils import get_babel_locale, normalize_locale

__all__ = ["LocaleContext"]

logger = logging.getLogger(__name__)

_FALLBACK_LOCALE = "en_US"


@dataclass(frozen=True, slots=True)
class LocaleContext:
    """Immutable locale configuration for formatting operations.

    Use LocaleContext.create() to construct instances: it validates the
    locale, falls back to en_US for unknown ones and reuses cached instances.

    Examples:
        >>> ctx = LocaleContext.create('en-US')
        >>> ctx.format_number(1234.5)
        '1,234.5'

        >>> ctx = LocaleContext.create('de-DE')
        >>> ctx.format_number(1234.5)
        '1.234,5'

        >>> # Invalid locales fall back to en_US with warning logged
        >>> ctx = LocaleContext.create('invalid-locale')
        >>> ctx.is_fallback
        True
    """

    _cache: ClassVar[OrderedDict[str, LocaleContext]] = OrderedDict()
    _cache_lock: ClassVar[RLock] = RLock()

    locale_code: str
    babel_locale: Locale
    is_fallback: bool = False

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the locale context cache (useful in tests)."""
        with cls._cache_lock:
            cls._cache.clear()

    @classmethod
    def cache_size(cls) -> int:
        """Get current number of cached LocaleContext instances."""
        with cls._cache_lock:
            return len(cls._cache)

    @classmethod
    def create(cls, locale_code: str) -> LocaleContext:
        """Create or reuse a LocaleContext, falling back to en_US for unknown locales.

        This method always succeeds.

        Args:
            locale_code: BCP 47 or POSIX locale identifier

        Returns:
            LocaleContext instance. For unknown/invalid locales, uses en_US
            rules while preserving the original locale_code for debugging.
        """
        cache_key = normalize_locale(locale_code)

        with cls._cache_lock:
            if cache_key in cls._cache:
                cls._cache.move_to_end(cache_key)
                return cls._cache[cache_key]

        used_fallback = False
        try:
            babel_locale = get_babel_locale(cache_key)
        except UnknownLocaleError as e:
            logger.warning("Unknown locale '%s': %s. Falling back to en_US", locale_code, e)
            babel_locale = get_babel_locale(_FALLBACK_LOCALE)
            used_fallback = True
        except ValueError as e:
            logger.warning(
                "Invalid locale format '%s': %s. Falling back to en_US", locale_code, e
            )
            babel_locale = get_babel_locale(_FALLBACK_LOCALE)
            used_fallback = True

        ctx = cls(locale_code=locale_code, babel_locale=babel_locale, is_fallback=used_fallback)

        with cls._cache_lock:
            if cache_key in cls._cache:
                return cls._cache[cache_key]
            if len(cls._cache) >= MAX_LOCALE_CACHE_SIZE:
                cls._cache.popitem(last=False)
            cls._cache[cache_key] = ctx
            return ctx

    def format_number(self, value: int | float | Decimal, pattern: str | None = None) -> str:
        """Format number with locale-specific separators.

        Args:
            value: Number to format
            pattern: Optional CLDR number pattern (e.g., "#,##0.00")

        Raises:
            MessageFormatError: If value cannot be formatted
        """
        try:
            return str(babel_numbers.format_decimal(value, format=pattern, locale=self.babel_locale))
        except (ValueError, TypeError, InvalidOperation) as e:
            msg = f"Number formatting failed for '{value}': {e}"
            raise MessageFormatError(msg, fallback_value=str(value)) from e

    def format_percent(self, value: int | float | Decimal, pattern: str | None = None) -> str:
        """Format ratio as a locale percentage (0.25 -> '25%').

        Raises:
            MessageFormatError: If value cannot be formatted
        """
        try:
            return str(babel_numbers.format_percent(value, format=pattern, locale=self.babel_locale))
        except (ValueError, TypeError, InvalidOperation) as e:
            msg = f"Percent formatting failed for '{value}': {e}"
            raise MessageFormatError(msg, fallback_value=str(value)) from e

    def format_currency(self, value: int | float | Decimal, currency: str) -> str:
        """Format amount with locale currency conventions.

        Args:
            value: Amount
            currency: ISO 4217 currency code (e.g., "EUR")

        Raises:
            MessageFormatError: If value cannot be formatted
        """
        try:
            return str(
                babel_numbers.format_currency(value, currency.upper(), locale=self.babel_locale)
            )
        except (ValueError, TypeError, InvalidOperation) as e:
            msg = f"Currency formatting failed for '{value}' {currency}: {e}"
            raise MessageFormatError(msg, fallback_value=f"{value} {currency}") from e

    def format_date(self, value: date | datetime | str, style: str = "medium") -> str:
        """Format date with a CLDR style (short/medium/long/full) or pattern.

        Strings are parsed as ISO 8601.

        Raises:
            MessageFormatError: If value is not a date or ISO 8601 string
        """
        try:
            parsed = date.fromisoformat(value) if isinstance(value, str) else value
            return str(babel_dates.format_date(parsed, format=style, locale=self.babel_locale))
        except (ValueError, TypeError, AttributeError) as e:
            msg = f"Date formatting failed for '{value}': {e}"
            raise MessageFormatError(msg, fallback_value=str(value)) from e

    def format_time(self, value: time | datetime | str, style: str = "medium") -> str:
        """Format time with a CLDR style or pattern.

        Raises:
            MessageFormatError: If value is not a time or ISO 8601 string
        """
        try:
            parsed = time.fromisoformat(value) if isinstance(value, str) else value
            return str(babel_dates.format_time(parsed, format=style, locale=self.babel_locale))
        except (ValueError, TypeError, AttributeError) as e:
            msg = f"Time formatting failed for '{value}': {e}"
            raise MessageFormatError(msg, fallback_value=str(value)) from e

    def format_datetime(self, value: datetime | str, style: str = "medium") -> str:
        """Format date and time with a CLDR style or pattern.

        Raises:
            MessageFormatError: If value is not a datetime or ISO 8601 string
        """
        try:
            parsed = datetime.fromisoformat(value) if isinstance(value, str) else value
            return str(
                babel_dates.format_datetime(parsed, format=style, locale=self.babel_locale)
            )
        except (ValueError, TypeError, AttributeError) as e:
            msg = f"Datetime formatting failed for '{value}': {e}"
            raise MessageFormatError(msg, fallback_value=str(value)) from e
