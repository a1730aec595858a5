"""Conversion of localizer locale codes into Babel locales.

The localizer treats locale codes as opaque strings: they key resource
loads, appear in the missing-translation marker and are passed unchanged
to loaders. Only the Babel-backed runtime needs CLDR data, and it gets
there through the two helpers below.

Python 3.13+. Uses Babel for i18n.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "get_babel_locale",
    "normalize_locale",
]


def normalize_locale(locale_code: str) -> str:
    """Turn a hyphenated tag such as "pt-BR" into Babel's "pt_BR" form.

    Codes already using underscores come back unchanged, so the result can
    serve as a cache key for both spellings of the same locale.
    """
    return locale_code.replace("-", "_")


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Parse a localizer locale code into a cached babel.Locale.

    Raises:
        babel.core.UnknownLocaleError: No CLDR data for the code
        ValueError: The code is not a parseable locale identifier

    LocaleContext.create() catches both and falls back to en_US.
    """
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))
