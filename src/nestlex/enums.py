"""Enumerations for nestlex type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class LoadStatus(StrEnum):
    """State of one (locale, module) resource load.

    StrEnum provides automatic string conversion: str(LoadStatus.SUCCESS) == "success"
    """

    LOADING = "loading"
    """Loader invoked, result not settled yet."""

    SUCCESS = "success"
    """Resource loaded and validated."""

    NOT_FOUND = "not_found"
    """Loader raised FileNotFoundError; an empty resource was substituted."""

    ERROR = "error"
    """Loader failed or returned an invalid tree; an empty resource was substituted."""


class PlaceholderKind(StrEnum):
    """Formatting kind of a Babel message placeholder.

    StrEnum provides automatic string conversion: str(PlaceholderKind.NUMBER) == "number"
    """

    TEXT = "text"
    """Plain substitution: {name}"""

    NUMBER = "number"
    """Locale decimal: {count, number}"""

    PERCENT = "percent"
    """Locale percentage: {ratio, percent}"""

    CURRENCY = "currency"
    """Locale currency: {price, currency, EUR}"""

    DATE = "date"
    """Locale date: {day, date, short}"""

    TIME = "time"
    """Locale time: {at, time}"""

    DATETIME = "datetime"
    """Locale date and time: {at, datetime, long}"""


__all__ = [
    "LoadStatus",
    "PlaceholderKind",
]
