"""Babel-backed parse collaborator.

compile_message() turns an expanded raw string into a callable rendering
its placeholders with CLDR rules for the message's locale:

    {name}                       plain substitution (str(value))
    {count, number}              locale decimal, optional CLDR pattern style
    {ratio, percent}             locale percentage, optional CLDR pattern style
    {price, currency, EUR}       locale currency, ISO 4217 code required
    {day, date[, style]}         short/medium/long/full or CLDR pattern
    {at, time[, style]}
    {at, datetime[, style]}

``{{`` and ``}}`` render literal braces. Dotted names ({user.name}) read
nested mappings. Placeholders are parsed once at compile time; the locale's
LocaleContext is resolved once per compiled message.

Python 3.13+. Uses Babel for i18n.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from nestlex.constants import KEY_SEPARATOR, PLACEHOLDER_PATTERN
from nestlex.enums import PlaceholderKind
from nestlex.localization.types import (
    CompiledMessage,
    KeyPath,
    LocaleCode,
    MessageValues,
    ModuleName,
)
from nestlex.runtime.locale_context import LocaleContext

__all__ = ["Placeholder", "compile_message", "parse_segments"]

_TOKEN_PATTERN = re.compile(r"\{\{|\}\}|" + PLACEHOLDER_PATTERN.pattern)

_ESCAPES = {"{{": "{", "}}": "}"}

_DEFAULT_DATE_STYLE = "medium"


@dataclass(frozen=True, slots=True)
class Placeholder:
    """One parsed placeholder.

    Attributes:
        name: Value name, dotted for nested mappings
        kind: Formatting kind
        style: Kind-specific style (pattern, ISO code or CLDR style), if given
    """

    name: str
    kind: PlaceholderKind
    style: str | None = None

    def render(self, context: LocaleContext, values: MessageValues) -> str:
        """Format this placeholder's value.

        Raises:
            KeyError: If the value is not present in values
            MessageFormatError: If Babel cannot format the value
        """
        value = _get_value(values, self.name)
        match self.kind:
            case PlaceholderKind.TEXT:
                return str(value)
            case PlaceholderKind.NUMBER:
                return context.format_number(value, self.style)
            case PlaceholderKind.PERCENT:
                return context.format_percent(value, self.style)
            case PlaceholderKind.CURRENCY:
                # Style presence is checked at compile time
                return context.format_currency(value, self.style or "")
            case PlaceholderKind.DATE:
                return context.format_date(value, self.style or _DEFAULT_DATE_STYLE)
            case PlaceholderKind.TIME:
                return context.format_time(value, self.style or _DEFAULT_DATE_STYLE)
            case PlaceholderKind.DATETIME:
                return context.format_datetime(value, self.style or _DEFAULT_DATE_STYLE)


def _get_value(values: MessageValues, name: str) -> Any:
    if name in values:
        return values[name]
    current: Any = values
    for segment in name.split(KEY_SEPARATOR):
        if not isinstance(current, Mapping) or segment not in current:
            raise KeyError(name)
        current = current[segment]
    return current


def _make_placeholder(name: str, kind: str | None, style: str | None) -> Placeholder:
    if kind is None:
        return Placeholder(name, PlaceholderKind.TEXT)
    try:
        parsed_kind = PlaceholderKind(kind.lower())
    except ValueError:
        msg = f"Unknown placeholder kind '{kind}' for '{name}'"
        raise ValueError(msg) from None
    if parsed_kind is PlaceholderKind.CURRENCY and not style:
        msg = f"Currency placeholder '{name}' requires an ISO 4217 code"
        raise ValueError(msg)
    return Placeholder(name, parsed_kind, style)


def parse_segments(raw: str) -> tuple[str | Placeholder, ...]:
    """Split a raw string into literal text and placeholders.

    Adjacent literal text (including resolved brace escapes) is merged.
    Braces not forming a placeholder or escape are kept as literal text.

    Raises:
        ValueError: If a placeholder names an unknown kind, or a currency
            placeholder has no currency code

    Example:
        >>> parse_segments("Hi {name}, {{x}}")
        ('Hi ', Placeholder(name='name', kind=<PlaceholderKind.TEXT: 'text'>, style=None), ', {x}')
    """
    segments: list[str | Placeholder] = []
    text: list[str] = []
    position = 0
    for match in _TOKEN_PATTERN.finditer(raw):
        text.append(raw[position : match.start()])
        position = match.end()
        token = match.group(0)
        if token in _ESCAPES:
            text.append(_ESCAPES[token])
            continue
        if literal := "".join(text):
            segments.append(literal)
        text.clear()
        segments.append(_make_placeholder(*match.groups()))
    text.append(raw[position:])
    if literal := "".join(text):
        segments.append(literal)
    return tuple(segments)


def compile_message(
    locale: LocaleCode, module: ModuleName, key: KeyPath, raw: str
) -> CompiledMessage:
    """Compile a raw string into a Babel-formatting message.

    Signature matches the Localizer ``parse`` collaborator.

    Args:
        locale: Locale whose CLDR rules format the placeholders
        module: Module of the key (unused, part of the collaborator signature)
        key: Key path (unused, part of the collaborator signature)
        raw: Expanded raw string

    Returns:
        Callable taking the values mapping and returning the rendered string.
        It raises KeyError for missing values and MessageFormatError for
        values Babel cannot format, so Localizer falls back to the next locale.

    Raises:
        ValueError: If raw contains an invalid placeholder

    Example:
        >>> message = compile_message("de-DE", "shop", ("total",), "Summe: {sum, number}")
        >>> message({"sum": 1234.5})
        'Summe: 1.234,5'
    """
    segments = parse_segments(raw)
    if not any(isinstance(segment, Placeholder) for segment in segments):
        text = "".join(segments)  # type: ignore[arg-type]

        def literal(values: MessageValues | None = None) -> str:
            return text

        return literal

    context = LocaleContext.create(locale)

    def message(values: MessageValues | None = None) -> str:
        provided = values if values is not None else {}
        return "".join(
            segment if isinstance(segment, str) else segment.render(context, provided)
            for segment in segments
        )

    return message
