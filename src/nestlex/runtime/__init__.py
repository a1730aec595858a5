"""Babel-backed message runtime.

Exports:
    LocaleContext: Cached per-locale CLDR formatting helper
    compile_message: Parse collaborator rendering typed placeholders
    parse_segments: Split a raw string into text and placeholders
    Placeholder: One parsed placeholder

Python 3.13+. Uses Babel for i18n.
"""

from .locale_context import LocaleContext
from .message_format import Placeholder, compile_message, parse_segments

__all__ = ["LocaleContext", "Placeholder", "compile_message", "parse_segments"]
