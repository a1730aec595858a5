"""Introspection of resources and raw translation strings.

This package provides two introspection domains:

1. Message Introspection (nestlex.introspection.message):
   - Nesting reference, tag and placeholder extraction from raw strings

2. Stub Generation (nestlex.introspection.stubs):
   - typing.Protocol declarations mirroring a key-path tree

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from .message import (
    MessageIntrospection,
    extract_placeholders,
    extract_references,
    extract_tags,
    introspect_message,
)
from .stubs import MESSAGE_PROTOCOL, render_stub

__all__ = [
    # Message introspection
    "MessageIntrospection",
    "extract_placeholders",
    "extract_references",
    "extract_tags",
    "introspect_message",
    # Stub generation
    "MESSAGE_PROTOCOL",
    "render_stub",
]
