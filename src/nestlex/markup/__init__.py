"""Inline markup (tagging) for resolved translation strings.

Python 3.13+. Zero external dependencies.
"""

from .tagger import TagParser, TagWrapper, join_children

__all__ = ["TagParser", "TagWrapper", "join_children"]
