"""Quill exception hierarchy.

All exceptions can be imported from this package:
    from quill.exceptions import ParseError, ConfigError
"""

from __future__ import annotations

# Base exception
from quill.exceptions.base import QuillError

# Configuration exceptions
from quill.exceptions.config import ConfigError

# Template exceptions
from quill.exceptions.template import ParseError, ParseErrorInfo, TemplateLoadError

__all__ = [
    "QuillError",
    "ConfigError",
    "ParseError",
    "ParseErrorInfo",
    "TemplateLoadError",
]
