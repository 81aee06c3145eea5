"""CLI context and exit codes for Quill.

This module provides the typed context object shared by all commands and the
process exit codes they use.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

from quill.config import QuillConfig

__all__ = [
    "ExitCode",
    "CLIContext",
]


class ExitCode(IntEnum):
    """Standard exit codes for the Quill CLI.

    Follows Unix conventions:
    - 0 for success
    - 1 for failure (unreadable input, invalid template)
    - 2 for partial success (rendered, but with unresolved variables in
      strict mode)
    - 130 for keyboard interrupt (128 + SIGINT=2)
    """

    SUCCESS = 0
    FAILURE = 1
    PARTIAL = 2
    INTERRUPTED = 130


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Type-safe CLI context containing global options and configuration.

    Attributes:
        config: Loaded Quill configuration.
        config_path: Path to config file (if specified via --config).
        verbosity: Verbosity level (0=default, 1=INFO, 2+=DEBUG).
        quiet: Suppress non-essential output.
    """

    config: QuillConfig
    config_path: Path | None = None
    verbosity: int = 0
    quiet: bool = False

    @property
    def context_size(self) -> int:
        """Characters of context shown around parse errors."""
        return self.config.diagnostics.context_size
