# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Logging interface for goxz.

This module provides the logger that is passed explicitly into the run
coordinator, the workspace helpers, and every Builder. There is no global
logger: callers construct one and hand it down, so tests can capture output
without process-wide side effects.

The logger supports these output levels:
- Step: Always printed (for progress indicators)
- Info: Always printed (for results the user asked for, e.g. -work)
- Error: Always printed (for per-platform failures)
- Verbose: Only printed when verbose mode is enabled
- Debug: Only printed when debug mode is enabled (implies verbose)

Example:
    Create a logger and pass it down:
        ```python
        from goxz.logging import get_logger

        logger = get_logger(verbose=True)
        logger.step(1, 4, "Resolving platforms...")
        logger.verbose("BUILD", "linux/amd64: compiling .")
        logger.error("BUILD", "windows/arm: go build failed")
        ```

Note:
    Builders run on worker threads, so DefaultLogger serialises writes
    with a lock to keep lines from interleaving.
"""

from __future__ import annotations

import sys
import threading
from typing import Protocol, TextIO


class Logger(Protocol):
    """Protocol for logger implementations."""

    def step(self, step: int, total: int, message: str) -> None:
        """Print a step indicator.

        Args:
            step: Current step number (1-based).
            total: Total number of steps.
            message: Step description.
        """
        ...

    def info(self, prefix: str, message: str) -> None:
        """Print a message that is always shown."""
        ...

    def error(self, prefix: str, message: str) -> None:
        """Print an error message that is always shown."""
        ...

    def verbose(self, prefix: str, message: str) -> None:
        """Print a verbose log message.

        Args:
            prefix: Message prefix (e.g., "WORK", "BUILD").
            message: Log message.
        """
        ...

    def debug(self, prefix: str, message: str) -> None:
        """Print a debug log message.

        Args:
            prefix: Message prefix (e.g., "COMPILE", "ARCHIVE").
            message: Log message.
        """
        ...


class DefaultLogger:
    """Default logger implementation that writes to stderr.

    Every line is prefixed with ``[goxz]`` so output stays recognisable when
    interleaved with the Go toolchain's own diagnostics.
    """

    def __init__(
        self,
        verbose: bool = False,
        debug: bool = False,
        stream: TextIO | None = None,
    ) -> None:
        """Initialize logger with verbosity settings.

        Args:
            verbose: If True, print verbose messages.
            debug: If True, print debug messages (implies verbose).
            stream: Output stream. Default is sys.stderr at write time.
        """
        self._verbose = verbose or debug
        self._debug = debug
        self._stream = stream
        self._lock = threading.Lock()

    def _write(self, line: str) -> None:
        stream = self._stream if self._stream is not None else sys.stderr
        with self._lock:
            print(f"[goxz] {line}", file=stream)

    def step(self, step: int, total: int, message: str) -> None:
        """Print a step indicator."""
        self._write(f"[{step}/{total}] {message}")

    def info(self, prefix: str, message: str) -> None:
        """Print a message that is always shown."""
        self._write(f"[{prefix}] {message}")

    def error(self, prefix: str, message: str) -> None:
        """Print an error message that is always shown."""
        self._write(f"[{prefix}] [ERROR] {message}")

    def verbose(self, prefix: str, message: str) -> None:
        """Print a verbose log message (only when verbose mode is active)."""
        if self._verbose:
            self._write(f"[{prefix}] {message}")

    def debug(self, prefix: str, message: str) -> None:
        """Print a debug log message (only when debug mode is active)."""
        if self._debug:
            self._write(f"[{prefix}] {message}")


class SilentLogger:
    """Logger that suppresses all output.

    Useful for programmatic usage when output is not desired.
    """

    def step(self, step: int, total: int, message: str) -> None:
        pass

    def info(self, prefix: str, message: str) -> None:
        pass

    def error(self, prefix: str, message: str) -> None:
        pass

    def verbose(self, prefix: str, message: str) -> None:
        pass

    def debug(self, prefix: str, message: str) -> None:
        pass


def get_logger(
    verbose: bool = False, debug: bool = False, stream: TextIO | None = None
) -> Logger:
    """Get a logger instance with specified verbosity.

    Args:
        verbose: If True, logger will print verbose messages.
        debug: If True, logger will print debug messages (implies verbose).
        stream: Output stream. Default is sys.stderr.

    Returns:
        A logger instance configured with the specified verbosity.
    """
    return DefaultLogger(verbose=verbose, debug=debug, stream=stream)
