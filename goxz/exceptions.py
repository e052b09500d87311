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

"""Exception hierarchy for goxz.

This module defines a custom exception hierarchy that allows library users
to distinguish between run-level failures and failures isolated to a single
target platform:

- FlagError: Invalid command-line input (no build attempted)
- ConfigError: Invalid project configuration or output name template
- SetupError: Destination, workspace, or resource scan failures (fatal)
- BuildError: A failure confined to one platform's Builder
    - CompileError: The Go toolchain failed for the platform
    - StageError: Copying binaries or resources into staging failed
    - ArchiveError: Writing the archive failed
- BuildFailures: Aggregate of every BuildError raised during a run

All exceptions inherit from GoxzError, allowing users to catch all goxz
errors with a single except clause if needed.

Example:
    Separating fatal setup errors from partial build failures:
        ```python
        from goxz.core import GoxzOptions, run_goxz
        from goxz.exceptions import BuildFailures, SetupError

        try:
            result = run_goxz(GoxzOptions(project_dir=Path("myapp")))
        except SetupError as e:
            print(f"Setup failed: {e}")
        except BuildFailures as e:
            for err in e.errors:
                print(f"{err.platform}: {err}")
            print(f"Archives still produced: {e.result.archives}")
        ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from goxz.platforms import Platform
    from goxz.results import RunResult

__all__ = [
    "GoxzError",
    "FlagError",
    "ConfigError",
    "SetupError",
    "BuildError",
    "CompileError",
    "StageError",
    "ArchiveError",
    "BuildFailures",
]


class GoxzError(Exception):
    """Base exception for all goxz errors."""

    pass


class FlagError(GoxzError):
    """Raised for invalid command-line flags or arguments.

    The CLI maps this error to exit code 1; nothing is built.
    """

    pass


class ConfigError(GoxzError):
    """Raised for configuration-related errors.

    This exception is raised when there are problems with:

    - YAML parsing of the project config file
    - Unknown or mistyped configuration keys
    - Output name templates with unknown placeholders
    """

    pass


class SetupError(GoxzError):
    """Raised when the run cannot be prepared.

    Covers destination directory creation, stale archive removal,
    workspace creation, and scanning the project directory for resources.
    A SetupError aborts the run before any Builder executes.
    """

    pass


class BuildError(GoxzError):
    """Base class for failures isolated to a single platform.

    Attributes:
        platform: The target platform whose Builder failed.
    """

    def __init__(self, platform: Platform, message: str) -> None:
        super().__init__(f"{platform}: {message}")
        self.platform = platform


class CompileError(BuildError):
    """Raised when the compiler fails for a platform.

    Attributes:
        platform: The target platform.
        output: Diagnostic output captured from the toolchain.
    """

    def __init__(self, platform: Platform, message: str, output: str = "") -> None:
        if output:
            message = f"{message}\n{output.rstrip()}"
        super().__init__(platform, message)
        self.output = output


class StageError(BuildError):
    """Raised when files cannot be staged for a platform."""

    pass


class ArchiveError(BuildError):
    """Raised when the archive for a platform cannot be written."""

    pass


class BuildFailures(GoxzError):
    """Raised after a run in which at least one Builder failed.

    Every Builder has finished by the time this is raised, so archives for
    the successful platforms are already in the destination directory.

    Attributes:
        errors: Every per-platform error, in resolved platform order.
        result: The complete RunResult, including successful builds.
    """

    def __init__(self, errors: list[BuildError], result: RunResult) -> None:
        lines = [f"{len(errors)} of {len(result.results)} platform(s) failed:"]
        lines.extend(f"  - {err}" for err in errors)
        super().__init__("\n".join(lines))
        self.errors = list(errors)
        self.result = result
