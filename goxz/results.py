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

"""Public API return types for goxz.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Example:
    Inspecting a run:
        ```python
        from goxz.core import GoxzOptions, run_goxz

        result = run_goxz(GoxzOptions(project_dir=Path("myapp")))
        for archive in result.archives:
            print(archive)
        ```
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from goxz.exceptions import BuildError
from goxz.platforms import Platform


@dataclass(frozen=True)
class BuildResult:
    """Outcome of one platform's Builder.

    Attributes:
        platform: Target platform.
        archive_path: Path to the produced archive, or None on failure.
        error: The error that stopped the Builder, or None on success.
        status: "success" or "failed".
    """

    platform: Platform
    archive_path: Path | None
    error: BuildError | None
    status: str

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class RunResult:
    """Outcome of a whole run.

    Attributes:
        results: One BuildResult per platform, in resolved platform order.
        dest: Destination directory holding the archives.
        workdir: The run's workspace path.
        workdir_retained: True if the workspace was kept (``-work``).
    """

    results: tuple[BuildResult, ...]
    dest: Path
    workdir: Path
    workdir_retained: bool

    @property
    def archives(self) -> list[Path]:
        return [r.archive_path for r in self.results if r.archive_path is not None]

    @property
    def failures(self) -> list[BuildError]:
        return [r.error for r in self.results if r.error is not None]

    @property
    def ok(self) -> bool:
        return not self.failures
