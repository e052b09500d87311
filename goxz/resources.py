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

"""Discovery of ancillary files bundled into every archive.

Resources are files directly inside the project directory whose names start
with readme, license, credit(s), or install (case-insensitive). Go source
files are never resources, so an ``install.go`` helper stays out of the
archives.
"""

from __future__ import annotations

from pathlib import Path
import re
import stat

from goxz.exceptions import SetupError

RESOURCE_PATTERN = re.compile(r"^(?:readme|license|credit|install)", re.IGNORECASE)
SOURCE_SUFFIX = ".go"


def is_resource_name(name: str) -> bool:
    """Return True if a filename qualifies as a bundled resource."""
    return bool(RESOURCE_PATTERN.match(name)) and not name.endswith(SOURCE_SUFFIX)


def gather_resources(directory: Path) -> list[Path]:
    """List resource files in a directory (non-recursive).

    Only regular files are considered. Directories and symlinks are skipped
    even when their names match.

    Args:
        directory: Project directory to scan.

    Returns:
        Absolute resource paths sorted by filename. Empty if nothing matches.

    Raises:
        SetupError: If the directory cannot be listed.
    """
    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as err:
        raise SetupError(f"Cannot scan {directory} for resources: {err}") from err

    resources: list[Path] = []
    for entry in entries:
        if not is_resource_name(entry.name):
            continue
        try:
            mode = entry.lstat().st_mode
        except OSError as err:
            raise SetupError(f"Cannot stat {entry}: {err}") from err
        if stat.S_ISREG(mode):
            resources.append(entry.absolute())
    return resources
