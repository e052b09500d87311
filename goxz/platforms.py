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

"""Target platform matrix resolution.

Turns human-entered OS and architecture lists such as ``"linux darwin,
windows"`` into an ordered, deduplicated list of Platform values. The order
of the result is the order archives are scheduled in, so it must be
reproducible for identical inputs.

No attempt is made to check that a pair is supported by the Go toolchain.
Unsupported pairs surface later as a CompileError for that platform only.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

DEFAULT_OS = "linux darwin windows"
DEFAULT_ARCH = "amd64"

_SEPARATOR = re.compile(r"\s*(?:\s+|,)\s*")


@dataclass(frozen=True)
class Platform:
    """A compilation target: an (operating system, architecture) pair.

    Attributes:
        os: GOOS value, e.g. "linux".
        arch: GOARCH value, e.g. "amd64".
    """

    os: str
    arch: str

    def __str__(self) -> str:
        return f"{self.os}/{self.arch}"

    @property
    def key(self) -> str:
        """Deduplication key ("os:arch")."""
        return f"{self.os}:{self.arch}"

    @property
    def dirname(self) -> str:
        """Name of this platform's staging subdirectory in the workspace."""
        return f"{self.os}_{self.arch}"

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def exe_suffix(self) -> str:
        """Conventional executable suffix for binaries built for this target."""
        return ".exe" if self.is_windows else ""


def split_targets(text: str) -> list[str]:
    """Split a whitespace and/or comma separated list, dropping empty tokens.

    Example:
        ```python
        split_targets(" linux darwin,, windows ")
        # ['linux', 'darwin', 'windows']
        ```
    """
    return [token for token in _SEPARATOR.split(text.strip()) if token]


def resolve_platforms(os_list: str, arch_list: str) -> list[Platform]:
    """Resolve OS and architecture lists into a deduplicated platform list.

    Produces the Cartesian product of the two token lists, OS-major, and
    drops pairs already seen so the first occurrence decides the order.

    Args:
        os_list: OS names separated by any mix of whitespace and commas.
        arch_list: Architecture names in the same format.

    Returns:
        Platforms in first-seen order. Empty if either list has no tokens.

    Example:
        ```python
        resolve_platforms("linux, darwin", "amd64 arm64")
        # [linux/amd64, linux/arm64, darwin/amd64, darwin/arm64]
        ```
    """
    platforms: list[Platform] = []
    seen: set[str] = set()
    arches = split_targets(arch_list)
    for goos in split_targets(os_list):
        for goarch in arches:
            pf = Platform(os=goos, arch=goarch)
            if pf.key in seen:
                continue
            seen.add(pf.key)
            platforms.append(pf)
    return platforms
