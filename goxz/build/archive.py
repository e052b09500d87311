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

"""Archive encoding for staged platform directories.

Design Principles:
    - Windows targets are always zipped; other targets get gzip-compressed
      tar unless zip is forced for every platform
    - The archive holds a single top-level directory named after the
      artifact, so extracting never scatters files into the current dir
    - Permission bits are kept, so binaries stay executable after extraction
    - A partially written archive is removed on failure

Example:
    ```python
    from pathlib import Path
    from goxz.build.archive import select_format, write_archive

    fmt = select_format(is_windows=False, zip_always=False)  # "tar.gz"
    write_archive(Path("work/linux_amd64/app_linux_amd64"),
                  Path("goxz/app_linux_amd64.tar.gz"), fmt)
    ```
"""

from __future__ import annotations

from pathlib import Path
import tarfile
from typing import Protocol
import zipfile

ZIP = "zip"
TAR_GZ = "tar.gz"


def select_format(is_windows: bool, zip_always: bool) -> str:
    """Choose the archive format for a target."""
    if is_windows or zip_always:
        return ZIP
    return TAR_GZ


class Archiver(Protocol):
    """Protocol for encoding a directory into an archive file."""

    def __call__(self, source_dir: Path, archive_path: Path, fmt: str) -> None: ...


def _iter_files(source_dir: Path) -> list[Path]:
    return sorted(p for p in source_dir.rglob("*"))


def zip_dir(source_dir: Path, archive_path: Path) -> None:
    """Write source_dir (as its own top-level entry) into a zip file."""
    root = source_dir.parent
    with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.write(source_dir, arcname=source_dir.name)
        for path in _iter_files(source_dir):
            # write() streams file data and keeps the mode bits in external_attr
            zf.write(path, arcname=path.relative_to(root).as_posix())


def targz_dir(source_dir: Path, archive_path: Path) -> None:
    """Write source_dir (as its own top-level entry) into a .tar.gz file."""

    def _normalize(tarinfo: tarfile.TarInfo) -> tarfile.TarInfo:
        tarinfo.uid = tarinfo.gid = 0
        tarinfo.uname = tarinfo.gname = ""
        return tarinfo

    with tarfile.open(archive_path, "w:gz") as tar:
        tar.add(source_dir, arcname=source_dir.name, filter=_normalize)


def write_archive(source_dir: Path, archive_path: Path, fmt: str) -> None:
    """Encode source_dir into archive_path using fmt.

    Raises:
        ValueError: If fmt is not a known format.
        OSError: If reading the staged files or writing the archive fails.
        zipfile.BadZipFile, tarfile.TarError: On encoding failures.
    """
    if fmt == ZIP:
        encode = zip_dir
    elif fmt == TAR_GZ:
        encode = targz_dir
    else:
        raise ValueError(f"Unsupported archive format: {fmt!r}")

    try:
        encode(source_dir, archive_path)
    except BaseException:
        archive_path.unlink(missing_ok=True)
        raise
