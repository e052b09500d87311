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

"""Run-scoped directories: the temporary workspace and the destination.

The workspace is a fresh temporary directory created inside the project
directory, so staged files and archives stay on one filesystem. Each Builder
stages into its own subdirectory of it. The workspace is removed when the run
ends, on every exit path, unless the user asked to keep it (``-work``).

The destination directory receives the finished archives. When it already
exists, archives left over from a previous run (names matching the current
output template) are purged first so repeated runs overwrite instead of
accumulating.

Example:
    ```python
    from pathlib import Path
    from goxz.logging import get_logger
    from goxz.build.naming import DEFAULT_OUTPUT, archive_name_pattern
    from goxz.workspace import setup_dest, workspace

    logger = get_logger()
    setup_dest(Path("myapp/goxz"), archive_name_pattern(DEFAULT_OUTPUT, "myapp"), logger)
    with workspace(Path("myapp"), retain=False, logger=logger) as workdir:
        ...  # stage into workdir / "linux_amd64"
    # workdir has been removed here
    ```
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
import re
import shutil
import tempfile

from goxz.exceptions import SetupError
from goxz.logging import Logger

WORKDIR_PREFIX = ".goxz-"


def prepare_workdir(base_dir: Path) -> Path:
    """Create a uniquely named temporary directory inside base_dir.

    Args:
        base_dir: Directory to create the workspace in (the project dir).

    Returns:
        Absolute path of the new workspace.

    Raises:
        SetupError: If the directory cannot be created.
    """
    try:
        return Path(tempfile.mkdtemp(prefix=WORKDIR_PREFIX, dir=base_dir)).absolute()
    except OSError as err:
        raise SetupError(f"Failed to create workspace in {base_dir}: {err}") from err


def cleanup_workdir(workdir: Path, retain: bool, logger: Logger) -> None:
    """Remove the workspace recursively unless it should be retained."""
    if retain:
        logger.info("WORK", f"working dir: {workdir}")
        return
    shutil.rmtree(workdir, ignore_errors=True)
    logger.debug("WORK", f"Removed workspace: {workdir}")


@contextmanager
def workspace(base_dir: Path, retain: bool, logger: Logger) -> Iterator[Path]:
    """Provide a workspace for the duration of a run.

    Cleanup runs exactly once when the block exits, whether it finished
    normally, raised, or was interrupted.
    """
    workdir = prepare_workdir(base_dir)
    logger.verbose("WORK", f"Created workspace: {workdir}")
    try:
        yield workdir
    finally:
        cleanup_workdir(workdir, retain, logger)


def setup_dest(dest: Path, stale: re.Pattern[str], logger: Logger) -> None:
    """Create the destination directory or purge stale archives from it.

    Only regular files whose whole name matches ``stale`` are removed, so
    unrelated archives sharing the directory are left alone.

    Args:
        dest: Destination directory for finished archives.
        stale: Pattern for archive names this build produces
            (see goxz.build.naming.archive_name_pattern).
        logger: Logger for reporting removed files.

    Raises:
        SetupError: If the directory cannot be created or cleaned.
    """
    try:
        dest.mkdir(parents=True)
        logger.verbose("DEST", f"Created destination: {dest}")
        return
    except FileExistsError as err:
        if not dest.is_dir():
            raise SetupError(
                f"Destination exists and is not a directory: {dest}"
            ) from err
    except OSError as err:
        raise SetupError(f"Failed to create destination {dest}: {err}") from err

    try:
        for entry in sorted(dest.iterdir()):
            if not entry.is_file() or entry.is_symlink():
                continue
            if stale.fullmatch(entry.name):
                logger.info("DEST", f"removing {str(entry)!r}")
                entry.unlink()
    except OSError as err:
        raise SetupError(f"Failed to clean destination {dest}: {err}") from err
