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

"""Per-platform build unit.

A Builder compiles every requested package for one platform, stages the
binaries together with the shared resource files, and encodes the staging
directory into one archive in the destination directory.

Private Helpers:
    - Builder._compile: Run the compiler once per package
    - Builder._stage_resources: Copy resource files next to the binaries
    - Builder._archive: Encode the staging directory

Design Principles:
    - Each Builder owns ``<workspace>/<os>_<arch>/`` exclusively
    - BuildSpec, the resource list, and the workspace root are read-only
    - The first failing step stops this Builder only; siblings are unaffected
    - A Builder runs once and is never retried

Directory layout for platform linux/amd64 and app "app":

    <workspace>/linux_amd64/app_linux_amd64/app
    <workspace>/linux_amd64/app_linux_amd64/README.md
    <dest>/app_linux_amd64.tar.gz

Example:
    ```python
    from goxz.build import BuildSpec, Builder

    builder = Builder(platform, spec, workdir, compiler=compiler, logger=logger)
    archive = builder.build()
    ```
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
import shutil
import tarfile
import zipfile

from goxz.build.archive import Archiver, select_format, write_archive
from goxz.build.compiler import Compiler
from goxz.build.naming import binary_name, effective_template, render_output_name
from goxz.exceptions import ArchiveError, BuildError, StageError
from goxz.logging import Logger, SilentLogger
from goxz.platforms import Platform


@dataclass(frozen=True)
class BuildSpec:
    """Run-wide build configuration shared read-only by every Builder.

    Attributes:
        name: Application name.
        version: Version string; may be empty.
        output: Output name template; empty selects the default.
        build_ldflags: Passed to ``go build -ldflags`` unmodified.
        build_tags: Passed to ``go build -tags`` unmodified.
        zip_always: Zip archives for every platform, not only Windows.
        pkgs: Package paths to compile.
        resources: Resource files bundled into every archive.
        project_dir: Absolute project directory.
        dest: Absolute destination directory.
    """

    name: str
    version: str
    output: str
    build_ldflags: str
    build_tags: str
    zip_always: bool
    pkgs: tuple[str, ...]
    resources: tuple[Path, ...]
    project_dir: Path
    dest: Path

    @property
    def template(self) -> str:
        return effective_template(self.output, self.version)


def artifact_name(spec: BuildSpec, platform: Platform) -> str:
    """Archive base name for a platform (no extension)."""
    return render_output_name(
        spec.template,
        name=spec.name,
        os=platform.os,
        arch=platform.arch,
        version=spec.version,
    )


class BuilderState(Enum):
    CREATED = "created"
    COMPILED = "compiled"
    STAGED = "staged"
    ARCHIVED = "archived"
    FAILED = "failed"


class Builder:
    """Compile, stage and archive one platform.

    Attributes:
        platform: Target platform.
        spec: Shared build configuration.
        workdir: Workspace root for the run.
        state: Current BuilderState.
        archive_path: Final archive path once ARCHIVED.
        error: The BuildError that moved the Builder to FAILED.
    """

    def __init__(
        self,
        platform: Platform,
        spec: BuildSpec,
        workdir: Path,
        *,
        compiler: Compiler,
        archiver: Archiver = write_archive,
        logger: Logger | None = None,
    ) -> None:
        self.platform = platform
        self.spec = spec
        self.workdir = workdir
        self.compiler = compiler
        self.archiver = archiver
        self.logger = logger if logger is not None else SilentLogger()
        self.state = BuilderState.CREATED
        self.archive_path: Path | None = None
        self.error: BuildError | None = None

    @property
    def artifact_name(self) -> str:
        return artifact_name(self.spec, self.platform)

    @property
    def archive_format(self) -> str:
        return select_format(self.platform.is_windows, self.spec.zip_always)

    @property
    def platform_dir(self) -> Path:
        return self.workdir / self.platform.dirname

    @property
    def stage_dir(self) -> Path:
        return self.platform_dir / self.artifact_name

    def build(self) -> Path:
        """Run the Builder to completion.

        Returns:
            Path to the archive in the destination directory.

        Raises:
            CompileError: If any package fails to compile.
            StageError: If staging directories or resources cannot be written.
            ArchiveError: If the archive cannot be written.
            RuntimeError: If the Builder has already run.
        """
        if self.state is not BuilderState.CREATED:
            raise RuntimeError(f"Builder for {self.platform} already ran ({self.state.value})")

        try:
            stage_dir = self.stage_dir
            try:
                stage_dir.mkdir(parents=True)
            except OSError as err:
                raise StageError(self.platform, f"cannot create {stage_dir}: {err}") from err

            self._compile(stage_dir)
            self.state = BuilderState.COMPILED

            self._stage_resources(stage_dir)
            self.state = BuilderState.STAGED

            archive_path = self._archive(stage_dir)
        except BuildError as err:
            self.state = BuilderState.FAILED
            self.error = err
            raise
        except Exception as err:
            self.state = BuilderState.FAILED
            self.error = BuildError(self.platform, f"unexpected error: {err!r}")
            raise self.error from err

        self.archive_path = archive_path
        self.state = BuilderState.ARCHIVED
        self.logger.verbose("BUILD", f"{self.platform}: [OK] {archive_path.name}")
        return archive_path

    def _compile(self, stage_dir: Path) -> None:
        for pkg in self.spec.pkgs:
            output = stage_dir / binary_name(
                pkg, self.spec.name, self.spec.project_dir, self.platform.exe_suffix
            )
            self.logger.verbose("BUILD", f"{self.platform}: compiling {pkg} -> {output.name}")
            self.compiler.compile(
                pkg,
                self.platform,
                output,
                ldflags=self.spec.build_ldflags,
                tags=self.spec.build_tags,
            )

    def _stage_resources(self, stage_dir: Path) -> None:
        for resource in self.spec.resources:
            try:
                shutil.copy2(resource, stage_dir / resource.name)
            except OSError as err:
                raise StageError(
                    self.platform, f"cannot copy resource {resource}: {err}"
                ) from err
            self.logger.debug("BUILD", f"{self.platform}: staged {resource.name}")

    def _archive(self, stage_dir: Path) -> Path:
        fmt = self.archive_format
        archive_path = self.spec.dest / f"{stage_dir.name}.{fmt}"
        self.logger.verbose("ARCHIVE", f"{self.platform}: writing {archive_path.name}")
        try:
            self.archiver(stage_dir, archive_path, fmt)
        except (OSError, ValueError, zipfile.BadZipFile, tarfile.TarError) as err:
            raise ArchiveError(
                self.platform, f"cannot write {archive_path}: {err}"
            ) from err
        return archive_path
