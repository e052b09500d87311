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

"""Go toolchain invocation.

The Builder depends only on the Compiler protocol. GoCompiler is the real
implementation: it runs ``go build`` once per package with GOOS and GOARCH
set in the child environment, in the project directory.

In-flight ``go build`` processes are tracked so the run coordinator can
terminate them when the run is interrupted instead of leaving them orphaned.

Example:
    ```python
    from pathlib import Path
    from goxz.build.compiler import GoCompiler
    from goxz.platforms import Platform

    compiler = GoCompiler(project_dir=Path("myapp"))
    compiler.compile(
        ".", Platform("linux", "arm64"), Path("/tmp/out/myapp"),
        ldflags="-s -w", tags="netgo",
    )
    ```
"""

from __future__ import annotations

import os
from pathlib import Path
import subprocess
import threading
from typing import Protocol

from goxz.exceptions import CompileError
from goxz.logging import Logger, SilentLogger
from goxz.platforms import Platform


class Compiler(Protocol):
    """Protocol for compiling one package for one platform."""

    def compile(
        self,
        pkg: str,
        platform: Platform,
        output: Path,
        *,
        ldflags: str = "",
        tags: str = "",
    ) -> None:
        """Compile pkg for platform, writing the binary to output.

        Raises:
            CompileError: If the toolchain fails.
        """
        ...

    def terminate(self) -> None:
        """Stop any compilation still running."""
        ...


class GoCompiler:
    """Compiler backed by ``go build``."""

    def __init__(
        self,
        project_dir: Path,
        go: str = "go",
        logger: Logger | None = None,
    ) -> None:
        """Initialize the compiler.

        Args:
            project_dir: Working directory for ``go build``.
            go: Go executable name or path. Default is "go".
            logger: Logger for command echo. Default is silent.
        """
        self.project_dir = project_dir
        self.go = go
        self.logger = logger if logger is not None else SilentLogger()
        self._procs: set[subprocess.Popen[str]] = set()
        self._lock = threading.Lock()
        self._terminated = False

    def command(self, pkg: str, output: Path, ldflags: str = "", tags: str = "") -> list[str]:
        """Build the ``go build`` argument list."""
        cmd = [self.go, "build", "-o", str(output)]
        if ldflags:
            cmd += ["-ldflags", ldflags]
        if tags:
            cmd += ["-tags", tags]
        cmd.append(pkg)
        return cmd

    def compile(
        self,
        pkg: str,
        platform: Platform,
        output: Path,
        *,
        ldflags: str = "",
        tags: str = "",
    ) -> None:
        cmd = self.command(pkg, output, ldflags=ldflags, tags=tags)
        env = dict(os.environ, GOOS=platform.os, GOARCH=platform.arch)
        self.logger.debug("COMPILE", f"{platform}: {' '.join(cmd)}")

        try:
            proc = subprocess.Popen(
                cmd,
                cwd=str(self.project_dir),
                env=env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except OSError as err:
            raise CompileError(platform, f"failed to run {self.go!r}: {err}") from err

        with self._lock:
            if self._terminated:
                proc.kill()
            self._procs.add(proc)
        try:
            out, _ = proc.communicate()
        finally:
            with self._lock:
                self._procs.discard(proc)

        if proc.returncode != 0:
            raise CompileError(
                platform,
                f"go build {pkg} failed (exit code {proc.returncode})",
                output=out or "",
            )

    def terminate(self) -> None:
        """Kill every running ``go build`` and refuse to start new ones."""
        with self._lock:
            self._terminated = True
            procs = list(self._procs)
        for proc in procs:
            if proc.poll() is None:
                self.logger.debug("COMPILE", f"Terminating pid {proc.pid}")
                proc.terminate()
