"""
Pytest configuration and shared fixtures for goxz tests.

This module provides reusable fixtures and test doubles used across
the test suite: a throwaway Go project tree, a fake compiler that writes
placeholder binaries instead of invoking ``go build``, and a logger that
records messages.
"""

from __future__ import annotations

from pathlib import Path
import threading

import pytest

from goxz.build.builder import BuildSpec
from goxz.exceptions import CompileError
from goxz.platforms import Platform


class FakeCompiler:
    """Compiler double that writes an executable placeholder binary.

    Platforms whose key ("os:arch") is listed in ``fail`` raise CompileError.
    """

    def __init__(self, fail: set[str] | None = None) -> None:
        self.fail = fail or set()
        self.calls: list[tuple[str, Platform, Path, str, str]] = []
        self.terminated = False
        self._lock = threading.Lock()

    def compile(self, pkg, platform, output, *, ldflags="", tags=""):
        with self._lock:
            self.calls.append((pkg, platform, output, ldflags, tags))
        if platform.key in self.fail:
            raise CompileError(
                platform,
                "go build failed (exit code 2)",
                output=f"cmd/go: unsupported GOOS/GOARCH pair {platform}",
            )
        output.write_text(f"binary {pkg} for {platform}\n")
        output.chmod(0o755)

    def terminate(self):
        self.terminated = True


class RecordingLogger:
    """Logger that keeps every message as (level, prefix, message)."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str, str]] = []
        self._lock = threading.Lock()

    def _add(self, level: str, prefix: str, message: str) -> None:
        with self._lock:
            self.records.append((level, prefix, message))

    def step(self, step: int, total: int, message: str) -> None:
        self._add("step", f"{step}/{total}", message)

    def info(self, prefix: str, message: str) -> None:
        self._add("info", prefix, message)

    def error(self, prefix: str, message: str) -> None:
        self._add("error", prefix, message)

    def verbose(self, prefix: str, message: str) -> None:
        self._add("verbose", prefix, message)

    def debug(self, prefix: str, message: str) -> None:
        self._add("debug", prefix, message)

    def messages(self, level: str) -> list[str]:
        return [m for lv, _p, m in self.records if lv == level]


@pytest.fixture
def compiler_class() -> type[FakeCompiler]:
    """Provide the FakeCompiler class for tests that need custom instances."""
    return FakeCompiler


@pytest.fixture
def fake_compiler() -> FakeCompiler:
    return FakeCompiler()


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def go_project(tmp_path: Path) -> Path:
    """
    Provide a minimal Go project directory named "myapp".

    Contains main.go, install.go, README.md, LICENSE and a docs/ directory.
    """
    project = tmp_path / "myapp"
    project.mkdir()
    (project / "go.mod").write_text("module example.com/myapp\n\ngo 1.21\n")
    (project / "main.go").write_text(
        'package main\n\nimport "fmt"\n\nfunc main() { fmt.Println("hello") }\n'
    )
    (project / "install.go").write_text("package main\n")
    (project / "README.md").write_text("# myapp\n")
    (project / "LICENSE").write_text("MIT\n")
    (project / "docs").mkdir()
    return project


@pytest.fixture
def make_spec(go_project: Path):
    """
    Factory fixture for BuildSpec values rooted at go_project.

    Usage:
        spec = make_spec(version="1.0.0", zip_always=True)
    """

    def _make(**overrides) -> BuildSpec:
        values = {
            "name": "myapp",
            "version": "",
            "output": "",
            "build_ldflags": "",
            "build_tags": "",
            "zip_always": False,
            "pkgs": (".",),
            "resources": (go_project / "LICENSE", go_project / "README.md"),
            "project_dir": go_project,
            "dest": go_project / "goxz",
        }
        values.update(overrides)
        values["dest"].mkdir(parents=True, exist_ok=True)
        return BuildSpec(**values)

    return _make
