"""
Tests for goxz.build.compiler module.

Tests GoCompiler command construction and process handling with
subprocess.Popen mocked out.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from goxz.build.compiler import GoCompiler
from goxz.exceptions import CompileError
from goxz.platforms import Platform

pytestmark = pytest.mark.unit

LINUX_ARM64 = Platform("linux", "arm64")


def _proc(returncode=0, output=""):
    proc = MagicMock()
    proc.communicate.return_value = (output, None)
    proc.returncode = returncode
    proc.poll.return_value = None
    return proc


class TestCommand:
    """Tests for go build argument construction."""

    def test_minimal(self, tmp_path):
        compiler = GoCompiler(tmp_path)

        assert compiler.command(".", Path("/out/app")) == [
            "go", "build", "-o", str(Path("/out/app")), ".",
        ]

    def test_flags_passed_as_single_arguments(self, tmp_path):
        compiler = GoCompiler(tmp_path, go="/usr/local/go/bin/go")

        cmd = compiler.command(
            "./cmd/tool", Path("/out/tool"), ldflags="-s -w -X main.v=1", tags="netgo osusergo"
        )

        assert cmd == [
            "/usr/local/go/bin/go", "build", "-o", str(Path("/out/tool")),
            "-ldflags", "-s -w -X main.v=1",
            "-tags", "netgo osusergo",
            "./cmd/tool",
        ]


class TestCompile:
    """Tests for GoCompiler.compile."""

    def test_environment_and_cwd(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GOFLAGS", "-trimpath")
        compiler = GoCompiler(tmp_path)

        with patch("goxz.build.compiler.subprocess.Popen", return_value=_proc()) as popen:
            compiler.compile(".", LINUX_ARM64, tmp_path / "app")

        kwargs = popen.call_args.kwargs
        assert kwargs["cwd"] == str(tmp_path)
        assert kwargs["env"]["GOOS"] == "linux"
        assert kwargs["env"]["GOARCH"] == "arm64"
        assert kwargs["env"]["GOFLAGS"] == "-trimpath"

    def test_failure_carries_output(self, tmp_path):
        compiler = GoCompiler(tmp_path)
        proc = _proc(returncode=2, output="cmd/go: unsupported GOOS/GOARCH pair linux/arm64\n")

        with patch("goxz.build.compiler.subprocess.Popen", return_value=proc):
            with pytest.raises(CompileError) as exc_info:
                compiler.compile(".", LINUX_ARM64, tmp_path / "app")

        err = exc_info.value
        assert err.platform == LINUX_ARM64
        assert "exit code 2" in str(err)
        assert "unsupported GOOS/GOARCH" in str(err)
        assert "unsupported GOOS/GOARCH" in err.output

    def test_missing_go_binary(self, tmp_path):
        compiler = GoCompiler(tmp_path, go="go-does-not-exist")

        with patch(
            "goxz.build.compiler.subprocess.Popen",
            side_effect=FileNotFoundError("No such file"),
        ):
            with pytest.raises(CompileError, match="failed to run"):
                compiler.compile(".", LINUX_ARM64, tmp_path / "app")

    def test_command_echoed_in_debug(self, tmp_path, recording_logger):
        compiler = GoCompiler(tmp_path, logger=recording_logger)

        with patch("goxz.build.compiler.subprocess.Popen", return_value=_proc()):
            compiler.compile(".", LINUX_ARM64, tmp_path / "app", tags="netgo")

        [echo] = recording_logger.messages("debug")
        assert echo.startswith("linux/arm64: go build -o")
        assert "-tags netgo" in echo


class TestTerminate:
    """Tests for GoCompiler.terminate."""

    def test_kills_processes_started_after_terminate(self, tmp_path):
        compiler = GoCompiler(tmp_path)
        compiler.terminate()
        proc = _proc(returncode=-9)

        with patch("goxz.build.compiler.subprocess.Popen", return_value=proc):
            with pytest.raises(CompileError):
                compiler.compile(".", LINUX_ARM64, tmp_path / "app")

        proc.kill.assert_called_once()

    def test_terminates_running_processes(self, tmp_path):
        compiler = GoCompiler(tmp_path)
        proc = _proc()

        def communicate():
            compiler.terminate()
            return ("", None)

        proc.communicate.side_effect = communicate

        with patch("goxz.build.compiler.subprocess.Popen", return_value=proc):
            compiler.compile(".", LINUX_ARM64, tmp_path / "app")

        proc.terminate.assert_called_once()
