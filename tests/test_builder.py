"""
Tests for goxz.build.builder module.

Tests the per-platform Builder including:
- Staging layout and archive naming
- Multiple packages per platform
- Failure at each step and the resulting state
"""

from __future__ import annotations

import tarfile
import zipfile

import pytest

from goxz.build.builder import Builder, BuilderState
from goxz.exceptions import ArchiveError, BuildError, CompileError, StageError
from goxz.platforms import Platform

pytestmark = pytest.mark.unit

LINUX = Platform("linux", "amd64")
WINDOWS = Platform("windows", "amd64")


@pytest.fixture
def workdir(tmp_path):
    path = tmp_path / "work"
    path.mkdir()
    return path


class TestBuilderSuccess:
    """Tests for a Builder that runs to completion."""

    def test_linux_tarball(self, make_spec, workdir, fake_compiler):
        spec = make_spec()
        builder = Builder(LINUX, spec, workdir, compiler=fake_compiler)

        archive = builder.build()

        assert archive == spec.dest / "myapp_linux_amd64.tar.gz"
        assert builder.state is BuilderState.ARCHIVED
        assert builder.archive_path == archive
        with tarfile.open(archive) as tar:
            names = set(tar.getnames())
        assert names == {
            "myapp_linux_amd64",
            "myapp_linux_amd64/myapp",
            "myapp_linux_amd64/LICENSE",
            "myapp_linux_amd64/README.md",
        }

    def test_windows_zip_with_exe(self, make_spec, workdir, fake_compiler):
        spec = make_spec(version="1.0.0")
        builder = Builder(WINDOWS, spec, workdir, compiler=fake_compiler)

        archive = builder.build()

        assert archive.name == "myapp_windows_amd64_1.0.0.zip"
        with zipfile.ZipFile(archive) as zf:
            assert "myapp_windows_amd64_1.0.0/myapp.exe" in zf.namelist()

    def test_zip_always(self, make_spec, workdir, fake_compiler):
        spec = make_spec(zip_always=True)

        archive = Builder(LINUX, spec, workdir, compiler=fake_compiler).build()

        assert archive.suffix == ".zip"

    def test_multiple_packages(self, make_spec, workdir, fake_compiler):
        spec = make_spec(pkgs=(".", "./cmd/helper"))
        builder = Builder(LINUX, spec, workdir, compiler=fake_compiler)

        builder.build()

        outputs = sorted(call[2].name for call in fake_compiler.calls)
        assert outputs == ["helper", "myapp"]
        assert all(call[2].parent == builder.stage_dir for call in fake_compiler.calls)

    def test_flags_passed_to_compiler(self, make_spec, workdir, fake_compiler):
        spec = make_spec(build_ldflags="-s -w", build_tags="netgo osusergo")

        Builder(LINUX, spec, workdir, compiler=fake_compiler).build()

        (_pkg, platform, _out, ldflags, tags) = fake_compiler.calls[0]
        assert platform == LINUX
        assert ldflags == "-s -w"
        assert tags == "netgo osusergo"

    def test_stage_dir_layout(self, make_spec, workdir, fake_compiler):
        builder = Builder(LINUX, make_spec(), workdir, compiler=fake_compiler)

        assert builder.platform_dir == workdir / "linux_amd64"
        assert builder.stage_dir == workdir / "linux_amd64" / "myapp_linux_amd64"

    def test_no_resources(self, make_spec, workdir, fake_compiler):
        archive = Builder(
            LINUX, make_spec(resources=()), workdir, compiler=fake_compiler
        ).build()

        with tarfile.open(archive) as tar:
            assert set(tar.getnames()) == {"myapp_linux_amd64", "myapp_linux_amd64/myapp"}

    def test_runs_only_once(self, make_spec, workdir, fake_compiler):
        builder = Builder(LINUX, make_spec(), workdir, compiler=fake_compiler)
        builder.build()

        with pytest.raises(RuntimeError, match="already ran"):
            builder.build()


class TestBuilderFailure:
    """Tests for Builder failures."""

    def test_compile_failure_stops_before_archive(self, make_spec, workdir, compiler_class):
        spec = make_spec()
        compiler = compiler_class(fail={"linux:amd64"})
        builder = Builder(LINUX, spec, workdir, compiler=compiler)

        with pytest.raises(CompileError) as exc_info:
            builder.build()

        assert exc_info.value.platform == LINUX
        assert "unsupported GOOS/GOARCH" in exc_info.value.output
        assert builder.state is BuilderState.FAILED
        assert builder.error is exc_info.value
        assert list(spec.dest.iterdir()) == []

    def test_missing_resource(self, make_spec, workdir, fake_compiler, go_project):
        spec = make_spec(resources=(go_project / "CREDITS",))
        builder = Builder(LINUX, spec, workdir, compiler=fake_compiler)

        with pytest.raises(StageError, match="cannot copy resource"):
            builder.build()

        assert builder.state is BuilderState.FAILED

    def test_archive_failure(self, make_spec, workdir, fake_compiler):
        def broken(source_dir, archive_path, fmt):
            raise OSError("no space left on device")

        builder = Builder(LINUX, make_spec(), workdir, compiler=fake_compiler, archiver=broken)

        with pytest.raises(ArchiveError, match="no space left"):
            builder.build()

        assert builder.state is BuilderState.FAILED

    def test_unexpected_error_wrapped(self, make_spec, workdir, compiler_class):
        class Exploding(compiler_class):
            def compile(self, pkg, platform, output, *, ldflags="", tags=""):
                raise KeyError("surprise")

        builder = Builder(LINUX, make_spec(), workdir, compiler=Exploding())

        with pytest.raises(BuildError, match="unexpected error") as exc_info:
            builder.build()

        assert isinstance(exc_info.value.__cause__, KeyError)
        assert builder.state is BuilderState.FAILED
