"""
Per-platform build and packaging for goxz.

This package holds the Builder (compile, stage, archive for one platform)
and the collaborators it depends on: the Go compiler wrapper, the archive
encoders, and artifact naming.

Public API:

Builder : class
    Build one platform and produce its archive.
BuildSpec : dataclass
    Run-wide build configuration shared by every Builder.
GoCompiler : class
    Compiler implementation backed by ``go build``.
write_archive : function
    Encode a staging directory as zip or tar.gz.
render_output_name : function
    Expand an output name template for a platform.

Example:
    from pathlib import Path
    from goxz.build import Builder, BuildSpec, GoCompiler
    from goxz.platforms import Platform

    builder = Builder(
        Platform("linux", "amd64"),
        spec,
        workdir,
        compiler=GoCompiler(spec.project_dir),
    )
    print(builder.build())
"""

from .archive import select_format, write_archive
from .builder import Builder, BuilderState, BuildSpec
from .compiler import Compiler, GoCompiler
from .naming import DEFAULT_OUTPUT, render_output_name

__all__ = [
    "Builder",
    "BuilderState",
    "BuildSpec",
    "Compiler",
    "DEFAULT_OUTPUT",
    "GoCompiler",
    "render_output_name",
    "select_format",
    "write_archive",
]
