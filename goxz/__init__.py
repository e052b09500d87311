"""
goxz - Just do cross building and archiving Go tools conventionally

A Python CLI tool that cross-compiles a Go program for a matrix of
operating systems and architectures and packages each platform's binary,
together with README/LICENSE/CREDITS/INSTALL files, into a zip or tar.gz
archive ready for release.

goxz provides:
  - Platform matrix resolution from simple "linux darwin, windows" lists
  - Concurrent per-platform builds with failure isolation
  - Zip archives for Windows, tar.gz elsewhere (or zip everywhere with -zip)
  - Deterministic archive names from an output template
  - Optional per-project defaults in .goxz.yaml

Quick Start
-----------
Build for linux, darwin and windows on amd64:

    $ goxz -pv 1.0.0

Build selected targets of a sub-package:

    $ goxz -os "linux darwin" -arch "amd64 arm64" ./cmd/mytool

For full CLI documentation:

    $ goxz --help

Package Structure
-----------------
cli : module
    Command-line interface with argparse.
core : module
    Run coordination (GoxzOptions, run_goxz).
platforms : module
    Platform matrix resolution.
resources : module
    Ancillary file discovery.
workspace : module
    Temporary workspace and destination directory lifecycle.
build : package
    Per-platform Builder, Go compiler wrapper, archive encoding, naming.
config : package
    YAML project configuration loading and merging.

Public API
----------
    from goxz.core import GoxzOptions, run_goxz
    from goxz.platforms import resolve_platforms
    from goxz.resources import gather_resources
"""

__version__ = "0.1.0"
__description__ = "Cross-compile Go programs and archive each platform's build"

from goxz.core import GoxzOptions, run_goxz
from goxz.platforms import Platform, resolve_platforms
from goxz.resources import gather_resources
from goxz.results import BuildResult, RunResult

__all__ = [
    "__version__",
    "__description__",
    "GoxzOptions",
    "run_goxz",
    "Platform",
    "resolve_platforms",
    "gather_resources",
    "BuildResult",
    "RunResult",
]
