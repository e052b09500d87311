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

"""Command-line interface for goxz.

Flags keep the single-dash spelling of the original Go tool (``-os``,
``-arch``, ``-pv``, ``-build-ldflags``), so existing release scripts work
unchanged.

Example:
    Build for the default matrix (linux, darwin, windows on amd64):
        ```bash
        $ goxz -pv 1.2.0
        ```

    Build two OSes on two architectures, zipping everything:
        ```bash
        $ goxz -os "linux, darwin" -arch "amd64 arm64" -zip ./cmd/mytool
        ```

    Pass linker flags (use = when the value starts with a dash):
        ```bash
        $ goxz -build-ldflags="-s -w -X main.version=1.2.0"
        ```

Exit Codes:

- 0: Success
- 1: Invalid flags or arguments
- 2: Any other error (setup failure or at least one platform failed)

Note:
    The CLI uses argparse for command parsing. Verbose mode shows full
    tracebacks on errors for debugging. Debug mode implies verbose mode and
    echoes every ``go build`` command.
"""

from __future__ import annotations

import argparse
from contextlib import redirect_stdout
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
import sys
import traceback
from typing import NoReturn, TextIO

from goxz.build.naming import DEFAULT_OUTPUT
from goxz.core import GoxzOptions, run_goxz
from goxz.exceptions import BuildFailures, FlagError, GoxzError
from goxz.logging import get_logger
from goxz.results import RunResult

EXIT_OK = 0
EXIT_FLAG_ERROR = 1
EXIT_ERROR = 2


class _FlagParser(argparse.ArgumentParser):
    """ArgumentParser that raises FlagError instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise FlagError(message)


def _tool_version() -> str:
    try:
        return version("goxz")
    except PackageNotFoundError:
        from goxz import __version__

        return __version__


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from err
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {value!r}")
    return n


def build_parser() -> argparse.ArgumentParser:
    """Create the goxz argument parser."""
    parser = _FlagParser(
        prog="goxz",
        description=(
            "Cross-compile a Go program and package each platform's binary "
            "into an archive"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"goxz {_tool_version()}",
    )
    parser.add_argument(
        "-n",
        dest="name",
        default=None,
        help="Application name. By default this is the directory name.",
    )
    parser.add_argument(
        "-d",
        dest="dest",
        default=None,
        help="Destination directory (default: goxz)",
    )
    parser.add_argument(
        "-pv",
        dest="version",
        default=None,
        help="Package version",
    )
    parser.add_argument(
        "-o",
        dest="output",
        default=None,
        help=(
            f"Output name template (default: {DEFAULT_OUTPUT}, "
            "suffixed with _{{.Version}} when -pv is set)"
        ),
    )
    parser.add_argument(
        "-os",
        dest="os",
        default=None,
        help="Target OS list (default: 'linux darwin windows')",
    )
    parser.add_argument(
        "-arch",
        dest="arch",
        default=None,
        help="Target arch list (default: 'amd64')",
    )
    parser.add_argument(
        "-build-ldflags",
        dest="build_ldflags",
        default=None,
        help="Arguments to pass on each go tool link invocation",
    )
    parser.add_argument(
        "-build-tags",
        dest="build_tags",
        default=None,
        metavar="TAGS",
        help="A space-separated list of build tags",
    )
    parser.add_argument(
        "-zip",
        dest="zip_always",
        action="store_const",
        const=True,
        default=None,
        help="Zip archives for every platform (Windows is always zipped)",
    )
    parser.add_argument(
        "-p",
        dest="parallelism",
        type=_positive_int,
        default=None,
        help="Number of platforms built in parallel (default: CPU count)",
    )
    parser.add_argument(
        "-config",
        dest="config_path",
        type=Path,
        default=None,
        help=(
            "Project config file, relative to the current directory "
            "(default: .goxz.yaml in the project directory)"
        ),
    )
    parser.add_argument(
        "-no-config",
        dest="use_config",
        action="store_false",
        help="Ignore the project config file",
    )
    parser.add_argument(
        "-C",
        dest="project_dir",
        type=Path,
        default=None,
        help="[for debug] project directory to build (default: current directory)",
    )
    parser.add_argument(
        "-work",
        action="store_true",
        help=(
            "[for debug] print the name of the temporary work directory "
            "and do not delete it when exiting"
        ),
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress and high-level status updates",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )
    parser.add_argument(
        "pkgs",
        nargs="*",
        help="Package paths to build (default: .)",
    )
    return parser


def options_from_args(args: argparse.Namespace) -> GoxzOptions:
    return GoxzOptions(
        project_dir=args.project_dir,
        name=args.name,
        dest=args.dest,
        version=args.version,
        output=args.output,
        os=args.os,
        arch=args.arch,
        build_ldflags=args.build_ldflags,
        build_tags=args.build_tags,
        zip_always=args.zip_always,
        parallelism=args.parallelism,
        work=args.work,
        pkgs=tuple(args.pkgs) if args.pkgs else None,
        config_path=args.config_path.absolute() if args.config_path else None,
        use_config=args.use_config,
    )


def _print_results(result: RunResult, out: TextIO) -> None:
    print("=" * 70, file=out)
    print("BUILD RESULTS", file=out)
    print("=" * 70, file=out)
    for r in result.results:
        if r.ok:
            print(f"  [OK]     {str(r.platform):<20} {r.archive_path}", file=out)
        else:
            print(f"  [FAILED] {r.platform}", file=out)
    print("=" * 70, file=out)
    if result.workdir_retained:
        print(f"Work Directory:  {result.workdir}", file=out)


def run(
    argv: list[str] | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Parse argv, run goxz, and map the outcome to an exit code."""
    out = stdout if stdout is not None else sys.stdout
    err_stream = stderr if stderr is not None else sys.stderr

    parser = build_parser()
    try:
        # -h and --version print through sys.stdout
        with redirect_stdout(out):
            args = parser.parse_args(argv)
    except FlagError as err:
        parser.print_usage(err_stream)
        print(f"goxz: error: {err}", file=err_stream)
        return EXIT_FLAG_ERROR
    except SystemExit as exc:
        # -h and --version
        return exc.code if isinstance(exc.code, int) else EXIT_OK

    logger = get_logger(verbose=args.verbose, debug=args.debug, stream=err_stream)

    try:
        result = run_goxz(options_from_args(args), logger=logger)
    except BuildFailures as err:
        _print_results(err.result, out)
        print(f"Error: {err}", file=err_stream)
        return EXIT_ERROR
    except GoxzError as err:
        print(f"Error: {err}", file=err_stream)
        if args.verbose or args.debug:
            traceback.print_exc(file=err_stream)
        return EXIT_ERROR
    except KeyboardInterrupt:
        print("Interrupted", file=err_stream)
        return EXIT_ERROR

    _print_results(result, out)
    print(file=out)
    print(
        f"[SUCCESS] {len(result.archives)} archive(s) written to {result.dest}",
        file=out,
    )
    return EXIT_OK


def main() -> None:
    """Main entry point for the goxz CLI.

    This function is registered as the 'goxz' console script in pyproject.toml.
    """
    sys.exit(run())


if __name__ == "__main__":
    main()
