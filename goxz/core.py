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

"""Core orchestration for goxz.

This module coordinates a complete run: it resolves the platform matrix,
collects resource files, prepares the destination and the workspace, then
runs one Builder per platform concurrently and aggregates the results.

Design Principles:

- Setup failures (config, destination, workspace, resource scan) abort the
  run before any Builder starts
- A Builder failure is isolated to its platform; every other platform still
  produces its archive (partial success, not all-or-nothing)
- All failures are reported together in one BuildFailures error
- No component depends on the process's current directory; every path is
  resolved against the project directory up front
- The workspace is removed on every exit path unless retained

Example:
    Programmatic usage:
        ```python
        from pathlib import Path
        from goxz.core import GoxzOptions, run_goxz
        from goxz.logging import get_logger

        result = run_goxz(
            GoxzOptions(project_dir=Path("myapp"), os="linux darwin",
                        arch="amd64 arm64", version="1.0.0"),
            logger=get_logger(verbose=True),
        )
        print(result.archives)
        ```

"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, replace
import os
from pathlib import Path

from goxz.build.archive import Archiver, write_archive
from goxz.build.builder import Builder, BuildSpec, artifact_name
from goxz.build.compiler import Compiler, GoCompiler
from goxz.build.naming import archive_name_pattern
from goxz.config import effective_config, load_project_config
from goxz.exceptions import BuildError, BuildFailures, ConfigError, SetupError
from goxz.logging import Logger, SilentLogger
from goxz.platforms import DEFAULT_ARCH, DEFAULT_OS, Platform, resolve_platforms
from goxz.resources import gather_resources
from goxz.results import BuildResult, RunResult
from goxz.workspace import setup_dest, workspace

TOTAL_STEPS = 5


@dataclass(frozen=True)
class GoxzOptions:
    """Options for one run, mirroring the command-line flags.

    Fields left as None fall back to the project config file and then to the
    built-in defaults.

    Attributes:
        project_dir: Project directory (``-C``). Default: current directory.
        name: Application name (``-n``).
        dest: Destination directory (``-d``), relative to project_dir.
        version: Version string (``-pv``).
        output: Output name template (``-o``).
        os: Target OS list (``-os``).
        arch: Target architecture list (``-arch``).
        build_ldflags: Linker flags (``-build-ldflags``).
        build_tags: Build tags (``-build-tags``).
        zip_always: Zip every platform (``-zip``).
        parallelism: Max concurrent Builders (``-p``).
        work: Keep the workspace and report its path (``-work``).
        pkgs: Package paths (positional arguments).
        config_path: Explicit config file (``-config``).
        use_config: Whether to read the project config file at all.
    """

    project_dir: Path | None = None
    name: str | None = None
    dest: str | None = None
    version: str | None = None
    output: str | None = None
    os: str | None = None
    arch: str | None = None
    build_ldflags: str | None = None
    build_tags: str | None = None
    zip_always: bool | None = None
    parallelism: int | None = None
    work: bool = False
    pkgs: tuple[str, ...] | None = None
    config_path: Path | None = None
    use_config: bool = True


def _resolve_project_dir(project_dir: Path | None) -> Path:
    path = (project_dir if project_dir is not None else Path.cwd()).resolve()
    if not path.is_dir():
        raise SetupError(f"Project directory not found: {path}")
    return path


def resolve_build_spec(
    options: GoxzOptions, project_dir: Path
) -> tuple[BuildSpec, str, str, int]:
    """Combine options, project config, and defaults into a BuildSpec.

    Returns:
        (spec, os_list, arch_list, parallelism)

    Raises:
        ConfigError: If the project config file is invalid.
    """
    file_config = (
        load_project_config(project_dir, options.config_path) if options.use_config else {}
    )
    cfg = effective_config(
        file_config,
        {
            "name": options.name,
            "dest": options.dest,
            "version": options.version,
            "output": options.output,
            "os": options.os,
            "arch": options.arch,
            "build_ldflags": options.build_ldflags,
            "build_tags": options.build_tags,
            "zip": options.zip_always,
            "parallelism": options.parallelism,
            "pkgs": list(options.pkgs) if options.pkgs else None,
        },
    )

    parallelism = cfg["parallelism"] or os.cpu_count() or 1
    if parallelism < 1:
        raise ConfigError(f"parallelism must be at least 1, got {parallelism}")

    spec = BuildSpec(
        name=cfg["name"] or project_dir.name,
        version=cfg["version"],
        output=cfg["output"],
        build_ldflags=cfg["build_ldflags"],
        build_tags=cfg["build_tags"],
        zip_always=cfg["zip"],
        pkgs=tuple(cfg["pkgs"]),
        resources=(),
        project_dir=project_dir,
        dest=(project_dir / (cfg["dest"] or "goxz")).resolve(),
    )
    return spec, cfg["os"] or DEFAULT_OS, cfg["arch"] or DEFAULT_ARCH, parallelism


def _check_names(spec: BuildSpec, platforms: list[Platform]) -> None:
    """Render every artifact name up front so template errors stop the run early."""
    seen: dict[str, Platform] = {}
    for pf in platforms:
        name = artifact_name(spec, pf)
        if name in seen:
            raise ConfigError(
                f"Output template {spec.template!r} gives {seen[name]} and {pf} "
                f"the same archive name {name!r}"
            )
        seen[name] = pf


def _run_builder(builder: Builder, logger: Logger) -> BuildResult:
    try:
        archive = builder.build()
    except BuildError as err:
        logger.error("BUILD", str(err))
        return BuildResult(
            platform=builder.platform, archive_path=None, error=err, status="failed"
        )
    return BuildResult(
        platform=builder.platform, archive_path=archive, error=None, status="success"
    )


def run_builders(
    builders: list[Builder], parallelism: int, compiler: Compiler, logger: Logger
) -> list[BuildResult]:
    """Run Builders concurrently and collect their results.

    Results are returned in the order of ``builders`` regardless of
    completion order. On interrupt, pending Builders are cancelled and
    running compilations are terminated before the interrupt propagates.
    """
    results: dict[int, BuildResult] = {}
    executor = ThreadPoolExecutor(max_workers=max(1, parallelism), thread_name_prefix="goxz")
    try:
        futures: dict[Future[BuildResult], int] = {
            executor.submit(_run_builder, b, logger): i for i, b in enumerate(builders)
        }
        for future in as_completed(futures):
            results[futures[future]] = future.result()
    except BaseException:
        executor.shutdown(wait=False, cancel_futures=True)
        compiler.terminate()
        raise
    finally:
        executor.shutdown(wait=True)
    return [results[i] for i in range(len(builders))]


def run_goxz(
    options: GoxzOptions,
    *,
    logger: Logger | None = None,
    compiler: Compiler | None = None,
    archiver: Archiver = write_archive,
) -> RunResult:
    """Build and archive the project for every resolved platform.

    This is the main entry point for the ``goxz`` command. It:

    1. Resolves options, project config, and defaults
    2. Resolves the platform matrix
    3. Collects resource files from the project directory
    4. Prepares the destination directory (purging stale archives)
    5. Runs one Builder per platform inside a fresh workspace

    Args:
        options: Run options (see GoxzOptions).
        logger: Logger passed to every component. Default is silent.
        compiler: Compiler for all Builders. Default: GoCompiler for the
            project directory.
        archiver: Archive encoder. Default: write_archive.

    Returns:
        RunResult with one BuildResult per platform.

    Raises:
        ConfigError: If the config file or output template is invalid, or
            no platform could be resolved.
        SetupError: If the project, destination, or workspace cannot be
            prepared.
        BuildFailures: If at least one platform failed. Archives for the
            other platforms are still written.
    """
    logger = logger if logger is not None else SilentLogger()
    project_dir = _resolve_project_dir(options.project_dir)

    logger.step(1, TOTAL_STEPS, "Loading configuration...")
    spec, os_list, arch_list, parallelism = resolve_build_spec(options, project_dir)
    logger.verbose("CONFIG", f"Project: {project_dir} (name: {spec.name})")

    logger.step(2, TOTAL_STEPS, "Resolving platforms...")
    platforms = resolve_platforms(os_list, arch_list)
    if not platforms:
        raise ConfigError(f"No target platforms in os={os_list!r} arch={arch_list!r}")
    logger.verbose("CONFIG", f"Platforms: {', '.join(str(p) for p in platforms)}")
    _check_names(spec, platforms)

    logger.step(3, TOTAL_STEPS, "Collecting resources...")
    resources = gather_resources(project_dir)
    for resource in resources:
        logger.verbose("RESOURCE", resource.name)
    spec = replace(spec, resources=tuple(resources))

    logger.step(4, TOTAL_STEPS, "Preparing destination...")
    setup_dest(spec.dest, archive_name_pattern(spec.template, spec.name), logger)

    if compiler is None:
        compiler = GoCompiler(project_dir, logger=logger)

    logger.step(5, TOTAL_STEPS, f"Building {len(platforms)} platform(s)...")
    with workspace(project_dir, retain=options.work, logger=logger) as workdir:
        builders = [
            Builder(pf, spec, workdir, compiler=compiler, archiver=archiver, logger=logger)
            for pf in platforms
        ]
        results = run_builders(builders, parallelism, compiler, logger)

    result = RunResult(
        results=tuple(results),
        dest=spec.dest,
        workdir=workdir,
        workdir_retained=options.work,
    )
    if result.failures:
        raise BuildFailures(result.failures, result)
    return result
