"""
Project configuration loading for goxz.

A project may carry a ``.goxz.yaml`` (or ``.goxz.yml``) file in its root
directory with defaults for the command-line flags, so a release build does
not need a long command line.

Configuration Layers
--------------------
1. **Built-in defaults** (DEFAULTS)
2. **Project file** (.goxz.yaml in the project directory)
3. **Command-line flags** (only those explicitly given)

Merge Behavior
--------------
"Last wins" per key. Every key is flat:
  - **Lists**: Completely replaced (NOT appended/extended)
  - **Scalars**: Overwritten (strings, numbers, booleans)

Keys
----
name, dest, version, output, os, arch, build_ldflags, build_tags, zip,
parallelism, pkgs

``os``, ``arch``, and ``pkgs`` accept either a YAML list or a string;
``os``/``arch`` lists are joined with spaces.

Example
-------
    # .goxz.yaml
    name: mytool
    os: [linux, darwin, windows]
    arch: amd64 arm64
    build_ldflags: -s -w
    zip: true

    >>> from pathlib import Path
    >>> from goxz.config import load_project_config
    >>> cfg = load_project_config(Path("."))
    >>> cfg["arch"]
    'amd64 arm64'

Error Handling
--------------
- ConfigError: YAML parse errors, non-mapping documents, unknown keys, or
  values of the wrong type. Errors are chained with "from err".
- An empty file or a missing default file yields no overrides.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from goxz.exceptions import ConfigError
from goxz.platforms import DEFAULT_ARCH, DEFAULT_OS

CONFIG_FILENAMES = (".goxz.yaml", ".goxz.yml")

DEFAULTS: dict[str, Any] = {
    "name": "",
    "dest": "goxz",
    "version": "",
    "output": "",
    "os": DEFAULT_OS,
    "arch": DEFAULT_ARCH,
    "build_ldflags": "",
    "build_tags": "",
    "zip": False,
    "parallelism": None,
    "pkgs": ["."],
}

_STRING_KEYS = {"name", "dest", "version", "output", "build_ldflags", "build_tags"}
_LIST_KEYS = {"os", "arch"}


# -------------------------------
# YAML helpers
# -------------------------------


def _load_yaml_file(p: Path) -> Any:
    """Load a YAML file and return the parsed Python object.

    Raises:
        ConfigError: If the file cannot be read or is not valid YAML.
    """
    try:
        with p.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except OSError as err:
        raise ConfigError(f"Cannot read config file {p}: {err}") from err
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing YAML: {p}: {err}") from err


# -------------------------------
# Merge logic
# -------------------------------


def merge_config(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Layer overlay on top of base, key by key ("overlay wins").

    Lists are replaced, not concatenated. Inputs are not mutated.
    """
    return {**base, **overlay}


# -------------------------------
# Validation
# -------------------------------


def _normalize(data: dict[str, Any], source: Path) -> dict[str, Any]:
    """Validate keys and value types, returning normalized overrides."""
    unknown = sorted(set(data) - set(DEFAULTS))
    if unknown:
        raise ConfigError(f"{source}: unknown key(s): {', '.join(unknown)}")

    out: dict[str, Any] = {}
    for key, value in data.items():
        if key in _STRING_KEYS:
            if not isinstance(value, (str, int, float)) or isinstance(value, bool):
                raise ConfigError(f"{source}: {key} must be a string")
            out[key] = str(value)
        elif key in _LIST_KEYS:
            if isinstance(value, list) and all(isinstance(v, str) for v in value):
                out[key] = " ".join(value)
            elif isinstance(value, str):
                out[key] = value
            else:
                raise ConfigError(f"{source}: {key} must be a string or list of strings")
        elif key == "pkgs":
            if isinstance(value, str):
                value = [value]
            if not (isinstance(value, list) and value and all(isinstance(v, str) for v in value)):
                raise ConfigError(f"{source}: pkgs must be a non-empty list of strings")
            out[key] = list(value)
        elif key == "zip":
            if not isinstance(value, bool):
                raise ConfigError(f"{source}: zip must be true or false")
            out[key] = value
        elif key == "parallelism":
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError(f"{source}: parallelism must be a positive integer")
            out[key] = value
    return out


# -------------------------------
# Public API
# -------------------------------


def find_config_file(project_dir: Path) -> Path | None:
    """Return the project's config file, or None if there is none."""
    for name in CONFIG_FILENAMES:
        candidate = project_dir / name
        if candidate.is_file():
            return candidate
    return None


def load_project_config(project_dir: Path, config_path: Path | None = None) -> dict[str, Any]:
    """Load the project config file as a dict of overrides.

    Args:
        project_dir: Project directory searched for ``.goxz.yaml``.
        config_path: Explicit config file; relative paths are resolved
            against project_dir. Must exist when given.

    Returns:
        Normalized overrides (only keys present in the file).

    Raises:
        ConfigError: If an explicit config file is missing, or the file is
            invalid.
    """
    if config_path is not None:
        path = config_path if config_path.is_absolute() else project_dir / config_path
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
    else:
        path = find_config_file(project_dir)
        if path is None:
            return {}

    data = _load_yaml_file(path)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return _normalize(data, path)


def effective_config(
    file_config: dict[str, Any], cli_overrides: dict[str, Any]
) -> dict[str, Any]:
    """Merge defaults, project file values, and explicit CLI values.

    CLI values of None are treated as "not given" and do not override.
    """
    explicit = {k: v for k, v in cli_overrides.items() if v is not None}
    return merge_config(merge_config(DEFAULTS, file_config), explicit)
