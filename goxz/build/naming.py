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

"""Artifact and binary naming.

Archive names come from an output template using Go template style
placeholders, so existing ``-o`` values keep working:

- ``{{.Name}}``: Application name
- ``{{.OS}}`` (also ``{{.Os}}``): Target operating system
- ``{{.Arch}}``: Target architecture
- ``{{.Version}}``: Version string (may be empty)

Whitespace inside the braces is ignored (``{{ .Name }}`` works). Any other
placeholder is a ConfigError.

Example:
    ```python
    from goxz.build.naming import render_output_name, DEFAULT_OUTPUT

    render_output_name(DEFAULT_OUTPUT, name="app", os="linux", arch="amd64")
    # 'app_linux_amd64'
    render_output_name(DEFAULT_OUTPUT, name="app", os="linux", arch="amd64",
                       version="1.2.0")
    # 'app_linux_amd64_1.2.0'
    ```
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath
import re

from goxz.exceptions import ConfigError

DEFAULT_OUTPUT = "{{.Name}}_{{.OS}}_{{.Arch}}"
VERSION_SUFFIX = "_{{.Version}}"

_PLACEHOLDER = re.compile(r"\{\{\s*\.(\w+)\s*\}\}")
_FIELDS = {"Name": "name", "OS": "os", "Os": "os", "Arch": "arch", "Version": "version"}


def effective_template(output: str, version: str) -> str:
    """Return the template to render, applying the default and version suffix.

    The version suffix is only appended to the default template; a user
    supplied template is taken as is.
    """
    if output:
        return output
    if version:
        return DEFAULT_OUTPUT + VERSION_SUFFIX
    return DEFAULT_OUTPUT


def validate_template(template: str) -> None:
    """Check a template for unknown placeholders.

    Raises:
        ConfigError: If the template uses a placeholder other than Name, OS,
            Os, Arch, or Version.
    """
    unknown = sorted(
        {m.group(1) for m in _PLACEHOLDER.finditer(template)} - _FIELDS.keys()
    )
    if unknown:
        raise ConfigError(
            f"Unknown placeholder(s) in output template {template!r}: "
            f"{', '.join('{{.' + u + '}}' for u in unknown)}"
        )


def render_output_name(
    template: str, *, name: str, os: str, arch: str, version: str = ""
) -> str:
    """Substitute placeholders in an output template.

    Args:
        template: Output name template.
        name: Application name.
        os: Target operating system.
        arch: Target architecture.
        version: Version string. Default is "".

    Returns:
        The artifact base name (no archive extension).

    Raises:
        ConfigError: If the template has unknown placeholders or the rendered
            name is empty or contains a path separator.
    """
    validate_template(template)
    values = {"name": name, "os": os, "arch": arch, "version": version}
    rendered = _PLACEHOLDER.sub(lambda m: values[_FIELDS[m.group(1)]], template)
    if not rendered or "/" in rendered or "\\" in rendered:
        raise ConfigError(f"Output template {template!r} rendered invalid name {rendered!r}")
    return rendered


def archive_name_pattern(template: str, name: str) -> re.Pattern[str]:
    """Compile a regex matching archive filenames the template can produce.

    ``{{.Name}}`` matches the application name literally. OS and Arch match
    any non-empty run without a path separator; Version may also be empty.
    Only ``.zip`` and ``.tar.gz`` names match.

    Example:
        ```python
        pattern = archive_name_pattern(DEFAULT_OUTPUT, "app")
        bool(pattern.fullmatch("app_linux_amd64.tar.gz"))  # True
        bool(pattern.fullmatch("testdata.zip"))            # False
        ```

    Raises:
        ConfigError: If the template has unknown placeholders.
    """
    validate_template(template)
    parts: list[str] = []
    pos = 0
    for m in _PLACEHOLDER.finditer(template):
        parts.append(re.escape(template[pos : m.start()]))
        field = _FIELDS[m.group(1)]
        if field == "name":
            parts.append(re.escape(name))
        elif field == "version":
            parts.append(r"[^/\\]*")
        else:
            parts.append(r"[^/\\]+")
        pos = m.end()
    parts.append(re.escape(template[pos:]))
    return re.compile("".join(parts) + r"\.(?:zip|tar\.gz)")


def binary_name(pkg: str, app_name: str, project_dir: Path, exe_suffix: str = "") -> str:
    """Determine the output binary filename for a package.

    The main package of the project (``.`` or any path resolving to the
    project directory) is named after the application. Other packages take
    the last element of their path, as ``go build`` does.

    Example:
        ```python
        binary_name(".", "app", Path("/src/app"))                    # 'app'
        binary_name("./cmd/tool", "app", Path("/src/app"), ".exe")   # 'tool.exe'
        binary_name("github.com/x/y/cmd/z", "app", Path("/src/app")) # 'z'
        ```
    """
    if pkg.startswith("."):
        resolved = (project_dir / pkg).resolve()
        base = app_name if resolved == project_dir.resolve() else resolved.name
    else:
        base = PurePosixPath(pkg.rstrip("/")).name or app_name
    return base + exe_suffix
