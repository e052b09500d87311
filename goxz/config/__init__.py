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

"""Project configuration for goxz.

Loads optional ``.goxz.yaml`` defaults from the project directory and
layers them between the built-in defaults and explicit command-line flags.

Public API:

- load_project_config: Load and validate the project config file
- effective_config: Merge defaults, project file, and CLI values

Example:
    Basic usage:

        from pathlib import Path
        from goxz.config import effective_config, load_project_config

        file_cfg = load_project_config(Path("myapp"))
        cfg = effective_config(file_cfg, {"version": "1.0.0"})
        print(cfg["os"])  # "linux darwin windows" unless overridden

"""

from .loader import DEFAULTS, effective_config, load_project_config

__all__ = ["DEFAULTS", "effective_config", "load_project_config"]
