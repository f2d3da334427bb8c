"""Build configuration: defaults plus an optional YAML override file.

YAML format (every key optional):
- workspace_name: directory created under OUT_DIR (default xed-build)
- trees: vendored trees staged into the workspace, in order (default [mbuild, xed])
- python / script: interpreter and build driver run inside the xed tree
- jobs / opt: mfile.py --jobs and --opt values
- cpp: C preprocessor used for bindings; null parses headers without preprocessing
- vswhere: path to vswhere.exe (msvc targets only; default is the installer location)
- msvc_major: Visual Studio major version to look for (15 excludes newer previews)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from xed_tooling.errors import ConfigError

CONFIG_FILENAME = "xed-tooling.yaml"

DEFAULT_BUILD_CONFIG: dict[str, Any] = {
    "workspace_name": "xed-build",
    "trees": ["mbuild", "xed"],
    "python": "python",
    "script": "mfile.py",
    "jobs": 8,
    "opt": 3,
    "cpp": "cpp",
    "vswhere": None,
    "msvc_major": 15,
}

_TYPES: dict[str, tuple[type, ...]] = {
    "workspace_name": (str,),
    "trees": (list,),
    "python": (str,),
    "script": (str,),
    "jobs": (int,),
    "opt": (int,),
    "cpp": (str, type(None)),
    "vswhere": (str, type(None)),
    "msvc_major": (int,),
}


def resolve_build_config(overrides: dict[str, Any] | None) -> dict[str, Any]:
    """Return config with defaults filled. Unknown keys are dropped; wrong types raise ConfigError."""
    out = dict(DEFAULT_BUILD_CONFIG)
    out["trees"] = list(DEFAULT_BUILD_CONFIG["trees"])
    if not overrides:
        return out
    for key, value in overrides.items():
        if key not in out:
            continue
        expected = _TYPES[key]
        # bool is an int subclass; jobs: true is a typo, not a count.
        if not isinstance(value, expected) or (isinstance(value, bool) and int in expected):
            names = " or ".join("null" if t is type(None) else t.__name__ for t in expected)
            msg = f"Config key {key!r} must be {names}, got {value!r}"
            raise ConfigError(msg)
        out[key] = value
    if not out["trees"] or not all(isinstance(t, str) and t for t in out["trees"]):
        msg = f"Config key 'trees' must be a non-empty list of names, got {out['trees']!r}"
        raise ConfigError(msg)
    if "xed" not in out["trees"]:
        msg = "Config key 'trees' must include 'xed' (the tree mfile.py runs in)"
        raise ConfigError(msg)
    if out["jobs"] < 1:
        msg = f"Config key 'jobs' must be at least 1, got {out['jobs']}"
        raise ConfigError(msg)
    return out


def load_build_config(config_path: Path | None) -> dict[str, Any]:
    """Load YAML overrides from config_path (if it exists) and resolve against defaults."""
    if config_path is None or not config_path.is_file():
        return resolve_build_config(None)
    try:
        with config_path.open() as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        msg = f"Could not read {config_path}: {e}"
        raise ConfigError(msg) from e
    if not isinstance(data, dict):
        msg = f"{config_path}: expected a mapping at top level"
        raise ConfigError(msg)
    return resolve_build_config(data)
