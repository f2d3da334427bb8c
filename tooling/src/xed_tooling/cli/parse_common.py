"""Shared CLI arguments: inputs that Cargo normally passes through the environment."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any

from xed_tooling.config import CONFIG_FILENAME, load_build_config
from xed_tooling.errors import ConfigError


def path_resolver(s: str) -> Path:
    """Resolve a path argument to absolute Path (e.g. --out-dir, --crate-root)."""
    return Path(s).resolve()


def add_common_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument(
        "--crate-root",
        type=path_resolver,
        default=None,
        help="Crate root holding mbuild/ and xed/ (default: $CARGO_MANIFEST_DIR or cwd)",
    )
    ap.add_argument(
        "--config",
        type=path_resolver,
        default=None,
        help=f"YAML overrides (default: <crate-root>/{CONFIG_FILENAME} if present)",
    )
    ap.add_argument("-v", "--verbose", action="count", default=0, help="-v info, -vv debug")


def add_out_dir_arg(ap: argparse.ArgumentParser) -> None:
    ap.add_argument(
        "--out-dir",
        type=path_resolver,
        default=None,
        help="Build output directory (default: $OUT_DIR)",
    )


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def resolve_crate_root(args: argparse.Namespace) -> Path:
    if args.crate_root is not None:
        return args.crate_root
    env = os.environ.get("CARGO_MANIFEST_DIR")
    return Path(env).resolve() if env else Path.cwd()


def resolve_out_dir(args: argparse.Namespace) -> Path | None:
    if args.out_dir is not None:
        return args.out_dir
    env = os.environ.get("OUT_DIR")
    return Path(env).resolve() if env else None


def load_config_or_exit(args: argparse.Namespace, crate_root: Path) -> dict[str, Any]:
    path = args.config if args.config is not None else crate_root / CONFIG_FILENAME
    if args.config is not None and not path.is_file():
        print(f"❌ {path} not found", file=sys.stderr)
        sys.exit(1)
    try:
        return load_build_config(path)
    except ConfigError as e:
        print(f"❌ {e.describe()}", file=sys.stderr)
        sys.exit(1)
