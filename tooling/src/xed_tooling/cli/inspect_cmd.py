"""`xed-tooling target` and `xed-tooling directives`: print what a build would use."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from xed_tooling.build import build_command
from xed_tooling.cli.parse_common import path_resolver
from xed_tooling.directives import linkage_directives
from xed_tooling.errors import TargetParseError
from xed_tooling.target import parse_target


def run_target_argv(argv: list[str]) -> int:
    ap = argparse.ArgumentParser(description="Parse a target triple and show the mfile.py command")
    ap.add_argument("triple", help="e.g. x86_64-unknown-linux-gnu")
    args = ap.parse_args(argv)
    try:
        t = parse_target(args.triple)
    except TargetParseError as e:
        print(f"❌ {e.describe()}", file=sys.stderr)
        return 1
    print(f"architecture:     {t.architecture}")
    print(f"vendor:           {t.vendor}")
    print(f"operating_system: {t.operating_system}")
    print(f"environment:      {t.environment}")
    if t.is_msvc:
        print("toolchain:        vswhere (--vc-dir resolved at build time)")
    print(f"command:          {' '.join(build_command(t))}")
    return 0


def run_directives_argv(argv: list[str]) -> int:
    ap = argparse.ArgumentParser(description="Print the Cargo linkage directives")
    ap.add_argument("--crate-root", type=path_resolver, default=None, help="Crate root (default: cwd)")
    args = ap.parse_args(argv)

    crate_root = args.crate_root or Path.cwd()
    for line in linkage_directives(crate_root):
        print(line)
    return 0
