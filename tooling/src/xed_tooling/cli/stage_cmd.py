"""`xed-tooling stage`: copy mbuild/ and xed/ into OUT_DIR/xed-build without building."""

from __future__ import annotations

import argparse
import sys

from xed_tooling.cli.parse_common import (
    add_common_args,
    add_out_dir_arg,
    configure_logging,
    load_config_or_exit,
    resolve_crate_root,
    resolve_out_dir,
)
from xed_tooling.errors import PipelineError
from xed_tooling.stage import stage_workspace


def run_stage_argv(argv: list[str]) -> int:
    ap = argparse.ArgumentParser(description="Stage vendored trees into the build workspace")
    add_out_dir_arg(ap)
    add_common_args(ap)
    args = ap.parse_args(argv)
    configure_logging(args.verbose)

    out_dir = resolve_out_dir(args)
    if out_dir is None:
        print("❌ OUT_DIR not set (pass --out-dir)", file=sys.stderr)
        return 1
    crate_root = resolve_crate_root(args)
    config = load_config_or_exit(args, crate_root)
    try:
        ws = stage_workspace(
            out_dir,
            crate_root,
            workspace_name=config["workspace_name"],
            tree_names=config["trees"],
        )
    except PipelineError as e:
        print(f"❌ {e.describe()}", file=sys.stderr)
        return 1
    copied = ", ".join(ws.copied) if ws.copied else "nothing (already staged)"
    print(f"✅ Staged {ws.root}: copied {copied}")
    return 0
