"""`xed-tooling bindgen`: regenerate Rust bindings in an already built workspace."""

from __future__ import annotations

import argparse
import sys

from xed_tooling.bindgen import generate_bindings
from xed_tooling.cli.parse_common import (
    add_common_args,
    add_out_dir_arg,
    configure_logging,
    load_config_or_exit,
    resolve_crate_root,
    resolve_out_dir,
)
from xed_tooling.errors import PipelineError


def run_bindgen_argv(argv: list[str]) -> int:
    ap = argparse.ArgumentParser(description="Generate Rust bindings from XED's public headers")
    add_out_dir_arg(ap)
    add_common_args(ap)
    args = ap.parse_args(argv)
    configure_logging(args.verbose)

    out_dir = resolve_out_dir(args)
    if out_dir is None:
        print("❌ OUT_DIR not set (pass --out-dir)", file=sys.stderr)
        return 1
    config = load_config_or_exit(args, resolve_crate_root(args))
    root = out_dir / config["workspace_name"]
    if not root.is_dir():
        print(f"❌ {root} not found (run `xed-tooling build` first)", file=sys.stderr)
        return 1
    try:
        written = generate_bindings(root, cpp_path=config["cpp"])
    except PipelineError as e:
        print(f"❌ {e.describe()}", file=sys.stderr)
        return 1
    for p in written:
        print(f"📦 {p}")
    print(f"✅ Wrote {len(written)} binding file(s)")
    return 0
