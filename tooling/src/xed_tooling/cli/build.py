"""`xed-tooling build`: stage, run mfile.py, print Cargo directives, generate bindings."""

import sys

from xed_tooling import pipeline
from xed_tooling.cli.parse_common import (
    add_common_args,
    add_out_dir_arg,
    configure_logging,
    load_config_or_exit,
    resolve_crate_root,
    resolve_out_dir,
)


def run_build_argv(argv: list[str] | None = None) -> None:
    """Parse argv and run the full pipeline; exits with its return code."""
    import argparse
    import os

    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []  # skip 'xed-tooling build'
    ap = argparse.ArgumentParser(description="Build XED with mfile.py and generate Rust bindings")
    add_out_dir_arg(ap)
    ap.add_argument("--target", default=None, help="Target triple (default: $TARGET)")
    add_common_args(ap)
    args = ap.parse_args(argv)
    configure_logging(args.verbose)

    out_dir = resolve_out_dir(args)
    if out_dir is None:
        print("❌ OUT_DIR not set (pass --out-dir)", file=sys.stderr)
        sys.exit(1)
    target = args.target or os.environ.get("TARGET")
    if not target:
        print("❌ TARGET not set (pass --target)", file=sys.stderr)
        sys.exit(1)
    crate_root = resolve_crate_root(args)
    config = load_config_or_exit(args, crate_root)
    rc = pipeline.run(out_dir, target, crate_root, config)
    sys.exit(rc)
