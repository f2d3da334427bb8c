"""Main CLI entry point for xed_tooling."""

import sys

from xed_tooling.cli import bindgen_cmd, inspect_cmd, stage_cmd
from xed_tooling.cli import (
    build as build_cli,
)


def _usage() -> None:
    print("Usage: xed-tooling <command> [args...]", file=sys.stderr)
    print("Commands:", file=sys.stderr)
    print(
        "  build [--out-dir DIR] [--target TRIPLE]  - Stage, run mfile.py, print Cargo directives, generate bindings",
        file=sys.stderr,
    )
    print("  stage [--out-dir DIR]   - Copy mbuild/ and xed/ into OUT_DIR/xed-build", file=sys.stderr)
    print("  bindgen [--out-dir DIR] - Regenerate Rust bindings in a built workspace", file=sys.stderr)
    print("  target <triple>         - Show parsed target and the mfile.py command", file=sys.stderr)
    print("  directives              - Print the Cargo linkage directives", file=sys.stderr)


def main() -> None:
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        _usage()
        sys.exit(1)

    command = sys.argv[1]
    rest = sys.argv[2:]

    if command == "build":
        build_cli.run_build_argv(rest)
    elif command == "stage":
        sys.exit(stage_cmd.run_stage_argv(rest))
    elif command == "bindgen":
        sys.exit(bindgen_cmd.run_bindgen_argv(rest))
    elif command == "target":
        sys.exit(inspect_cmd.run_target_argv(rest))
    elif command == "directives":
        sys.exit(inspect_cmd.run_directives_argv(rest))
    elif command in ("-h", "--help"):
        _usage()
        sys.exit(0)
    else:
        print(f"Error: Unknown command: {command}", file=sys.stderr)
        _usage()
        sys.exit(1)


if __name__ == "__main__":
    main()
