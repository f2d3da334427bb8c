"""Cargo build-script directives for linking the static XED library."""

from __future__ import annotations

from pathlib import Path

# Only changes to the build script re-run it; edits inside the vendored
# trees are deliberately not watched.
RERUN_IF_CHANGED = "build.rs"
LIB_NAME = "xed"


def lib_dir(crate_root: Path) -> Path:
    """Where mfile.py leaves libxed.a, relative to the crate's own xed checkout."""
    return crate_root / "xed" / "build" / "obj"


def linkage_directives(crate_root: Path) -> list[str]:
    return [
        f"cargo:rerun-if-changed={RERUN_IF_CHANGED}",
        f"cargo:rustc-link-search=native={lib_dir(crate_root)}",
        f"cargo:rustc-link-lib=static={LIB_NAME}",
    ]


def emit_directives(crate_root: Path) -> list[str]:
    lines = linkage_directives(crate_root)
    for line in lines:
        print(line)
    return lines
