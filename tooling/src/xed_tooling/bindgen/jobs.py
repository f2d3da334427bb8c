"""The fixed set of headers turned into Rust bindings, and the preprocessor setup for them.

Paths are relative to the staged workspace root (OUT_DIR/xed-build).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BuildJob:
    header: str
    output: str


BINDGEN_JOBS: tuple[BuildJob, ...] = (
    BuildJob("xed/include/public/xed/xed-interface.h", "../xed_interface.rs"),
    BuildJob("xed/include/public/xed/xed-version.h", "../xed_version.rs"),
)

# Generated headers (xed-build-defines.h and friends) land in xed/obj.
INCLUDE_DIRS: tuple[str, ...] = ("xed/obj", "xed/include/public/xed")

DEFINES: tuple[str, ...] = ("XED_ENCODER",)
