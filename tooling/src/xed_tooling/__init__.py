"""Build-time tooling for the vendored XED library: stage, build with mfile.py, generate FFI bindings."""

__version__ = "0.1.0"
