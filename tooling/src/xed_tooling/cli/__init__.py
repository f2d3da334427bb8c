"""CLI for xed_tooling. Entry point: xed-tooling (main.py)."""
