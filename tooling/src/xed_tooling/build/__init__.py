"""Native build of the staged xed tree via mfile.py."""

from .mfile import (
    BuildPolicy,
    CommandResult,
    build_command,
    check_result,
    mfile_args,
    run_mfile,
)

__all__ = [
    "BuildPolicy",
    "CommandResult",
    "build_command",
    "check_result",
    "mfile_args",
    "run_mfile",
]
