"""Run XED's own build driver (mfile.py) inside the staged xed tree.

The driver is a black box: it either exits 0 and the static library is in
xed/build/obj, or it fails and nothing it produced is used. Output is only
looked at to report a failure.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from xed_tooling.errors import BuildToolError, LaunchError
from xed_tooling.target import Triple

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildPolicy:
    """Fixed mfile.py options: silent, static-stripped, -O3, warnings not fatal."""

    jobs: int = 8
    opt: int = 3
    python: str = "python"
    script: str = "mfile.py"


@dataclass(frozen=True)
class CommandResult:
    command: list[str]
    returncode: int
    stdout: str
    stderr: str


def mfile_args(
    triple: Triple,
    prefix: Sequence[str] = (),
    policy: BuildPolicy = BuildPolicy(),
) -> list[str]:
    """mfile.py arguments for triple. Pure: same inputs, same list."""
    return [
        *prefix,
        f"--jobs={policy.jobs}",
        "--silent",
        "--static-stripped",
        f"--opt={policy.opt}",
        "--no-werror",
        f"--host-cpu={triple.architecture}",
    ]


def build_command(
    triple: Triple,
    prefix: Sequence[str] = (),
    policy: BuildPolicy = BuildPolicy(),
) -> list[str]:
    return [policy.python, policy.script, *mfile_args(triple, prefix, policy)]


def check_result(
    command: Sequence[str], completed: subprocess.CompletedProcess
) -> CommandResult:
    """Raise BuildToolError unless completed exited 0."""
    result = CommandResult(
        command=list(command),
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
    if result.returncode != 0:
        raise BuildToolError(result.command, result.returncode, result.stdout, result.stderr)
    return result


def run_mfile(command: Sequence[str], cwd: Path) -> CommandResult:
    """Run command in cwd and wait for it. LaunchError if it cannot start, BuildToolError if it fails."""
    log.debug("Running %s in %s", " ".join(command), cwd)
    try:
        completed = subprocess.run(
            list(command),
            cwd=str(cwd),
            capture_output=True,
            text=True,
            errors="replace",
            check=False,
        )
    except OSError as e:
        raise LaunchError(command, e) from e
    return check_result(command, completed)
