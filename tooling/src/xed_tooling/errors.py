"""Fatal pipeline errors. Raised where detected; handled once in pipeline.run."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class PipelineError(Exception):
    """Base class for every fatal condition. describe() is what the user sees."""

    def describe(self) -> str:
        return str(self)


class ConfigError(PipelineError):
    pass


class TargetParseError(PipelineError):
    def __init__(self, text: str, reason: str) -> None:
        super().__init__(f"Could not parse target triple {text!r}: {reason}")
        self.text = text
        self.reason = reason


class StagingError(PipelineError):
    def __init__(self, path: Path, cause: OSError | str) -> None:
        super().__init__(f"Could not stage {path}: {cause}")
        self.path = path
        self.cause = cause


class ToolchainDiscoveryError(PipelineError):
    pass


def format_command(command: Sequence[str]) -> str:
    return " ".join(command)


class LaunchError(PipelineError):
    """The build tool could not be started at all (not found, not executable)."""

    def __init__(self, command: Sequence[str], cause: OSError) -> None:
        super().__init__(f"Failed to run `{format_command(command)}`")
        self.command = list(command)
        self.cause = cause

    def describe(self) -> str:
        return f"{format_command(self.command)}\n\tIO Error on exec:\n{self.cause!r}"


class BuildToolError(PipelineError):
    """The build tool ran and exited non-zero."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int | None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        super().__init__(f"`{format_command(command)}` exited with {returncode}")
        self.command = list(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

    def describe(self) -> str:
        lines = [format_command(self.command)]
        # Killed by a signal: there is no exit code to show.
        if self.returncode is not None and self.returncode >= 0:
            lines.append(f"\tExit Code: {self.returncode}")
        lines.append(f"\tStdErr:\n {self.stderr}")
        lines.append(f"\tStdOut:\n {self.stdout}")
        return "\n".join(lines)


class BindingError(PipelineError):
    """Header parse or bindings write failed. stage is "parse" or "write"."""

    def __init__(self, header: str, output: str, stage: str, cause: Exception) -> None:
        if stage == "parse":
            msg = f"Could not generate bindings for {header}. Error {cause!r}"
        else:
            msg = f"Could not write generated bindings to {output}. Error {cause!r}"
        super().__init__(msg)
        self.header = header
        self.output = output
        self.stage = stage
        self.cause = cause
