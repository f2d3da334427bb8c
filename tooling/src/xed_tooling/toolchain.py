"""Compiler-suite discovery for the mfile.py invocation.

Only msvc targets need it: mbuild cannot find Visual Studio on its own, so
vswhere is queried and --vc-dir=<install>/VC is prepended to the build
arguments. Every other environment uses NullLocator, which changes nothing.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from xed_tooling.errors import ToolchainDiscoveryError
from xed_tooling.target import Triple

log = logging.getLogger(__name__)

# Newer majors were only available as previews when this was pinned.
REQUIRED_MSVC_MAJOR = 15

MSVC_NOT_FOUND_WARNING = (
    "Unable to find a non-preview version of MSVC, this may cause compilation failures."
)


def default_vswhere_path() -> Path:
    program_files = os.environ.get("ProgramFiles(x86)") or r"C:\Program Files (x86)"
    return Path(program_files) / "Microsoft Visual Studio" / "Installer" / "vswhere.exe"


class ToolchainLocator(Protocol):
    def prefix_args(self) -> list[str]:
        """Arguments to put in front of the mfile.py build arguments."""
        ...


class NullLocator:
    def prefix_args(self) -> list[str]:
        return []


@dataclass(frozen=True)
class VsInstance:
    installation_path: Path
    installation_version: str

    @property
    def major(self) -> int | None:
        head = self.installation_version.split(".", 1)[0]
        return int(head) if head.isdigit() else None


def parse_vswhere_output(text: str) -> list[VsInstance]:
    """Parse `vswhere -format json` output into instances. Raises ValueError on malformed JSON."""
    data: Any = json.loads(text or "[]")
    if not isinstance(data, list):
        msg = "vswhere output is not a JSON list"
        raise ValueError(msg)
    out: list[VsInstance] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        path = item.get("installationPath")
        version = item.get("installationVersion")
        if path and version:
            out.append(VsInstance(Path(path), str(version)))
    return out


class VsWhereLocator:
    """Find a Visual Studio install of the required major version via vswhere."""

    def __init__(
        self,
        vswhere: Path | None = None,
        required_major: int = REQUIRED_MSVC_MAJOR,
    ) -> None:
        self.vswhere = vswhere or default_vswhere_path()
        self.required_major = required_major

    def query(self) -> list[VsInstance]:
        cmd = [str(self.vswhere), "-format", "json", "-utf8"]
        try:
            r = subprocess.run(cmd, capture_output=True, text=True, encoding="utf-8", check=False)
        except OSError as e:
            msg = f"Could not run {self.vswhere}: {e}"
            raise ToolchainDiscoveryError(msg) from e
        if r.returncode != 0:
            msg = f"{self.vswhere} exited with {r.returncode}: {(r.stderr or '').strip()}"
            raise ToolchainDiscoveryError(msg)
        try:
            return parse_vswhere_output(r.stdout)
        except ValueError as e:
            msg = f"Could not parse vswhere output: {e}"
            raise ToolchainDiscoveryError(msg) from e

    def find_vc_dir(self) -> Path | None:
        for inst in self.query():
            if inst.major == self.required_major:
                return inst.installation_path / "VC"
        return None

    def prefix_args(self) -> list[str]:
        vc_dir = self.find_vc_dir()
        if vc_dir is None:
            log.warning(MSVC_NOT_FOUND_WARNING)
            print(f"cargo:warning={MSVC_NOT_FOUND_WARNING}")
            return []
        log.debug("Using MSVC at %s", vc_dir)
        return [f"--vc-dir={vc_dir}"]


def select_locator(
    triple: Triple,
    vswhere: Path | None = None,
    required_major: int = REQUIRED_MSVC_MAJOR,
) -> ToolchainLocator:
    if triple.is_msvc:
        return VsWhereLocator(vswhere=vswhere, required_major=required_major)
    return NullLocator()
