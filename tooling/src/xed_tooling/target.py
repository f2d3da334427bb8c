"""Target triple parsing (arch-vendor-os-env, as passed in Cargo's TARGET).

The vendor may be omitted (x86_64-linux-android) and so may the environment
(aarch64-apple-darwin). Anything not recognised is an error: the build
arguments depend on these fields, so there is no sensible default.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from xed_tooling.errors import TargetParseError

ARCHITECTURES: frozenset[str] = frozenset(
    {
        "aarch64",
        "aarch64_be",
        "arm",
        "armeb",
        "avr",
        "bpfeb",
        "bpfel",
        "hexagon",
        "i386",
        "i586",
        "i686",
        "loongarch64",
        "m68k",
        "mips",
        "mips64",
        "mips64el",
        "mipsel",
        "msp430",
        "nvptx64",
        "powerpc",
        "powerpc64",
        "powerpc64le",
        "riscv32",
        "riscv64",
        "s390x",
        "sparc",
        "sparc64",
        "sparcv9",
        "wasm32",
        "wasm64",
        "x86_64",
        "x86_64h",
    }
)

# Sub-architecture spellings: armv7, armv7s, thumbv7em, riscv64gc, riscv32imac ...
_SUBARCH = re.compile(r"^(?:armv[4-9][a-z0-9]*|armebv7r|thumbv[6-8][a-z0-9.]*|riscv(?:32|64)[a-z]+)$")

VENDORS: frozenset[str] = frozenset(
    {"unknown", "pc", "apple", "nvidia", "fortanix", "sun", "uwp", "wrs", "esp", "kmc", "sony"}
)

OPERATING_SYSTEMS: frozenset[str] = frozenset(
    {
        "android",
        "cuda",
        "darwin",
        "dragonfly",
        "emscripten",
        "freebsd",
        "fuchsia",
        "haiku",
        "hermit",
        "illumos",
        "ios",
        "l4re",
        "linux",
        "macos",
        "netbsd",
        "none",
        "openbsd",
        "redox",
        "solaris",
        "tvos",
        "uefi",
        "unknown",
        "vxworks",
        "wasi",
        "watchos",
        "windows",
    }
)

ENVIRONMENTS: frozenset[str] = frozenset(
    {
        "android",
        "androideabi",
        "eabi",
        "eabihf",
        "gnu",
        "gnuabi64",
        "gnueabi",
        "gnueabihf",
        "gnullvm",
        "gnux32",
        "macabi",
        "msvc",
        "musl",
        "musleabi",
        "musleabihf",
        "muslabi64",
        "newlib",
        "sgx",
        "sim",
        "uclibc",
        "uclibceabi",
        "uclibceabihf",
    }
)


def is_architecture(name: str) -> bool:
    return name in ARCHITECTURES or bool(_SUBARCH.match(name))


@dataclass(frozen=True)
class Triple:
    """Resolved compilation target."""

    architecture: str
    vendor: str
    operating_system: str
    environment: str = "unknown"

    def __str__(self) -> str:
        parts = [self.architecture, self.vendor, self.operating_system]
        if self.environment != "unknown":
            parts.append(self.environment)
        return "-".join(parts)

    @property
    def is_msvc(self) -> bool:
        return self.environment == "msvc"


def parse_target(text: str) -> Triple:
    """Parse a target triple. Raises TargetParseError on anything unrecognised."""
    if not text or not text.strip():
        raise TargetParseError(text, "empty target")
    parts = text.strip().split("-")
    if any(not p for p in parts):
        raise TargetParseError(text, "empty component")
    if len(parts) > 4:
        raise TargetParseError(text, "too many components")

    arch, rest = parts[0], parts[1:]
    if not is_architecture(arch):
        raise TargetParseError(text, f"unknown architecture {arch!r}")

    vendor = "unknown"
    # "unknown" is both a vendor and an OS; with fewer than two components
    # left it can only be the OS (wasm32-unknown-unknown has both).
    if rest and rest[0] in VENDORS and (rest[0] != "unknown" or len(rest) >= 2):
        vendor = rest.pop(0)

    if not rest:
        raise TargetParseError(text, "missing operating system")
    operating_system = rest.pop(0)
    if operating_system not in OPERATING_SYSTEMS:
        raise TargetParseError(text, f"unknown operating system {operating_system!r}")

    environment = "unknown"
    if rest:
        environment = rest.pop(0)
        if environment not in ENVIRONMENTS:
            raise TargetParseError(text, f"unknown environment {environment!r}")
    if rest:
        raise TargetParseError(text, f"unexpected trailing component {rest[0]!r}")

    return Triple(
        architecture=arch,
        vendor=vendor,
        operating_system=operating_system,
        environment=environment,
    )
