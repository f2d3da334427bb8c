"""Header parsing with pycparser, optionally through the C preprocessor."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from pathlib import Path

from pycparser import c_ast, c_parser, parse_file

from xed_tooling.bindgen.rust import KNOWN_TYPEDEFS, int_literal

log = logging.getLogger(__name__)

# pycparser only understands C99; blank out the GNU/MSVC extensions that
# system headers pull in.
EXTENSION_DEFINES: tuple[str, ...] = (
    "__attribute__(x)=",
    "__extension__=",
    "__restrict=",
    "__restrict__=",
    "__inline=",
    "__inline__=",
    "__asm__(x)=",
    "__asm(x)=",
    "__volatile__=",
    "__const=const",
    "__signed__=signed",
    "__builtin_va_list=char*",
    "__int128=long long",
    "_Noreturn=",
    "_Nullable=",
    "_Nonnull=",
    "__declspec(x)=",
    "__cdecl=",
    "__stdcall=",
    "__forceinline=",
    "_Static_assert(x,y)=",
)

# Without a preprocessor the well-known typedef names must still be known
# to the parser; the emitter maps them by name.
_RAW_PRELUDE = "".join(f"typedef int {name};\n" for name in KNOWN_TYPEDEFS)

_DEFINE = re.compile(r"^\s*#\s*define\s+([A-Za-z_]\w*)\s+(.+?)\s*$")
_INT_VALUE = re.compile(r"^\(?\s*(-?)\s*(0[xX][0-9a-fA-F]+|0[bB][01]+|0[0-7]*|[1-9]\d*)[uUlL]*\s*\)?$")
_COMMENT = re.compile(r"/\*.*?\*/|//.*$")


def cpp_args(
    include_dirs: Sequence[Path],
    defines: Sequence[str],
) -> list[str]:
    args = [f"-I{d}" for d in include_dirs]
    args += [f"-D{d}" for d in defines]
    args += [f"-D{d}" for d in EXTENSION_DEFINES]
    return args


def parse_header(
    header: Path,
    include_dirs: Sequence[Path] = (),
    defines: Sequence[str] = (),
    cpp_path: str | None = "cpp",
) -> c_ast.FileAST:
    """Parse header into a pycparser AST. cpp_path=None parses the file as-is (no directives allowed)."""
    if cpp_path is None:
        text = header.read_text(encoding="utf-8", errors="replace")
        return c_parser.CParser().parse(_RAW_PRELUDE + text, filename=str(header))
    args = cpp_args(include_dirs, defines)
    log.debug("Preprocessing %s with %s %s", header, cpp_path, " ".join(args))
    return parse_file(str(header), use_cpp=True, cpp_path=cpp_path, cpp_args=args)


def scan_int_macros(text: str) -> list[tuple[str, int]]:
    """Object-like #defines whose value is a single integer literal, in file order."""
    out: list[tuple[str, int]] = []
    for line in text.splitlines():
        m = _DEFINE.match(line)
        if not m:
            continue
        value = _COMMENT.sub("", m.group(2)).strip()
        vm = _INT_VALUE.match(value)
        if vm:
            value_int = int_literal(vm.group(2))
            out.append((m.group(1), -value_int if vm.group(1) else value_int))
    return out
