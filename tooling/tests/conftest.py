"""Pytest fixtures for xed_tooling tests."""

from pathlib import Path

import pytest

# Directive-free headers: parsed with cpp_path=None so no C preprocessor is needed.
INTERFACE_H = """\
typedef enum {
    XED_ERROR_NONE,
    XED_ERROR_BUFFER_TOO_SHORT = 3,
    XED_ERROR_LAST
} xed_error_enum_t;

typedef struct xed_decoded_inst_s {
    uint8_t _length;
    uint32_t flags : 3;
    uint32_t mode : 5;
    const uint8_t* _byte_array;
} xed_decoded_inst_t;

void xed_tables_init(void);
xed_error_enum_t xed_decode(xed_decoded_inst_t* xedd, const uint8_t* itext, const unsigned int bytes);
"""

VERSION_H = """\
char const* xed_get_version(void);
char const* xed_get_copyright(void);
"""


@pytest.fixture
def crate_root(tmp_path: Path) -> Path:
    """Crate checkout with vendored mbuild/ and xed/ trees. Returns the crate root."""
    root = tmp_path / "crate"
    (root / "mbuild" / "mbuild").mkdir(parents=True)
    (root / "mbuild" / "mbuild" / "__init__.py").write_text("# mbuild\n")
    public = root / "xed" / "include" / "public" / "xed"
    public.mkdir(parents=True)
    (public / "xed-interface.h").write_text(INTERFACE_H)
    (public / "xed-version.h").write_text(VERSION_H)
    (root / "xed" / "mfile.py").write_text("import sys\nsys.exit(0)\n")
    return root


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    d = tmp_path / "out"
    d.mkdir()
    return d


@pytest.fixture
def no_cpp_config() -> dict:
    from xed_tooling.config import resolve_build_config

    return resolve_build_config({"cpp": None})
