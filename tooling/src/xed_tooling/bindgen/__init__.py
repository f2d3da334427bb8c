"""Rust FFI bindings generated from XED's public headers.

All jobs are parsed and rendered before anything is written; outputs are
written to temporary siblings and renamed into place together. Any failure
leaves none of this run's outputs behind.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from xed_tooling.bindgen.jobs import BINDGEN_JOBS, DEFINES, INCLUDE_DIRS, BuildJob
from xed_tooling.bindgen.parse import parse_header, scan_int_macros
from xed_tooling.bindgen.rust import emit_rust
from xed_tooling.errors import BindingError

log = logging.getLogger(__name__)

__all__ = [
    "BINDGEN_JOBS",
    "BuildJob",
    "DEFINES",
    "INCLUDE_DIRS",
    "generate_bindings",
    "render_job",
]


def render_job(
    job: BuildJob,
    root: Path,
    cpp_path: str | None = "cpp",
    include_dirs: Sequence[str] = INCLUDE_DIRS,
    defines: Sequence[str] = DEFINES,
) -> str:
    """Parse job.header (relative to root) and return the Rust source. Raises BindingError(stage="parse")."""
    header = root / job.header
    try:
        tree = parse_header(
            header,
            include_dirs=[root / d for d in include_dirs],
            defines=defines,
            cpp_path=cpp_path,
        )
        macros = scan_int_macros(header.read_text(encoding="utf-8", errors="replace"))
        return emit_rust(tree, source=Path(job.header).name, macros=macros)
    except Exception as e:
        raise BindingError(job.header, job.output, "parse", e) from e


def _remove_quietly(paths: Sequence[Path]) -> None:
    for p in paths:
        try:
            p.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            log.warning("Could not remove %s: %s", p, e)


def generate_bindings(
    root: Path,
    jobs: Sequence[BuildJob] = BINDGEN_JOBS,
    cpp_path: str | None = "cpp",
    include_dirs: Sequence[str] = INCLUDE_DIRS,
    defines: Sequence[str] = DEFINES,
) -> list[Path]:
    """Generate one Rust file per job. Returns the written paths (resolved against root)."""
    rendered: list[tuple[BuildJob, Path, str]] = []
    for job in jobs:
        source = render_job(job, root, cpp_path=cpp_path, include_dirs=include_dirs, defines=defines)
        rendered.append((job, (root / job.output).resolve(), source))
        log.debug("Rendered bindings for %s", job.header)

    temps: list[Path] = []
    done: list[Path] = []
    current: BuildJob | None = None
    try:
        for job, out, source in rendered:
            current = job
            tmp = out.with_name(out.name + ".tmp")
            temps.append(tmp)
            tmp.write_text(source, encoding="utf-8")
        for (job, out, _source), tmp in zip(rendered, temps):
            current = job
            tmp.replace(out)
            done.append(out)
    except OSError as e:
        _remove_quietly(temps)
        _remove_quietly(done)
        header, output = (current.header, current.output) if current else ("", "")
        raise BindingError(header, output, "write", e) from e
    return done
