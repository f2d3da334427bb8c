"""Stage the vendored trees (mbuild, xed) into a writable workspace under OUT_DIR.

Each tree is copied only when its destination does not exist yet, so a
re-run against a staged workspace copies nothing. This also means edits to
the vendored sources do not reach an already-staged workspace; clean OUT_DIR
to pick them up.
"""

from __future__ import annotations

import errno
import logging
import shutil
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from xed_tooling.errors import StagingError

log = logging.getLogger(__name__)


def create_dir(path: Path) -> None:
    """mkdir where "already exists" counts as success. Other OSErrors propagate."""
    try:
        path.mkdir()
    except FileExistsError:
        if not path.is_dir():
            raise NotADirectoryError(errno.ENOTDIR, "exists and is not a directory", str(path))


def _copy_unless_exists(src: str, dst: str) -> str:
    if Path(dst).exists():
        return dst
    return shutil.copy2(src, dst)


@dataclass(frozen=True)
class StagedTree:
    source: Path
    destination: Path

    def copy(self) -> bool:
        """Copy source into destination unless destination exists. Returns True if copied.

        Contents land in destination itself (not destination/<source name>);
        files already present in destination are kept.
        """
        if self.destination.exists():
            log.debug("Already staged: %s", self.destination)
            return False
        if not self.source.is_dir():
            raise StagingError(self.source, "vendored tree not found")
        try:
            shutil.copytree(
                self.source,
                self.destination,
                copy_function=_copy_unless_exists,
                dirs_exist_ok=True,
            )
        except (OSError, shutil.Error) as e:
            raise StagingError(self.destination, str(e)) from e
        log.debug("Staged %s -> %s", self.source, self.destination)
        return True


@dataclass
class Workspace:
    root: Path
    trees: dict[str, Path] = field(default_factory=dict)
    copied: list[str] = field(default_factory=list)

    def tree(self, name: str) -> Path:
        return self.trees[name]


def stage_workspace(
    out_dir: Path,
    source_root: Path,
    workspace_name: str = "xed-build",
    tree_names: Sequence[str] = ("mbuild", "xed"),
) -> Workspace:
    """Create out_dir/workspace_name and stage each tree from source_root into it."""
    root = out_dir / workspace_name
    try:
        create_dir(root)
    except OSError as e:
        raise StagingError(root, e) from e
    ws = Workspace(root=root)
    for name in tree_names:
        staged = StagedTree(source=source_root / name, destination=root / name)
        if staged.copy():
            ws.copied.append(name)
        ws.trees[name] = staged.destination
    return ws
