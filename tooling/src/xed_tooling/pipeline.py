"""The whole build: stage → locate toolchain → mfile.py → directives + bindings.

Components raise PipelineError subclasses where a failure is detected;
run() is the single place that turns one into a diagnostic and exit code 1.
Nothing is retried and each stage is attempted once.
"""

from __future__ import annotations

import enum
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from xed_tooling.bindgen import generate_bindings
from xed_tooling.build import BuildPolicy, CommandResult, build_command, run_mfile
from xed_tooling.config import resolve_build_config
from xed_tooling.directives import emit_directives
from xed_tooling.errors import PipelineError
from xed_tooling.stage import Workspace, stage_workspace
from xed_tooling.target import Triple, parse_target
from xed_tooling.toolchain import select_locator

log = logging.getLogger(__name__)


class Stage(enum.Enum):
    INIT = "init"
    STAGED = "staged"
    TOOLCHAIN_RESOLVED = "toolchain-resolved"
    BUILT = "built"
    BOUND_AND_LINKED = "bound-and-linked"
    FAILED = "failed"


@dataclass
class PipelineRun:
    out_dir: Path
    target: str
    crate_root: Path
    config: dict[str, Any] = field(default_factory=lambda: resolve_build_config(None))
    stage: Stage = Stage.INIT
    triple: Triple | None = None
    workspace: Workspace | None = None
    command: list[str] = field(default_factory=list)
    result: CommandResult | None = None
    directives: list[str] = field(default_factory=list)
    bindings: list[Path] = field(default_factory=list)

    def advance(self, stage: Stage) -> None:
        log.debug("%s -> %s", self.stage.value, stage.value)
        self.stage = stage


def policy_from_config(config: dict[str, Any]) -> BuildPolicy:
    return BuildPolicy(
        jobs=config["jobs"],
        opt=config["opt"],
        python=config["python"],
        script=config["script"],
    )


def execute(run: PipelineRun) -> PipelineRun:
    """Run every stage in order. Raises PipelineError on the first failure."""
    cfg = run.config
    run.triple = parse_target(run.target)

    run.workspace = stage_workspace(
        run.out_dir,
        run.crate_root,
        workspace_name=cfg["workspace_name"],
        tree_names=cfg["trees"],
    )
    run.advance(Stage.STAGED)

    vswhere = Path(cfg["vswhere"]) if cfg["vswhere"] else None
    locator = select_locator(run.triple, vswhere=vswhere, required_major=cfg["msvc_major"])
    prefix = locator.prefix_args()
    run.advance(Stage.TOOLCHAIN_RESOLVED)

    run.command = build_command(run.triple, prefix, policy_from_config(cfg))
    run.result = run_mfile(run.command, run.workspace.tree("xed"))
    run.advance(Stage.BUILT)

    run.directives = emit_directives(run.crate_root)
    run.bindings = generate_bindings(run.workspace.root, cpp_path=cfg["cpp"])
    run.advance(Stage.BOUND_AND_LINKED)
    return run


def run(
    out_dir: Path,
    target: str,
    crate_root: Path,
    config: dict[str, Any] | None = None,
) -> int:
    """Run the pipeline. Returns 0 on success, 1 on any failure (diagnostic printed to stderr)."""
    state = PipelineRun(
        out_dir=out_dir,
        target=target,
        crate_root=crate_root,
        config=config if config is not None else resolve_build_config(None),
    )
    try:
        execute(state)
    except PipelineError as e:
        log.debug("Failed during %s", state.stage.value, exc_info=True)
        state.advance(Stage.FAILED)
        print(f"❌ {e.describe()}", file=sys.stderr)
        return 1
    return 0
