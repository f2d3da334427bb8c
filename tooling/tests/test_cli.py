"""Tests for xed_tooling.cli (argument handling and dispatch)."""

from pathlib import Path
from unittest.mock import patch

import pytest


def _main(argv: list[str]) -> int:
    from xed_tooling.cli.main import main

    with patch("sys.argv", ["xed-tooling", *argv]):
        with pytest.raises(SystemExit) as exc:
            main()
    return exc.value.code


class TestMain:
    def test_no_command_prints_usage(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _main([]) == 1
        assert "Usage: xed-tooling" in capsys.readouterr().err

    def test_unknown_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _main(["frobnicate"]) == 1
        assert "Unknown command: frobnicate" in capsys.readouterr().err

    def test_target_prints_fields_and_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _main(["target", "x86_64-pc-windows-msvc"]) == 0
        out = capsys.readouterr().out
        assert "environment:      msvc" in out
        assert "vswhere" in out
        assert "python mfile.py --jobs=8" in out

    def test_target_rejects_bad_triple(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _main(["target", "x86_64-unknown-plan9"]) == 1
        assert "plan9" in capsys.readouterr().err

    def test_directives(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert _main(["directives", "--crate-root", str(tmp_path)]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "cargo:rerun-if-changed=build.rs"
        assert len(lines) == 3


class TestBuildCommand:
    def test_requires_out_dir(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.delenv("OUT_DIR", raising=False)
        monkeypatch.setenv("TARGET", "x86_64-unknown-linux-gnu")
        assert _main(["build"]) == 1
        assert "OUT_DIR not set" in capsys.readouterr().err

    def test_requires_target(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("OUT_DIR", str(tmp_path))
        monkeypatch.delenv("TARGET", raising=False)
        assert _main(["build"]) == 1
        assert "TARGET not set" in capsys.readouterr().err

    def test_reads_cargo_environment(
        self, crate_root: Path, out_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("OUT_DIR", str(out_dir))
        monkeypatch.setenv("TARGET", "aarch64-apple-darwin")
        monkeypatch.setenv("CARGO_MANIFEST_DIR", str(crate_root))
        (crate_root / "xed-tooling.yaml").write_text("jobs: 2\ncpp: null\n")
        with patch("xed_tooling.cli.build.pipeline.run", return_value=0) as run:
            assert _main(["build"]) == 0
        (out, target, root, config), _ = run.call_args
        assert out == out_dir.resolve()
        assert target == "aarch64-apple-darwin"
        assert root == crate_root.resolve()
        assert config["jobs"] == 2
        assert config["cpp"] is None

    def test_flags_override_environment(
        self, crate_root: Path, out_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("OUT_DIR", "/nonexistent")
        monkeypatch.setenv("TARGET", "aarch64-apple-darwin")
        with patch("xed_tooling.cli.build.pipeline.run", return_value=1) as run:
            code = _main(
                [
                    "build",
                    "--out-dir",
                    str(out_dir),
                    "--target",
                    "x86_64-unknown-linux-gnu",
                    "--crate-root",
                    str(crate_root),
                ]
            )
        assert code == 1
        (out, target, root, _config), _ = run.call_args
        assert out == out_dir.resolve()
        assert target == "x86_64-unknown-linux-gnu"
        assert root == crate_root.resolve()

    def test_bad_config_exits_1(
        self,
        crate_root: Path,
        out_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        (crate_root / "xed-tooling.yaml").write_text("jobs: many\n")
        code = _main(
            [
                "build",
                "--out-dir",
                str(out_dir),
                "--target",
                "x86_64-unknown-linux-gnu",
                "--crate-root",
                str(crate_root),
            ]
        )
        assert code == 1
        assert "jobs" in capsys.readouterr().err


class TestStageAndBindgenCommands:
    def test_stage_then_restage(
        self, crate_root: Path, out_dir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        args = ["stage", "--out-dir", str(out_dir), "--crate-root", str(crate_root)]
        assert _main(args) == 0
        assert "copied mbuild, xed" in capsys.readouterr().out
        assert _main(args) == 0
        assert "already staged" in capsys.readouterr().out

    def test_bindgen_needs_workspace(
        self, crate_root: Path, out_dir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert _main(["bindgen", "--out-dir", str(out_dir), "--crate-root", str(crate_root)]) == 1
        assert "not found" in capsys.readouterr().err

    def test_bindgen_writes_files(
        self, crate_root: Path, out_dir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        (crate_root / "xed-tooling.yaml").write_text("cpp: null\n")
        common = ["--out-dir", str(out_dir), "--crate-root", str(crate_root)]
        assert _main(["stage", *common]) == 0
        assert _main(["bindgen", *common]) == 0
        assert "Wrote 2 binding file(s)" in capsys.readouterr().out
        assert (out_dir / "xed_interface.rs").is_file()
