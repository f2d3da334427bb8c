"""Tests for xed_tooling.config."""

from pathlib import Path

import pytest


class TestResolveBuildConfig:
    def test_defaults(self) -> None:
        from xed_tooling.config import resolve_build_config

        cfg = resolve_build_config(None)
        assert cfg["workspace_name"] == "xed-build"
        assert cfg["trees"] == ["mbuild", "xed"]
        assert cfg["jobs"] == 8
        assert cfg["opt"] == 3
        assert cfg["cpp"] == "cpp"
        assert cfg["msvc_major"] == 15

    def test_defaults_are_not_shared(self) -> None:
        from xed_tooling.config import DEFAULT_BUILD_CONFIG, resolve_build_config

        resolve_build_config(None)["trees"].append("extra")
        assert DEFAULT_BUILD_CONFIG["trees"] == ["mbuild", "xed"]

    def test_overrides_and_ignores_unknown(self) -> None:
        from xed_tooling.config import resolve_build_config

        cfg = resolve_build_config({"jobs": 4, "cpp": None, "colour": "blue"})
        assert cfg["jobs"] == 4
        assert cfg["cpp"] is None
        assert "colour" not in cfg

    @pytest.mark.parametrize(
        "overrides",
        [
            {"jobs": "8"},
            {"jobs": True},
            {"jobs": 0},
            {"trees": []},
            {"trees": ["mbuild"]},
            {"trees": "xed"},
            {"python": None},
        ],
    )
    def test_rejects_bad_values(self, overrides: dict) -> None:
        from xed_tooling.config import resolve_build_config
        from xed_tooling.errors import ConfigError

        with pytest.raises(ConfigError):
            resolve_build_config(overrides)


class TestLoadBuildConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        from xed_tooling.config import DEFAULT_BUILD_CONFIG, load_build_config

        assert load_build_config(tmp_path / "nope.yaml") == DEFAULT_BUILD_CONFIG
        assert load_build_config(None) == DEFAULT_BUILD_CONFIG

    def test_reads_yaml(self, tmp_path: Path) -> None:
        from xed_tooling.config import load_build_config

        p = tmp_path / "xed-tooling.yaml"
        p.write_text("jobs: 16\npython: python3\nvswhere: 'C:/vswhere.exe'\n")
        cfg = load_build_config(p)
        assert cfg["jobs"] == 16
        assert cfg["python"] == "python3"
        assert cfg["vswhere"] == "C:/vswhere.exe"

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        from xed_tooling.config import DEFAULT_BUILD_CONFIG, load_build_config

        p = tmp_path / "xed-tooling.yaml"
        p.write_text("")
        assert load_build_config(p) == DEFAULT_BUILD_CONFIG

    def test_non_mapping_raises(self, tmp_path: Path) -> None:
        from xed_tooling.config import load_build_config
        from xed_tooling.errors import ConfigError

        p = tmp_path / "xed-tooling.yaml"
        p.write_text("- jobs\n- 8\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_build_config(p)

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        from xed_tooling.config import load_build_config
        from xed_tooling.errors import ConfigError

        p = tmp_path / "xed-tooling.yaml"
        p.write_text("jobs: [1, 2\n")
        with pytest.raises(ConfigError):
            load_build_config(p)
