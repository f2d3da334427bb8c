"""Tests for xed_tooling.target (triple parsing)."""

import pytest


class TestParseTarget:
    @pytest.mark.parametrize(
        ("text", "arch", "vendor", "os_", "env"),
        [
            ("x86_64-unknown-linux-gnu", "x86_64", "unknown", "linux", "gnu"),
            ("x86_64-pc-windows-msvc", "x86_64", "pc", "windows", "msvc"),
            ("i686-pc-windows-gnu", "i686", "pc", "windows", "gnu"),
            ("aarch64-apple-darwin", "aarch64", "apple", "darwin", "unknown"),
            ("x86_64-linux-android", "x86_64", "unknown", "linux", "android"),
            ("thumbv7em-none-eabihf", "thumbv7em", "unknown", "none", "eabihf"),
            ("armv7-unknown-linux-musleabihf", "armv7", "unknown", "linux", "musleabihf"),
            ("riscv64gc-unknown-linux-gnu", "riscv64gc", "unknown", "linux", "gnu"),
            ("wasm32-unknown-unknown", "wasm32", "unknown", "unknown", "unknown"),
            ("wasm32-wasi", "wasm32", "unknown", "wasi", "unknown"),
        ],
    )
    def test_parses_known_triples(
        self, text: str, arch: str, vendor: str, os_: str, env: str
    ) -> None:
        from xed_tooling.target import parse_target

        t = parse_target(text)
        assert t.architecture == arch
        assert t.vendor == vendor
        assert t.operating_system == os_
        assert t.environment == env

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "   ",
            "x86_64",
            "z80-unknown-linux-gnu",
            "x86_64-unknown-plan9-gnu",
            "x86_64-unknown-linux-gnux",
            "x86_64-unknown-linux-gnu-extra",
            "x86_64--linux-gnu",
            "x86_64-unknown-linux-",
        ],
    )
    def test_rejects_malformed(self, text: str) -> None:
        from xed_tooling.errors import TargetParseError
        from xed_tooling.target import parse_target

        with pytest.raises(TargetParseError):
            parse_target(text)

    def test_is_deterministic(self) -> None:
        from xed_tooling.target import parse_target

        assert parse_target("x86_64-pc-windows-msvc") == parse_target("x86_64-pc-windows-msvc")

    def test_msvc_flag(self) -> None:
        from xed_tooling.target import parse_target

        assert parse_target("x86_64-pc-windows-msvc").is_msvc
        assert not parse_target("x86_64-pc-windows-gnu").is_msvc

    def test_str_is_canonical(self) -> None:
        from xed_tooling.target import parse_target

        assert str(parse_target("x86_64-unknown-linux-gnu")) == "x86_64-unknown-linux-gnu"
        assert str(parse_target("aarch64-apple-darwin")) == "aarch64-apple-darwin"
        assert str(parse_target("x86_64-linux-android")) == "x86_64-unknown-linux-android"

    def test_error_names_the_bad_component(self) -> None:
        from xed_tooling.errors import TargetParseError
        from xed_tooling.target import parse_target

        with pytest.raises(TargetParseError, match="plan9"):
            parse_target("x86_64-unknown-plan9")
