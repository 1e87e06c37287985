"""Tests for TOML config file loading."""

from __future__ import annotations

import argparse
from pathlib import Path

import pytest

from exprchain.cli import build_parser, load_config, main, resolve_options
from exprchain.tokens import DEFAULT_BOUNDARY_KINDS, TokenKind


def _resolve(tmp_path: Path, *extra: str):
    doc = tmp_path / "a.php"
    doc.write_text("$a->b")
    ns = build_parser().parse_args([str(doc), *extra])
    return resolve_options(ns)


class TestLoadConfig:
    def test_missing_config_returns_empty(self, tmp_path: Path) -> None:
        assert load_config(None, tmp_path) == {}

    def test_explicit_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text('[output]\nformat = "json"\n')
        assert load_config(cfg, tmp_path)["output"] == {"format": "json"}

    def test_auto_discover_exprchain_toml(self, tmp_path: Path) -> None:
        cfg = tmp_path / "exprchain.toml"
        cfg.write_text('[scanner]\nignore_kinds = ["NEW"]\n')
        assert load_config(None, tmp_path)["scanner"] == {"ignore_kinds": ["NEW"]}

    def test_invalid_toml(self, tmp_path: Path) -> None:
        cfg = tmp_path / "exprchain.toml"
        cfg.write_text("[scanner\n")
        with pytest.raises(argparse.ArgumentTypeError):
            load_config(None, tmp_path)


class TestConfigMerge:
    def test_defaults(self, tmp_path: Path) -> None:
        opts = _resolve(tmp_path)
        assert opts.boundary_kinds == DEFAULT_BOUNDARY_KINDS
        assert opts.output_format == "text"

    def test_config_adds_and_removes_kinds(self, tmp_path: Path) -> None:
        (tmp_path / "exprchain.toml").write_text(
            '[scanner]\nboundary_kinds = ["character"]\nignore_kinds = ["NEW", "RETURN"]\n'
        )
        opts = _resolve(tmp_path)
        assert TokenKind.CHARACTER in opts.boundary_kinds
        assert TokenKind.NEW not in opts.boundary_kinds
        assert TokenKind.RETURN not in opts.boundary_kinds
        assert TokenKind.ECHO in opts.boundary_kinds

    def test_cli_kinds_apply_after_config(self, tmp_path: Path) -> None:
        (tmp_path / "exprchain.toml").write_text('[scanner]\nignore_kinds = ["NEW"]\n')
        opts = _resolve(tmp_path, "--boundary-kind", "NEW", "--ignore-kind", "ECHO")
        assert TokenKind.NEW in opts.boundary_kinds
        assert TokenKind.ECHO not in opts.boundary_kinds

    def test_config_format(self, tmp_path: Path) -> None:
        (tmp_path / "exprchain.toml").write_text('[output]\nformat = "json"\n')
        assert _resolve(tmp_path).output_format == "json"

    def test_cli_format_overrides_config(self, tmp_path: Path) -> None:
        (tmp_path / "exprchain.toml").write_text('[output]\nformat = "json"\n')
        assert _resolve(tmp_path, "--format", "text").output_format == "text"

    def test_explicit_config_flag(self, tmp_path: Path) -> None:
        cfg = tmp_path / "alt.toml"
        cfg.write_text('[output]\nformat = "json"\n')
        assert _resolve(tmp_path, "--config", str(cfg)).output_format == "json"

    def test_unknown_kind_in_config(self, tmp_path: Path) -> None:
        (tmp_path / "exprchain.toml").write_text('[scanner]\nboundary_kinds = ["BOGUS"]\n')
        with pytest.raises(argparse.ArgumentTypeError):
            _resolve(tmp_path)

    def test_invalid_format_in_config(self, tmp_path: Path) -> None:
        (tmp_path / "exprchain.toml").write_text('[output]\nformat = "xml"\n')
        with pytest.raises(argparse.ArgumentTypeError):
            _resolve(tmp_path)


class TestConfigEndToEnd:
    def test_config_changes_the_chain(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (tmp_path / "exprchain.toml").write_text('[scanner]\nignore_kinds = ["RETURN"]\n')
        src = tmp_path / "a.php"
        src.write_text("return $a->b")
        assert main([str(src)]) == 0
        assert capsys.readouterr().out == "return $a\nb\n"

    def test_bad_config_returns_2(self, tmp_path: Path) -> None:
        (tmp_path / "exprchain.toml").write_text("not toml = = =\n")
        src = tmp_path / "a.php"
        src.write_text("$a->b")
        assert main([str(src)]) == 2
