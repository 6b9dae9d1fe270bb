"""Tests for declshell.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from declshell.config import (
    DEFAULT_COPYRIGHT_NOTICE,
    ConfigError,
    ShellConfig,
    UsageError,
    load_config,
)


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, ShellConfig)
    assert config.root == tmp_path.resolve()
    assert config.library_path is None
    assert config.output_path is None
    assert config.ignored == frozenset()
    assert config.search_paths == ()
    assert config.disable_assembly_info is False
    assert config.force_virtual is False
    assert config.use_tabs is False
    assert config.indent_size == 4
    assert config.keyword_aliases is True
    assert config.emit_banner is True
    assert config.copyright_notice == DEFAULT_COPYRIGHT_NOTICE
    assert config.templates_dir is None


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".declshell.yml"
    config_file.write_text(
        """
library: "metadata/Acme.json"
output: "out/Acme.Shell.cs"
ignore:
  - "Acme.Internal"
  - "Acme.Legacy.Widget"
search_paths:
  - "metadata/refs"
assembly_info:
  enabled: false
  copyright: "(c) Acme Corp"
emit:
  force_virtual: true
  keyword_aliases: false
  banner: "no"
  templates_dir: "templates"
indent:
  tabs: true
  size: 2
""",
        encoding="utf-8",
    )

    config = load_config(config_file)
    root = tmp_path.resolve()

    assert config.library_path == root / "metadata/Acme.json"
    assert config.output_path == root / "out/Acme.Shell.cs"
    assert config.ignored == frozenset({"Acme.Internal", "Acme.Legacy.Widget"})
    assert config.search_paths == (root / "metadata/refs",)
    assert config.disable_assembly_info is True
    assert config.copyright_notice == "(c) Acme Corp"
    assert config.force_virtual is True
    assert config.keyword_aliases is False
    assert config.emit_banner is False
    assert config.templates_dir == root / "templates"
    assert config.use_tabs is True
    assert config.indent_size == 2


def test_load_config_accepts_single_string_ignore(tmp_path: Path) -> None:
    (tmp_path / ".declshell.yml").write_text("ignore: Acme.Internal\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.ignored == frozenset({"Acme.Internal"})


def test_load_config_rejects_negative_indent(tmp_path: Path) -> None:
    (tmp_path / ".declshell.yml").write_text("indent:\n  size: -1\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="negative"):
        load_config(tmp_path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".declshell.yml").write_text("ignore: [unterminated\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".declshell.yml").write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_empty_config_file_yields_defaults(tmp_path: Path) -> None:
    (tmp_path / ".declshell.yml").write_text("\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.indent_size == 4
    assert config.emit_banner is True


def test_with_overrides_merges_cli_values(tmp_path: Path) -> None:
    base = ShellConfig(root=tmp_path, ignored=frozenset({"Acme.Internal"}), search_paths=(tmp_path / "a",))

    config = base.with_overrides(
        library_path="Acme.json",
        output_path=None,
        ignored=["Acme.Legacy"],
        search_paths=["b"],
        indent_size=0,
        force_virtual=None,
    )

    assert config.library_path == Path("Acme.json")
    assert config.output_path is None
    assert config.ignored == frozenset({"Acme.Internal", "Acme.Legacy"})
    assert config.search_paths == (tmp_path / "a", Path("b"))
    assert config.indent_size == 0
    assert config.force_virtual is False
    assert base.library_path is None


def test_require_library_raises_usage_error(tmp_path: Path) -> None:
    with pytest.raises(UsageError):
        ShellConfig(root=tmp_path).require_library()

    assert ShellConfig(root=tmp_path, library_path=tmp_path / "x.json").require_library() == tmp_path / "x.json"


def test_load_config_rejects_undecodable_file(tmp_path: Path) -> None:
    (tmp_path / ".declshell.yml").write_bytes(b"ignore: \xff\xfe\x00\n")

    with pytest.raises(ConfigError, match="Failed to read"):
        load_config(tmp_path)
