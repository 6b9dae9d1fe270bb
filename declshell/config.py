"""Configuration loading for declshell (.declshell.yml)."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple

import yaml

CONFIG_FILE_NAME = ".declshell.yml"

DEFAULT_COPYRIGHT_NOTICE = "Declaration shell generated by declshell"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


class UsageError(ValueError):
    """Raised when a run is requested without a library to shell."""


@dataclass(frozen=True)
class ShellConfig:
    """Settings for one synthesis run.

    Values come from ``.declshell.yml`` and are overridden by command-line
    options through :meth:`with_overrides`.
    """

    root: Path
    library_path: Optional[Path] = None
    output_path: Optional[Path] = None
    ignored: FrozenSet[str] = frozenset()
    search_paths: Tuple[Path, ...] = ()
    disable_assembly_info: bool = False
    force_virtual: bool = False
    use_tabs: bool = False
    indent_size: int = 4
    keyword_aliases: bool = True
    copyright_notice: str = DEFAULT_COPYRIGHT_NOTICE
    emit_banner: bool = True
    templates_dir: Optional[Path] = None

    def with_overrides(self, **overrides: Any) -> "ShellConfig":
        """Return a copy where every non-None override replaces the file value."""
        values = {key: value for key, value in overrides.items() if value is not None}
        if "ignored" in values:
            values["ignored"] = self.ignored | frozenset(values["ignored"])
        if "search_paths" in values:
            values["search_paths"] = self.search_paths + tuple(Path(p) for p in values["search_paths"])
        for key in ("library_path", "output_path", "templates_dir"):
            if key in values:
                values[key] = Path(values[key])
        return replace(self, **values)

    def require_library(self) -> Path:
        if self.library_path is None:
            raise UsageError("No library metadata path was given.")
        return self.library_path


def load_config(config_path: Path) -> ShellConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ShellConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILE_NAME} must contain a mapping at the root")

    library = _as_str(data.get("library"))
    output = _as_str(data.get("output"))

    assembly_data = _as_dict(data.get("assembly_info"))
    assembly_enabled = _as_bool(assembly_data.get("enabled"))
    copyright_notice = _as_str(assembly_data.get("copyright")) or DEFAULT_COPYRIGHT_NOTICE

    emit_data = _as_dict(data.get("emit"))
    templates_dir_str = _as_str(emit_data.get("templates_dir"))

    indent_data = _as_dict(data.get("indent"))
    indent_size = _as_int(indent_data.get("size"))
    if indent_size is not None and indent_size < 0:
        raise ConfigError("indent.size must not be negative")

    return ShellConfig(
        root=root,
        library_path=root / library if library else None,
        output_path=root / output if output else None,
        ignored=frozenset(_as_str_list(data.get("ignore"))),
        search_paths=tuple(root / entry for entry in _as_str_list(data.get("search_paths"))),
        disable_assembly_info=assembly_enabled is False,
        force_virtual=_as_bool(emit_data.get("force_virtual")) or False,
        use_tabs=_as_bool(indent_data.get("tabs")) or False,
        indent_size=4 if indent_size is None else indent_size,
        keyword_aliases=_as_bool(emit_data.get("keyword_aliases")) is not False,
        copyright_notice=copyright_notice,
        emit_banner=_as_bool(emit_data.get("banner")) is not False,
        templates_dir=root / templates_dir_str if templates_dir_str else None,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILE_NAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "DEFAULT_COPYRIGHT_NOTICE",
    "ShellConfig",
    "UsageError",
    "load_config",
]
