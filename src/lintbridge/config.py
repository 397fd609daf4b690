from __future__ import annotations

import logging
import platform as platform_module
import shutil
from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import Callable, Optional, TypeAlias
import tomllib

from pydantic import ValidationError

from lintbridge.exceptions import ConfigError
from lintbridge.schema import AnalyzerSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "lintbridge.toml"
SETTINGS_SECTION = "lintbridge"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]

_CONSOLE_NAME = "TSQLLint.Console"


@dataclass(frozen=True)
class AnalyzerConfig:
    binary: str
    platform: Optional[str] = None
    tool_name: str = "tsqllint"
    display_name: str = "TSQLLint"
    timeout_seconds: float = 30.0
    default_extension: str = ".sql"


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        logger.warning("ignoring unreadable config %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def analyzer_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("analyzer", {})
    return section if isinstance(section, dict) else {}


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged


def settings_from_payload(payload: TomlTable) -> AnalyzerSettings:
    try:
        return AnalyzerSettings.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"invalid analyzer settings: {exc}") from exc


def runtime_identifier(
    system: str | None = None, machine: str | None = None
) -> Optional[str]:
    """Name of the analyzer runtime build for a host, or None if unsupported."""
    system = system if system is not None else platform_module.system()
    machine = (machine if machine is not None else platform_module.machine()).lower()
    if system == "Darwin":
        return "osx-x64"
    if system == "Linux":
        return "linux-x64"
    if system == "Windows":
        if machine in {"x86", "i386", "i686"}:
            return "win-x86"
        if machine in {"amd64", "x86_64", "x64"}:
            return "win-x64"
    return None


def _console_name(runtime: str) -> str:
    if runtime.startswith("win-"):
        return f"{_CONSOLE_NAME}.exe"
    return _CONSOLE_NAME


def build_analyzer_config(
    settings: AnalyzerSettings,
    *,
    system: str | None = None,
    machine: str | None = None,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> AnalyzerConfig:
    runtime = settings.platform or runtime_identifier(system, machine)
    if settings.binary:
        binary = settings.binary
    elif settings.install_dir:
        if runtime is None:
            raise ConfigError(
                f"Invalid Platform: {system or platform_module.system()}, "
                f"{machine or platform_module.machine()}"
            )
        binary = str(Path(settings.install_dir) / runtime / _console_name(runtime))
    else:
        binary = which(settings.tool_name) or settings.tool_name
    return AnalyzerConfig(
        binary=binary,
        platform=runtime,
        tool_name=settings.tool_name,
        display_name=settings.display_name,
        timeout_seconds=settings.timeout_seconds,
        default_extension=settings.default_extension,
    )


def resolve_analyzer_config(
    root: Path | None = None,
    config_path: Path | None = None,
    overrides: TomlTable | None = None,
) -> AnalyzerConfig:
    """Analyzer config from `lintbridge.toml`, with explicit overrides on top."""
    defaults = analyzer_defaults(root=root, config_path=config_path)
    payload = merge_payload(overrides or {}, defaults)
    return build_analyzer_config(settings_from_payload(payload))
