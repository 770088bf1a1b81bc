"""Typed configuration loading and access.

Configuration lives in a `.prdoc.toml` file at the repository root. Every key
is optional; a missing file means defaults everywhere.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILENAME",
    "CONFIG_ENV_VAR",
    "DEFAULT_AUDIENCES",
    "Config",
    "ConfigError",
    "RecordsConfig",
    "ReportConfig",
    "find_config",
    "load_config",
]

CONFIG_FILENAME = ".prdoc.toml"
CONFIG_ENV_VAR = "PRDOC_CONFIG"

# Audience tags used by Substrate/Polkadot SDK change records.
DEFAULT_AUDIENCES: tuple[str, ...] = (
    "Runtime Dev",
    "Runtime User",
    "Node Dev",
    "Node Operator",
    "Todo",
)


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class RecordsConfig:
    """Where records live and how strictly they are validated."""

    dir: str = "prdoc"
    pattern: str = "*.prdoc"
    strict: bool = False
    audiences: tuple[str, ...] = DEFAULT_AUDIENCES


@dataclass(frozen=True, slots=True)
class ReportConfig:
    title: str = "Changelog"
    fallback_audience: str = "Unspecified"


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    records: RecordsConfig = field(default_factory=RecordsConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    # Directory the config was loaded from; relative paths resolve against it.
    root: Path | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object], *, root: Path | None = None) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        records: StrDict = get_table(data, "records") or {}
        report: StrDict = get_table(data, "report") or {}

        strict = get_bool(records, "strict")
        audiences = get_str_list(records, "audiences")

        return cls(
            records=RecordsConfig(
                dir=get_str(records, "dir") or "prdoc",
                pattern=get_str(records, "pattern") or "*.prdoc",
                strict=strict if strict is not None else False,
                audiences=audiences if audiences else DEFAULT_AUDIENCES,
            ),
            report=ReportConfig(
                title=get_str(report, "title") or "Changelog",
                fallback_audience=get_str(report, "fallback_audience") or "Unspecified",
            ),
            root=root,
        )

    @property
    def records_dir(self) -> Path:
        base = self.root if self.root is not None else Path.cwd()
        return base / self.records.dir


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def find_config(start: Path | None = None) -> Path | None:
    """Locate the config file.

    Order: the PRDOC_CONFIG environment variable, then `.prdoc.toml` in
    `start` (default: cwd) or any of its parents.
    """
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser()

    here = (start or Path.cwd()).resolve()
    for parent in (here, *here.parents):
        candidate = parent / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the config file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        config = Config.from_dict(result.value, root=path.resolve().parent)
        return Ok(config)
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))

