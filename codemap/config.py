"""Configuration loading for codemap (.codemap.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

CONFIG_FILENAME = ".codemap.yml"
DEFAULT_OUTPUT = "CODEBASE.md"
DEFAULT_SOURCE_DIRS: tuple[str, ...] = ("src",)

ENV_AI_MODE_KEYS = ("CODEMAP_AI_MODE", "AI_MODE")
ENV_EXECUTABLE_KEYS = ("CODEMAP_LLM_EXECUTABLE",)

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class EnrichmentConfig:
    """External description generator settings."""

    enabled: bool = False
    executable: str = "claude"
    args: List[str] = field(default_factory=lambda: ["--print"])
    timeout: float = 30.0


@dataclass
class CodemapConfig:
    """Effective settings for one codemap run."""

    root: Path
    output: str = DEFAULT_OUTPUT
    source_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_SOURCE_DIRS))
    exclude_paths: List[str] = field(default_factory=list)
    enrichment: EnrichmentConfig = field(default_factory=EnrichmentConfig)

    @property
    def output_path(self) -> Path:
        return self.root / self.output


def load_config(config_path: Path, *, environ: Mapping[str, str] | None = None) -> CodemapConfig:
    """Load configuration from disk and apply environment overrides.

    ``config_path`` may be the project root or the config file itself. A
    missing file yields defaults.
    """
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()
    env = os.environ if environ is None else environ

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)

    config = CodemapConfig(root=root)

    output = _as_str(data.get("output"))
    if output:
        config.output = output
    if "source_dirs" in data:
        config.source_dirs = _as_str_list(data.get("source_dirs"))
    config.exclude_paths = _as_str_list(data.get("exclude_paths"))

    enrichment_data = _as_dict(data.get("enrichment"))
    enrichment = config.enrichment
    enabled = _as_bool(enrichment_data.get("enabled"))
    if enabled is not None:
        enrichment.enabled = enabled
    executable = _as_str(enrichment_data.get("executable"))
    if executable:
        enrichment.executable = executable
    if "args" in enrichment_data:
        enrichment.args = _as_str_list(enrichment_data.get("args"))
    timeout = _as_float(enrichment_data.get("timeout"))
    if timeout is not None:
        if timeout <= 0:
            raise ConfigError("enrichment.timeout must be a positive number of seconds")
        enrichment.timeout = timeout

    env_mode = _as_bool(_first_env_value(env, ENV_AI_MODE_KEYS))
    if env_mode is not None:
        enrichment.enabled = env_mode
    env_executable = _first_env_value(env, ENV_EXECUTABLE_KEYS)
    if env_executable:
        enrichment.executable = env_executable

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _first_env_value(env: Mapping[str, str], keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        value = env.get(key)
        if value:
            return value
    return None


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUTHY:
            return True
        if lowered in _FALSY:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "CodemapConfig",
    "ConfigError",
    "DEFAULT_OUTPUT",
    "EnrichmentConfig",
    "load_config",
]
