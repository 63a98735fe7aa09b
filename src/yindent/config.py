"""
Configuration for yindent.

All tunable parameters in one place. Loaded from:
1. Defaults (this file)
2. Config file (~/.config/yindent/config.toml) if exists
3. Environment variables (YINDENT_*) override file
4. CLI flags override everything
"""

from __future__ import annotations

import contextlib
import logging
import os
import tomllib  # stdlib in 3.11+
from dataclasses import dataclass, field, replace
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndentsStyle:
    """Indentation style applied by one formatting pass."""
    indent_size: int = 2
    normalize_marker_spacing: bool = True  # `-   x` becomes `- x`

    def __post_init__(self):
        if isinstance(self.indent_size, bool) or not isinstance(self.indent_size, int):
            raise ValueError(f"indent_size must be an integer, got {self.indent_size!r}")
        if self.indent_size < 1:
            raise ValueError(f"indent_size must be >= 1, got {self.indent_size}")


@dataclass
class Config:
    """Root config with all settings."""
    indents: IndentsStyle = field(default_factory=IndentsStyle)


def get_config_path() -> Path:
    """Get config file path, respecting XDG."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "yindent" / "config.toml"
    return Path.home() / ".config" / "yindent" / "config.toml"


def load_config() -> Config:
    """Load config from file if exists, else return defaults."""
    config = Config()
    path = get_config_path()

    if path.exists():
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
            config = _apply_toml(config, data)
        except (OSError, tomllib.TOMLDecodeError, ValueError, TypeError) as e:
            logger.warning("ignoring config file %s: %s", path, e)

    # env var overrides
    config = _apply_env(config)

    return config


def _apply_toml(config: Config, data: dict) -> Config:
    """Apply toml data to config."""
    if "indents" in data:
        t = data["indents"]
        changes = {}
        if "indent_size" in t:
            changes["indent_size"] = int(t["indent_size"])
        if "normalize_marker_spacing" in t:
            changes["normalize_marker_spacing"] = bool(t["normalize_marker_spacing"])
        config.indents = replace(config.indents, **changes)

    return config


def _apply_env(config: Config) -> Config:
    """Apply environment variable overrides."""
    env_map: dict[str, tuple[str, type]] = {
        "YINDENT_INDENT_SIZE": ("indent_size", int),
        "YINDENT_NORMALIZE_MARKER_SPACING": ("normalize_marker_spacing", bool),
    }

    for env_key, (attr, conv) in env_map.items():
        val = os.environ.get(env_key)
        if val is not None:
            with contextlib.suppress(ValueError):
                # Bool needs special handling: "true", "1", "yes" -> True
                converted = val.lower() in ("true", "1", "yes") if conv is bool else conv(val)
                config.indents = replace(config.indents, **{attr: converted})

    return config


# Module-level config instance, loaded once on first use
_config: Config | None = None


def get_config() -> Config:
    """Get the global config instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Forget the loaded config so the next get_config() reloads it."""
    global _config
    _config = None
