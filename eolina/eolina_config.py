"""
Configuration for the I/O collaborator and the hosts.

An `IoConfig` is built once (defaults, then an optional YAML file, then
command line flags) and passed into `Io` at construction. Nothing in the
core reads process wide settings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml


class Mode(IntEnum):
    """How much the collaborator prints, ordered from quiet to chatty."""
    MUTED = 0      # nothing is written, input is still read
    LEAN = 1       # plain output only, no prompts or log messages; for pipes
    PROMPTED = 2   # prompts and log messages; for a terminal


LOG_LEVELS = ("off", "error", "warning", "info", "debug")

_LOGGING_LEVELS = {
    "off": logging.CRITICAL + 10,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

# Mustache templates, rendered with `tag` and `context`.
DEFAULT_PROMPTS: Dict[str, str] = {
    "input": "[{{tag}}] [{{context}}]: ",
    "output": "[{{tag}}] [{{context}}]: ",
    "info": "[{{tag}}] ",
    "warning": "[{{tag}}] ",
    "error": "[{{tag}}] ",
}


class ConfigError(ValueError):
    pass


@dataclass
class IoConfig:
    mode: Mode = Mode.LEAN
    color: bool = False
    log_level: str = "warning"
    prompts: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_PROMPTS))

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]], base: Optional['IoConfig'] = None) -> 'IoConfig':
        """Overlays the keys of `data` onto `base` (or the defaults)."""
        config = replace(base) if base is not None else cls()
        config.prompts = dict(config.prompts)
        if not data:
            return config
        if not isinstance(data, Mapping):
            raise ConfigError(f"config must be a mapping, not {type(data).__name__}")

        unknown = set(data) - {"mode", "color", "log_level", "prompts"}
        if unknown:
            raise ConfigError(f"unknown config keys: {', '.join(sorted(unknown))}")

        if "mode" in data:
            try:
                config.mode = Mode[str(data["mode"]).upper()]
            except KeyError:
                raise ConfigError(f"invalid mode: {data['mode']!r}") from None
        if "color" in data:
            if not isinstance(data["color"], bool):
                raise ConfigError(f"color must be true or false, not {data['color']!r}")
            config.color = data["color"]
        if "log_level" in data:
            level = str(data["log_level"]).lower()
            if level not in LOG_LEVELS:
                raise ConfigError(f"invalid log level: {data['log_level']!r}")
            config.log_level = level
        if "prompts" in data:
            prompts = data["prompts"] or {}
            for key, template in prompts.items():
                if key not in DEFAULT_PROMPTS:
                    raise ConfigError(f"unknown prompt: {key!r}")
                config.prompts[key] = str(template)
        return config

    @property
    def logging_level(self) -> int:
        return _LOGGING_LEVELS[self.log_level]

    def adjust_log_level(self, increase: bool) -> Tuple[str, str]:
        """Moves one step towards `debug` (or `off`); returns `(before, after)`."""
        before = self.log_level
        at = LOG_LEVELS.index(before) + (1 if increase else -1)
        self.log_level = LOG_LEVELS[min(max(at, 0), len(LOG_LEVELS) - 1)]
        return before, self.log_level


def load_config(path: str | Path, base: Optional[IoConfig] = None) -> IoConfig:
    """Loads an `IoConfig` from a YAML (or JSON) file."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid config file {path}: {e}") from e
    return IoConfig.from_mapping(data, base)
