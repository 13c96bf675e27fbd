"""Framework configuration with clean, readable structure."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml

from .core.scheduler import DEFAULT_TICK_SECONDS

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(os.environ.get("GRIDMENU_CONFIG", "gridmenu.yaml"))


def _known(cls, d: dict) -> dict:
    """Drop keys the dataclass doesn't define."""
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in d.items() if k in names}


@dataclass
class SchedulerConfig:
    """Tick scheduler settings."""
    tick_seconds: float = DEFAULT_TICK_SECONDS


@dataclass
class MenuConfig:
    """Defaults applied to menus."""
    row_width: int = 9


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class FrameworkConfig:
    """Main configuration combining all sections."""
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    menu: MenuConfig = field(default_factory=MenuConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> dict:
        return {
            "scheduler": asdict(self.scheduler),
            "menu": asdict(self.menu),
            "logging": asdict(self.logging),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "FrameworkConfig":
        if not isinstance(d, dict):
            return cls()
        config = cls(
            scheduler=SchedulerConfig(**_known(SchedulerConfig, d.get("scheduler") or {})),
            menu=MenuConfig(**_known(MenuConfig, d.get("menu") or {})),
            logging=LoggingConfig(**_known(LoggingConfig, d.get("logging") or {})),
        )

        # Reject values that would break the scheduler or the grid
        if config.scheduler.tick_seconds <= 0:
            logger.warning("Ignoring non-positive tick_seconds %r", config.scheduler.tick_seconds)
            config.scheduler.tick_seconds = DEFAULT_TICK_SECONDS
        if config.menu.row_width <= 0:
            logger.warning("Ignoring non-positive row_width %r", config.menu.row_width)
            config.menu.row_width = MenuConfig.row_width
        return config

    def save(self, path: Path = CONFIG_PATH):
        temp = path.with_suffix(".tmp")
        temp.write_text(yaml.safe_dump(self.to_dict(), sort_keys=False))
        temp.replace(path)

    @classmethod
    def load(cls, path: Path = CONFIG_PATH) -> "FrameworkConfig":
        try:
            if path.exists():
                return cls.from_dict(yaml.safe_load(path.read_text()) or {})
        except (yaml.YAMLError, OSError) as e:
            logger.warning("Failed to load config %s: %s", path, e)
        return cls()


# Global instance
_config: Optional[FrameworkConfig] = None


def get_config() -> FrameworkConfig:
    """Get current config."""
    global _config
    if _config is None:
        _config = FrameworkConfig.load(CONFIG_PATH)
    return _config


def set_config(config: Optional[FrameworkConfig]):
    """Replace the current config (``None`` reloads from disk on next access)."""
    global _config
    _config = config
