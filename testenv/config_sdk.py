"""
Persisted settings for the environment guard.

Settings are stored in <config dir>/settings.json (see paths.get_config_dir)
and only read by the command line tool and the pytest plugin; a guard built
directly uses GuardSettings() unless given one.
"""

import json
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, asdict

from testenv.paths import get_config_dir


@dataclass
class GuardSettings:
    """Strongly-typed guard settings."""
    pinned_locale: str = "en_US"
    pinned_timezone: str = "America/Los_Angeles"
    noisy_logger: str = "testenv.prefs"
    collect_garbage: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GuardSettings':
        """Create GuardSettings from dictionary, ignoring unknown keys."""
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_data = {k: v for k, v in data.items() if k in known_fields}
        return cls(**filtered_data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _coerce(current: Any, value: Any) -> Any:
    # Values from the command line arrive as strings
    if isinstance(current, bool) and isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
        raise ValueError(f"Expected a boolean, got '{value}'")
    return value


class ConfigManager:
    """Manages guard settings with strongly-typed access."""

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize config manager.

        Args:
            config_dir: Optional custom config directory.
                       Defaults to paths.get_config_dir()
        """
        if config_dir is None:
            config_dir = get_config_dir()

        self.config_dir = config_dir
        self.settings_file = config_dir / 'settings.json'

    def load(self) -> GuardSettings:
        """Load settings from disk, falling back to defaults."""
        if not self.settings_file.exists():
            return GuardSettings()

        try:
            with open(self.settings_file, 'r') as f:
                data = json.load(f)
            return GuardSettings.from_dict(data)
        except (json.JSONDecodeError, IOError, TypeError, AttributeError):
            return GuardSettings()

    def save(self, settings: GuardSettings) -> None:
        """Save settings to disk."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.settings_file, 'w') as f:
            json.dump(settings.to_dict(), f, indent=2)

    def get(self, key: str) -> Optional[Any]:
        settings = self.load()
        return getattr(settings, key, None)

    def set(self, key: str, value: Any) -> None:
        """Set a specific setting."""
        settings = self.load()
        if hasattr(settings, key):
            setattr(settings, key, _coerce(getattr(settings, key), value))
            self.save(settings)
        else:
            raise ValueError(f"Unknown setting: {key}")

    def reset(self) -> None:
        """Restore default settings."""
        self.save(GuardSettings())

    def get_all(self) -> Dict[str, Any]:
        return self.load().to_dict()


_default_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get the default ConfigManager instance."""
    global _default_manager
    if _default_manager is None:
        _default_manager = ConfigManager()
    return _default_manager


def set_config_manager(manager: Optional[ConfigManager]) -> None:
    """Set the default ConfigManager (used for testing)."""
    global _default_manager
    _default_manager = manager
