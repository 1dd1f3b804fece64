"""
Persisted user settings for Tire Monitor.

Settings live in a Kivy JsonStore file, one key per setting. Missing keys
read as their defaults so a fresh install needs no migration.
"""

import logging
import os
from pathlib import Path
from typing import Any

# Prevent Kivy from consuming command-line arguments
os.environ.setdefault("KIVY_NO_ARGS", "1")

from kivy.storage.jsonstore import JsonStore

logger = logging.getLogger(__name__)


SERVER_IP_KEY = "server_ip"
PRESSURE_THRESHOLD_KEY = "pressure_threshold"
WEAR_THRESHOLD_KEY = "wear_threshold"
UPDATE_INTERVAL_KEY = "update_interval"
ONBOARDING_COMPLETED_KEY = "onboarding_completed"

DEFAULT_SERVER_IP = "192.168.0.100"
DEFAULT_PRESSURE_THRESHOLD = 70.0
DEFAULT_WEAR_THRESHOLD = 0.9
DEFAULT_UPDATE_INTERVAL = 30

PRESSURE_THRESHOLD_RANGE = (0.0, 100.0)
WEAR_THRESHOLD_RANGE = (0.0, 1.0)
UPDATE_INTERVAL_RANGE = (5, 60)


def default_settings_path(
    platform_type: str = "desktop",
    config_path: str | None = None,
    user_data_dir: str | None = None,
) -> Path:
    """
    Get platform-appropriate settings file location.

    Args:
        platform_type: "android" or "desktop".
        config_path: Explicit path from configuration, used when non-empty.
        user_data_dir: Private app storage directory (Kivy App.user_data_dir).
            Required on Android, where shared storage is not writable.
    """
    if config_path:
        return Path(config_path).expanduser()
    if platform_type == "android":
        if not user_data_dir:
            raise ValueError("user_data_dir is required on Android")
        return Path(user_data_dir) / "settings.json"
    return Path.home() / "TireMonitor" / "settings.json"


def _check_range(name: str, value: float, bounds: tuple[float, float]) -> None:
    low, high = bounds
    if not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high}, got {value}")


class MonitorSettings:
    """
    Typed accessors over the settings store.

    Usage:
        settings = MonitorSettings.create(default_settings_path())
        settings.set_server_ip("192.168.1.20")
        url_host = settings.server_ip
    """

    def __init__(self, store: JsonStore):
        self._store = store

    @classmethod
    def create(cls, path: Path | str) -> "MonitorSettings":
        """Open the settings file at path, creating its directory if needed."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Settings file: {path}")
        return cls(JsonStore(str(path)))

    def _read(self, key: str, default: Any) -> Any:
        if self._store.exists(key):
            return self._store.get(key)["value"]
        return default

    def _write(self, key: str, value: Any) -> None:
        self._store.put(key, value=value)
        logger.info(f"Setting {key} = {value!r}")

    @property
    def server_ip(self) -> str:
        return str(self._read(SERVER_IP_KEY, DEFAULT_SERVER_IP))

    @property
    def pressure_threshold(self) -> float:
        return float(self._read(PRESSURE_THRESHOLD_KEY, DEFAULT_PRESSURE_THRESHOLD))

    @property
    def wear_threshold(self) -> float:
        return float(self._read(WEAR_THRESHOLD_KEY, DEFAULT_WEAR_THRESHOLD))

    @property
    def update_interval(self) -> int:
        return int(self._read(UPDATE_INTERVAL_KEY, DEFAULT_UPDATE_INTERVAL))

    @property
    def onboarding_completed(self) -> bool:
        return bool(self._read(ONBOARDING_COMPLETED_KEY, False))

    def set_server_ip(self, value: str) -> None:
        """Save the telemetry server host. Surrounding whitespace is dropped."""
        value = value.strip()
        if not value:
            raise ValueError("Server IP address must not be empty")
        self._write(SERVER_IP_KEY, value)

    def set_pressure_threshold(self, value: float) -> None:
        _check_range("Pressure threshold", value, PRESSURE_THRESHOLD_RANGE)
        self._write(PRESSURE_THRESHOLD_KEY, float(value))

    def set_wear_threshold(self, value: float) -> None:
        _check_range("Wear threshold", value, WEAR_THRESHOLD_RANGE)
        self._write(WEAR_THRESHOLD_KEY, float(value))

    def set_update_interval(self, value: int) -> None:
        _check_range("Update interval", value, UPDATE_INTERVAL_RANGE)
        self._write(UPDATE_INTERVAL_KEY, int(value))

    def complete_onboarding(self) -> None:
        self._write(ONBOARDING_COMPLETED_KEY, True)

    def reset_onboarding(self) -> None:
        self._write(ONBOARDING_COMPLETED_KEY, False)

    def as_dict(self) -> dict[str, Any]:
        """Return all settings, defaults included."""
        return {
            SERVER_IP_KEY: self.server_ip,
            PRESSURE_THRESHOLD_KEY: self.pressure_threshold,
            WEAR_THRESHOLD_KEY: self.wear_threshold,
            UPDATE_INTERVAL_KEY: self.update_interval,
            ONBOARDING_COMPLETED_KEY: self.onboarding_completed,
        }
