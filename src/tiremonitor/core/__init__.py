"""Core components for Tire Monitor."""

from .config import Config
from .monitor_service import TireMonitorService
from .reading import ConnectionStatus, TelemetryError, TireReading, parse_snapshot
from .settings import MonitorSettings

__all__ = [
    "Config",
    "ConnectionStatus",
    "MonitorSettings",
    "TelemetryError",
    "TireMonitorService",
    "TireReading",
    "parse_snapshot",
]
