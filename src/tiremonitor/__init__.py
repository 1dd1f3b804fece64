"""
Tire Monitor - Bicycle tire telemetry viewer

Cross-platform app showing live tire pressure and wear readings streamed
from a telemetry server over WebSocket.
"""

__version__ = "0.1.0"
__author__ = "Tire Monitor Team"

from .core.monitor_service import TireMonitorService
from .core.reading import ConnectionStatus, TireReading

__all__ = ["TireMonitorService", "ConnectionStatus", "TireReading", "__version__"]
