"""
Tire telemetry data structures.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any


class TelemetryError(ValueError):
    """Raised when a telemetry message cannot be decoded."""


class ConnectionStatus(Enum):
    """State of the telemetry server connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TireReading:
    """
    Latest telemetry for a single wheel.

    Attributes:
        position: Wheel position key (e.g. "Front", "Rear")
        pressure: Pressure score from 0 to 100
        wear: Wear fraction from 0.0 (new) to 1.0 (worn out)
    """

    position: str
    pressure: float
    wear: float

    @classmethod
    def from_json(cls, data: Any) -> "TireReading":
        """
        Build a reading from a decoded JSON object.

        Raises:
            TelemetryError: If a field is missing or has the wrong type.
        """
        if not isinstance(data, dict):
            raise TelemetryError(f"Reading must be an object, got {type(data).__name__}")

        try:
            position = data["position"]
            pressure = data["pressure"]
            wear = data["wear"]
        except KeyError as e:
            raise TelemetryError(f"Reading is missing field {e}") from e

        if not isinstance(position, str):
            raise TelemetryError("Field 'position' must be a string")
        for name, value in (("pressure", pressure), ("wear", wear)):
            # bool is an int subclass but never a valid measurement
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TelemetryError(f"Field '{name}' must be a number")

        try:
            return cls(position=position, pressure=float(pressure), wear=float(wear))
        except OverflowError as e:
            raise TelemetryError(f"Reading value out of range: {e}") from e

    @property
    def wear_percent(self) -> float:
        """Wear as a percentage (0-100)."""
        return self.wear * 100

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "position": self.position,
            "pressure": self.pressure,
            "wear": self.wear,
        }


def parse_snapshot(payload: str | bytes) -> dict[str, TireReading]:
    """
    Decode a telemetry message into readings keyed by wheel position.

    The message is a JSON object whose keys are wheel positions and whose
    values are reading objects. Key order is preserved.

    Args:
        payload: Raw text or bytes received from the server.

    Returns:
        Dictionary of position key -> TireReading.

    Raises:
        TelemetryError: If the payload is not a JSON object of readings.
    """
    try:
        data = json.loads(payload)
    except (ValueError, RecursionError) as e:
        # Also covers the integer digit limit and excessive nesting
        raise TelemetryError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise TelemetryError(f"Snapshot must be an object, got {type(data).__name__}")

    return {key: TireReading.from_json(value) for key, value in data.items()}
