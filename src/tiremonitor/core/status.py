"""
Display classification for tire readings and connection freshness.

Pure functions shared by the Kivy UI and the console mode.
"""

from datetime import datetime, timedelta
from enum import Enum

from .reading import ConnectionStatus, TireReading

GOOD_SCORE = 90.0
FAIR_SCORE = 70.0


class ScoreLevel(Enum):
    """Color band for a 0-100 score."""

    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class TireAlert(Enum):
    """Alert raised when a reading crosses a user threshold."""

    LOW_PRESSURE = "Low pressure"
    WORN = "Worn tire"

    def __str__(self) -> str:
        return self.value


CONNECTION_LABELS = {
    ConnectionStatus.CONNECTED: "Connected",
    ConnectionStatus.CONNECTING: "Connecting...",
    ConnectionStatus.ERROR: "Connection Error",
    ConnectionStatus.DISCONNECTED: "Disconnected",
}


def score_level(score: float) -> ScoreLevel:
    """Classify a pressure score into a color band."""
    if score >= GOOD_SCORE:
        return ScoreLevel.GOOD
    if score >= FAIR_SCORE:
        return ScoreLevel.FAIR
    return ScoreLevel.POOR


def is_stale(
    last_update: datetime | None,
    now: datetime,
    max_age: timedelta,
) -> bool:
    """
    Check whether telemetry is out of date.

    Args:
        last_update: Time the last message was received, or None if never.
        now: Current time.
        max_age: Age after which data is considered stale.

    Returns:
        True if nothing was received yet or the data is older than max_age.
    """
    if last_update is None:
        return True
    return now - last_update > max_age


def format_last_update(last_update: datetime | None, now: datetime) -> str:
    """Human-readable age of the last received message."""
    if last_update is None:
        return "No data received"

    seconds = int((now - last_update).total_seconds())
    if seconds < 60:
        return f"Updated {max(seconds, 0)}s ago"
    if seconds < 3600:
        return f"Updated {seconds // 60}m ago"
    return f"Updated {seconds // 3600}h ago"


def check_alerts(
    reading: TireReading,
    pressure_threshold: float,
    wear_threshold: float,
) -> list[TireAlert]:
    """
    Evaluate a reading against the user's alert thresholds.

    Args:
        reading: Reading to check.
        pressure_threshold: Scores below this raise LOW_PRESSURE.
        wear_threshold: Wear at or above this fraction raises WORN.

    Returns:
        Alerts raised by the reading, empty if all is well.
    """
    alerts = []
    if reading.pressure < pressure_threshold:
        alerts.append(TireAlert.LOW_PRESSURE)
    if reading.wear >= wear_threshold:
        alerts.append(TireAlert.WORN)
    return alerts
