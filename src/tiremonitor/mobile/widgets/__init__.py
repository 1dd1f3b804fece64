"""Widget modules for Tire Monitor mobile UI."""

from .status_badge import ConnectionBadge, LastUpdateBadge, StatusBadge
from .tire_card import TireStatusCard

__all__ = ["ConnectionBadge", "LastUpdateBadge", "StatusBadge", "TireStatusCard"]
