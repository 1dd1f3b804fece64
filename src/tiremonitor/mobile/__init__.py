"""
Tire Monitor Mobile - Cross-platform Kivy UI for tire telemetry.

This module provides a Kivy-based user interface that works on:
- Desktop (Windows, macOS, Linux)
- Mobile (Android, iOS)

Features:
- Live tire pressure and wear cards
- Connection and data freshness badges
- Settings editor and first-run onboarding
"""

from .app import TireMonitorApp

__all__ = ["TireMonitorApp"]
