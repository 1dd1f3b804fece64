"""Screen modules for Tire Monitor mobile UI."""

from .main_screen import MainScreen
from .onboarding_screen import OnboardingScreen
from .settings_screen import SettingsScreen

__all__ = ["MainScreen", "OnboardingScreen", "SettingsScreen"]
