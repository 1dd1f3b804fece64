"""
Tire Monitor Kivy Application - Cross-platform tire telemetry viewer.

Main entry point for the Kivy-based mobile/desktop application.
"""

import logging
import os
import platform as sys_platform

# Prevent Kivy from consuming command-line arguments
os.environ["KIVY_NO_ARGS"] = "1"

from kivy.app import App
from kivy.clock import Clock
from kivy.core.window import Window
from kivy.logger import Logger
from kivy.uix.screenmanager import Screen, ScreenManager

from ..core.config import Config
from ..core.monitor_service import DEFAULT_PORT, DEFAULT_RECONNECT_DELAY, TireMonitorService
from ..core.settings import MonitorSettings, default_settings_path
from .screens.main_screen import MainScreen
from .screens.onboarding_screen import OnboardingScreen

logger = logging.getLogger(__name__)

ONBOARDING_SCREEN = "onboarding"
HOME_SCREEN = "home"


def detect_platform() -> str:
    """Detect current platform type."""
    if sys_platform.system() == "Linux":
        try:
            import android  # noqa: F401
            return "android"
        except ImportError:
            return "desktop"
    return "desktop"


class TireMonitorApp(App):
    """
    Main Tire Monitor Kivy application.

    Coordinates:
    - Persisted settings (via MonitorSettings)
    - Telemetry stream (via TireMonitorService)
    - Routing between onboarding and home (via ScreenManager)
    """

    def __init__(self, app_config: Config | None = None, **kwargs):
        """
        Initialize the Tire Monitor app.

        Args:
            app_config: Optional Config object. If not provided, loads from default location.
        """
        super().__init__(**kwargs)

        # Use app_config to avoid conflict with Kivy's config
        if app_config is None:
            app_config = Config()
        self.app_config = app_config

        self.platform_type = detect_platform()
        self.settings_path = default_settings_path(
            self.platform_type,
            self.app_config.get("storage.settings_file"),
            user_data_dir=self.user_data_dir if self.platform_type == "android" else None,
        )

        # Components (initialized in build())
        self.settings = None
        self.service = None
        self.screen_manager = None
        self.main_screen = None

        self._unsubscribers = []

        Logger.info(f"TireMonitor: Initialized on {sys_platform.system()} ({self.platform_type})")
        Logger.info(f"TireMonitor: Settings file: {self.settings_path}")

    def build(self):
        """Build the application UI."""
        if self.platform_type == "desktop":
            Window.size = tuple(self.app_config.get("window.desktop_size", [480, 800]))
        self.title = self.app_config.get("app.name", "Bicycle Tire Monitor")

        self.settings = MonitorSettings.create(self.settings_path)

        self.service = TireMonitorService(
            self.settings,
            port=self.app_config.get("server.port", DEFAULT_PORT),
            reconnect_delay=self.app_config.get("connection.reconnect_delay", DEFAULT_RECONNECT_DELAY),
        )

        self.main_screen = MainScreen(
            settings=self.settings,
            service=self.service,
            config=self.app_config,
        )

        self.screen_manager = ScreenManager()
        if not self.settings.onboarding_completed:
            onboarding = Screen(name=ONBOARDING_SCREEN)
            onboarding.add_widget(OnboardingScreen(on_complete=self._on_onboarding_complete))
            self.screen_manager.add_widget(onboarding)

        home = Screen(name=HOME_SCREEN)
        home.add_widget(self.main_screen)
        self.screen_manager.add_widget(home)

        return self.screen_manager

    def on_start(self):
        """Called when the application starts."""
        Logger.info("TireMonitor: Application starting")

        self._unsubscribers = [
            self.service.subscribe_tire_data(
                lambda readings: Clock.schedule_once(
                    lambda dt: self.main_screen.update_tire_data(readings), 0
                )
            ),
            self.service.subscribe_connection_status(
                lambda status: Clock.schedule_once(
                    lambda dt: self.main_screen.update_connection_status(status), 0
                )
            ),
            self.service.subscribe_last_update(
                lambda time: Clock.schedule_once(
                    lambda dt: self.main_screen.update_last_update(time), 0
                )
            ),
        ]

        self.service.initialize()
        self.main_screen.start_refresh()

    def on_stop(self):
        """Called when the application stops."""
        Logger.info("TireMonitor: Application stopping")

        if self.main_screen:
            self.main_screen.stop_refresh()

        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

        if self.service:
            self.service.dispose()

        Logger.info("TireMonitor: Application stopped")

    def _on_onboarding_complete(self):
        """Persist onboarding completion and go to the home screen."""
        self.settings.complete_onboarding()
        self.screen_manager.current = HOME_SCREEN
        Logger.info("TireMonitor: Onboarding completed")


def run_mobile_app(config: Config | None = None):
    """
    Run the Tire Monitor mobile/desktop Kivy application.

    Args:
        config: Optional Config object.
    """
    app = TireMonitorApp(app_config=config)
    app.run()
