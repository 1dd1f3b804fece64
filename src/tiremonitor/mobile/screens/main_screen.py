"""
Main screen for Tire Monitor mobile app.

Primary UI showing connection state, data freshness and one card per wheel.
"""

import logging
from datetime import datetime, timedelta

from kivy.clock import Clock
from kivy.graphics import Color, Rectangle
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.button import Button
from kivy.uix.floatlayout import FloatLayout
from kivy.uix.gridlayout import GridLayout
from kivy.uix.label import Label

from ...core.config import Config
from ...core.monitor_service import TireMonitorService
from ...core.reading import ConnectionStatus, TireReading
from ...core.settings import MonitorSettings
from ...core.status import TireAlert, check_alerts
from ..widgets.status_badge import ConnectionBadge, LastUpdateBadge
from ..widgets.tire_card import TireStatusCard
from .settings_screen import SettingsScreen

logger = logging.getLogger(__name__)


class MainScreen(FloatLayout):
    """
    Main screen with tire status cards.

    Layout:
    ┌─────────────────────────────────────┐
    │ Tire Monitor [Updated 3s] [Conn] [⚙]│
    │                                     │
    │ Tire Status                         │
    │  ┌──────────┐  ┌──────────┐         │
    │  │  Front   │  │  Rear    │         │
    │  └──────────┘  └──────────┘         │
    └─────────────────────────────────────┘
    """

    def __init__(
        self,
        settings: MonitorSettings,
        service: TireMonitorService,
        config: Config,
        **kwargs,
    ):
        """
        Initialize the main screen.

        Args:
            settings: Persisted user settings.
            service: Telemetry service, reconnected when settings are saved.
            config: Application configuration.
        """
        super().__init__(**kwargs)

        self.settings = settings
        self.service = service
        self.config = config

        self.readings: dict[str, TireReading] = {}
        self.last_update: datetime | None = None
        self._cards: dict[str, TireStatusCard] = {}
        self._active_alerts: dict[str, list[TireAlert]] = {}
        self._refresh_event = None

        self._create_ui()

    def _create_ui(self):
        """Create all UI components."""
        content = BoxLayout(
            orientation="vertical",
            size_hint=(1, 1),
            padding=[16, 16, 16, 16],
            spacing=12,
        )

        content.add_widget(self._create_header())

        status_title = Label(
            text="Tire Status",
            font_size="24sp",
            bold=True,
            size_hint_y=None,
            height=40,
            halign="left",
            valign="middle",
        )
        status_title.bind(size=status_title.setter("text_size"))
        content.add_widget(status_title)

        self.tire_grid = GridLayout(
            cols=self.config.get("display.grid_columns", 2),
            spacing=16,
            size_hint=(1, 1),
        )
        content.add_widget(self.tire_grid)

        self.add_widget(content)

        self.empty_label = Label(
            text="",
            font_size="16sp",
            color=(0.6, 0.6, 0.6, 1),
            pos_hint={"center_x": 0.5, "center_y": 0.5},
            size_hint=(None, None),
            size=(400, 40),
        )
        self.add_widget(self.empty_label)
        self._update_empty_state()

    def _create_header(self) -> BoxLayout:
        """Create the top bar with badges and settings button."""
        header = BoxLayout(orientation="horizontal", size_hint_y=None, height=44, spacing=8)

        title = Label(
            text="Tire Monitor",
            font_size="20sp",
            bold=True,
            halign="left",
            valign="middle",
        )
        title.bind(size=title.setter("text_size"))
        header.add_widget(title)

        self.last_update_badge = LastUpdateBadge()
        header.add_widget(self.last_update_badge)

        self.connection_badge = ConnectionBadge()
        header.add_widget(self.connection_badge)

        settings_btn = Button(
            text="Settings",
            size_hint=(None, 1),
            width=90,
            font_size="14sp",
        )
        settings_btn.bind(on_press=self._on_settings_press)
        header.add_widget(settings_btn)

        return header

    def start_refresh(self) -> None:
        """Start periodic refresh of the last-update badge."""
        if self._refresh_event is None:
            interval = self.config.get("display.refresh_interval", 1.0)
            self._refresh_event = Clock.schedule_interval(self._refresh_badges, interval)

    def stop_refresh(self) -> None:
        """Stop periodic badge refresh."""
        if self._refresh_event is not None:
            self._refresh_event.cancel()
            self._refresh_event = None

    def _refresh_badges(self, dt):
        max_age = timedelta(seconds=self.settings.update_interval)
        self.last_update_badge.update(self.last_update, max_age)

    def update_tire_data(self, readings: dict[str, TireReading]) -> None:
        """
        Replace the displayed readings.

        Args:
            readings: Latest readings keyed by wheel position.
        """
        self.readings = readings
        pressure_threshold = self.settings.pressure_threshold
        wear_threshold = self.settings.wear_threshold

        if list(readings) != list(self._cards):
            self.tire_grid.clear_widgets()
            self._cards = {}
            for key, reading in readings.items():
                card = TireStatusCard(reading)
                self._cards[key] = card
                self.tire_grid.add_widget(card)

        for key, reading in readings.items():
            alerts = check_alerts(reading, pressure_threshold, wear_threshold)
            self._cards[key].update(reading, alerts)
            self._log_alert_changes(key, alerts)

        self._update_empty_state()

    def _log_alert_changes(self, key: str, alerts: list[TireAlert]) -> None:
        previous = self._active_alerts.get(key, [])
        for alert in alerts:
            if alert not in previous:
                logger.warning(f"{key}: {alert}")
        self._active_alerts[key] = alerts

    def update_connection_status(self, status: ConnectionStatus) -> None:
        self.connection_badge.update(status)
        self._update_empty_state()

    def update_last_update(self, last_update: datetime) -> None:
        self.last_update = last_update
        self._refresh_badges(0)

    def _update_empty_state(self):
        if self._cards:
            self.empty_label.text = ""
        else:
            self.empty_label.text = f"Waiting for tire data from {self.settings.server_ip}..."

    def _on_settings_press(self, instance):
        """Handle settings button press."""
        if hasattr(self, "settings_screen"):
            return
        logger.info("Settings button pressed")
        self.settings_screen = SettingsScreen(
            settings=self.settings,
            on_saved=self._on_settings_saved,
            on_close=self._on_settings_close,
            size_hint=(0.9, 0.9),
            pos_hint={"center_x": 0.5, "center_y": 0.5},
        )
        with self.settings_screen.canvas.before:
            Color(0.1, 0.1, 0.1, 0.95)
            self.settings_screen._bg_rect = Rectangle(
                pos=self.settings_screen.pos,
                size=self.settings_screen.size,
            )
        self.settings_screen.bind(
            pos=self._update_settings_bg,
            size=self._update_settings_bg,
        )
        self.add_widget(self.settings_screen)

    def _update_settings_bg(self, instance, value):
        """Update settings background rectangle."""
        if hasattr(self, "settings_screen"):
            self.settings_screen._bg_rect.pos = self.settings_screen.pos
            self.settings_screen._bg_rect.size = self.settings_screen.size

    def _on_settings_saved(self):
        """Apply saved settings: new thresholds and server address."""
        if self.readings:
            self.update_tire_data(self.readings)
        self._refresh_badges(0)
        self._update_empty_state()
        self.service.reconnect()

    def _on_settings_close(self):
        """Handle settings screen close."""
        if hasattr(self, "settings_screen"):
            self.remove_widget(self.settings_screen)
            del self.settings_screen
            logger.info("Settings closed")
