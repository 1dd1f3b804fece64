"""
Settings screen for Tire Monitor.

Edits the server address, alert thresholds and update interval.
"""

import logging
from typing import Callable

from kivy.clock import Clock
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.button import Button
from kivy.uix.label import Label
from kivy.uix.scrollview import ScrollView
from kivy.uix.slider import Slider
from kivy.uix.textinput import TextInput

from ...core.settings import (
    PRESSURE_THRESHOLD_RANGE,
    UPDATE_INTERVAL_RANGE,
    WEAR_THRESHOLD_RANGE,
    MonitorSettings,
)

logger = logging.getLogger(__name__)

MESSAGE_DURATION = 2.0
OK_COLOR = (0.4, 0.9, 0.4, 1)
ERROR_COLOR = (1.0, 0.3, 0.3, 1)


class SettingRow(BoxLayout):
    """A single setting row with label and control."""

    def __init__(self, label: str, **kwargs):
        kwargs.setdefault("orientation", "horizontal")
        kwargs.setdefault("size_hint_y", None)
        kwargs.setdefault("height", 50)
        kwargs.setdefault("padding", [10, 5, 10, 5])
        super().__init__(**kwargs)

        self.label = Label(
            text=label,
            font_size="14sp",
            size_hint=(0.5, 1),
            halign="left",
            valign="middle",
        )
        self.label.bind(size=self.label.setter("text_size"))
        self.add_widget(self.label)


class TextSetting(SettingRow):
    """Single-line text input setting."""

    def __init__(self, label: str, initial_value: str = "", hint_text: str = "", **kwargs):
        super().__init__(label, **kwargs)

        self.text_input = TextInput(
            text=initial_value,
            hint_text=hint_text,
            multiline=False,
            font_size="14sp",
            size_hint=(0.5, 1),
        )
        self.add_widget(self.text_input)

    @property
    def value(self) -> str:
        return self.text_input.text


class SliderSetting(SettingRow):
    """Numeric slider setting with a formatted value display."""

    def __init__(
        self,
        label: str,
        min_value: float = 0,
        max_value: float = 100,
        initial_value: float = 50,
        step: float = 1,
        value_format: Callable[[float], str] = "{:.0f}".format,
        **kwargs,
    ):
        kwargs.setdefault("height", 70)
        super().__init__(label, **kwargs)

        self.value_format = value_format

        control_layout = BoxLayout(orientation="vertical", size_hint=(0.5, 1))

        self.value_label = Label(
            text=value_format(initial_value),
            font_size="12sp",
            size_hint_y=0.3,
        )
        control_layout.add_widget(self.value_label)

        self.slider = Slider(
            min=min_value,
            max=max_value,
            value=initial_value,
            step=step,
            size_hint_y=0.7,
        )
        self.slider.bind(value=self._on_value)
        control_layout.add_widget(self.slider)

        self.add_widget(control_layout)

    def _on_value(self, instance, value):
        self.value_label.text = self.value_format(value)

    @property
    def value(self) -> float:
        return self.slider.value


class SettingsScreen(BoxLayout):
    """
    Settings screen with configuration options.

    Sections:
    - Connection (server IP)
    - Alerts (pressure and wear thresholds)
    - Updates (expected update interval)

    Nothing is persisted until Save is pressed.
    """

    def __init__(
        self,
        settings: MonitorSettings,
        on_saved: Callable[[], None] | None = None,
        on_close: Callable[[], None] | None = None,
        **kwargs,
    ):
        kwargs.setdefault("orientation", "vertical")
        kwargs.setdefault("padding", [10, 10, 10, 10])
        kwargs.setdefault("spacing", 10)
        super().__init__(**kwargs)

        self.settings = settings
        self.on_saved = on_saved
        self.on_close = on_close
        self._message_event = None

        self._create_ui()

    def _create_ui(self):
        """Create the settings UI."""
        header = BoxLayout(orientation="horizontal", size_hint_y=None, height=50, spacing=10)

        title = Label(
            text="Settings",
            font_size="20sp",
            bold=True,
            size_hint=(0.5, 1),
            halign="left",
            valign="middle",
        )
        title.bind(size=title.setter("text_size"))
        header.add_widget(title)

        save_btn = Button(text="Save", size_hint=(0.25, 1), font_size="14sp")
        save_btn.bind(on_press=self._on_save)
        header.add_widget(save_btn)

        close_btn = Button(text="Close", size_hint=(0.25, 1), font_size="14sp")
        close_btn.bind(on_press=self._on_close)
        header.add_widget(close_btn)

        self.add_widget(header)

        # Save feedback, analogous to a snackbar
        self.message_label = Label(text="", font_size="13sp", size_hint_y=None, height=24)
        self.add_widget(self.message_label)

        scroll_view = ScrollView(size_hint=(1, 1))
        settings_layout = BoxLayout(
            orientation="vertical",
            size_hint_y=None,
            spacing=5,
            padding=[0, 10, 0, 10],
        )
        settings_layout.bind(minimum_height=settings_layout.setter("height"))

        settings_layout.add_widget(self._create_section_header("Connection"))
        self.server_ip_setting = TextSetting(
            label="Server IP Address",
            initial_value=self.settings.server_ip,
            hint_text="Enter server IP address",
        )
        settings_layout.add_widget(self.server_ip_setting)

        settings_layout.add_widget(self._create_section_header("Alerts"))
        self.pressure_setting = SliderSetting(
            label="Pressure Threshold",
            min_value=PRESSURE_THRESHOLD_RANGE[0],
            max_value=PRESSURE_THRESHOLD_RANGE[1],
            initial_value=self.settings.pressure_threshold,
            step=5,
            value_format="{:.1f}".format,
        )
        settings_layout.add_widget(self.pressure_setting)

        self.wear_setting = SliderSetting(
            label="Wear Threshold",
            min_value=WEAR_THRESHOLD_RANGE[0],
            max_value=WEAR_THRESHOLD_RANGE[1],
            initial_value=self.settings.wear_threshold,
            step=0.1,
            value_format=lambda v: f"{v * 100:.1f}%",
        )
        settings_layout.add_widget(self.wear_setting)

        settings_layout.add_widget(self._create_section_header("Updates"))
        self.interval_setting = SliderSetting(
            label="Update Interval",
            min_value=UPDATE_INTERVAL_RANGE[0],
            max_value=UPDATE_INTERVAL_RANGE[1],
            initial_value=self.settings.update_interval,
            step=5,
            value_format=lambda v: f"{v:.0f}s",
        )
        settings_layout.add_widget(self.interval_setting)

        scroll_view.add_widget(settings_layout)
        self.add_widget(scroll_view)

    def _create_section_header(self, text: str) -> Label:
        """Create a section header label."""
        return Label(
            text=text,
            font_size="16sp",
            bold=True,
            color=(0.4, 0.7, 1.0, 1),
            size_hint_y=None,
            height=40,
            halign="left",
            valign="bottom",
        )

    def save(self) -> bool:
        """
        Persist the current control values.

        Returns:
            True if all values were saved, False if one was rejected.
        """
        try:
            self.settings.set_server_ip(self.server_ip_setting.value)
            self.settings.set_pressure_threshold(round(self.pressure_setting.value, 1))
            self.settings.set_wear_threshold(round(self.wear_setting.value, 2))
            self.settings.set_update_interval(int(round(self.interval_setting.value)))
        except ValueError as e:
            logger.warning(f"Settings rejected: {e}")
            self._show_message(str(e), ERROR_COLOR)
            return False

        self._show_message("Settings saved", OK_COLOR)
        if self.on_saved:
            self.on_saved()
        return True

    def _show_message(self, text: str, color: tuple) -> None:
        self.message_label.text = text
        self.message_label.color = color
        if self._message_event is not None:
            self._message_event.cancel()
        self._message_event = Clock.schedule_once(self._clear_message, MESSAGE_DURATION)

    def _clear_message(self, dt):
        self.message_label.text = ""
        self._message_event = None

    def _on_save(self, instance):
        """Handle save button press."""
        self.save()

    def _on_close(self, instance):
        """Handle close button press."""
        if self._message_event is not None:
            self._message_event.cancel()
        if self.on_close:
            self.on_close()
