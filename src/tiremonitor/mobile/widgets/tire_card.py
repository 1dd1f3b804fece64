"""
Tire status card widget for Tire Monitor.

Shows one wheel's pressure score, wear and any active alerts.
"""

import logging

from kivy.graphics import Color, RoundedRectangle
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.label import Label
from kivy.uix.progressbar import ProgressBar

from ...core.reading import TireReading
from ...core.status import ScoreLevel, TireAlert, score_level

logger = logging.getLogger(__name__)


# Score color mapping (R, G, B, A) - normalized 0-1
SCORE_COLORS = {
    ScoreLevel.GOOD: (0.0, 0.7, 0.0, 1.0),  # Green
    ScoreLevel.FAIR: (1.0, 0.6, 0.0, 1.0),  # Orange
    ScoreLevel.POOR: (0.9, 0.0, 0.0, 1.0),  # Red
}

ALERT_BORDER = (0.9, 0.0, 0.0, 1.0)
CARD_BORDER = (0.3, 0.3, 0.3, 1.0)


class TireStatusCard(BoxLayout):
    """
    Card for a single wheel.

    Layout:
    ┌─────────────────────────┐
    │      Rear Tire          │
    │    Pressure Score       │
    │         85.0            │
    │  [██████████░░░░]       │
    │  Wear          80.0%    │
    │  Low pressure           │
    └─────────────────────────┘
    """

    def __init__(self, reading: TireReading, alerts: list[TireAlert] | None = None, **kwargs):
        kwargs.setdefault("orientation", "vertical")
        kwargs.setdefault("padding", [16, 12, 16, 12])
        kwargs.setdefault("spacing", 6)
        super().__init__(**kwargs)

        self._has_alert = False

        self._title_label = Label(font_size="20sp", bold=True, size_hint_y=0.2)
        self.add_widget(self._title_label)

        self.add_widget(Label(text="Pressure Score", font_size="14sp", size_hint_y=0.12))

        self._score_label = Label(font_size="26sp", bold=True, size_hint_y=0.2)
        self.add_widget(self._score_label)

        self._score_bar = ProgressBar(max=100, size_hint_y=0.1)
        self.add_widget(self._score_bar)

        wear_row = BoxLayout(orientation="horizontal", size_hint_y=0.16)
        wear_row.add_widget(Label(text="Wear", font_size="14sp", halign="left"))
        self._wear_label = Label(font_size="14sp", bold=True, halign="right")
        wear_row.add_widget(self._wear_label)
        self.add_widget(wear_row)

        self._alert_label = Label(
            text="",
            font_size="13sp",
            bold=True,
            color=ALERT_BORDER,
            size_hint_y=0.16,
        )
        self.add_widget(self._alert_label)

        self._draw_background()
        self.bind(pos=self._update_background, size=self._update_background)

        self.update(reading, alerts or [])

    def _draw_background(self):
        """Draw card background with a border that turns red on alert."""
        self.canvas.before.clear()
        with self.canvas.before:
            Color(*(ALERT_BORDER if self._has_alert else CARD_BORDER))
            self._border_rect = RoundedRectangle(
                pos=(self.pos[0] - 2, self.pos[1] - 2),
                size=(self.size[0] + 4, self.size[1] + 4),
                radius=[12],
            )
            Color(0.12, 0.12, 0.12, 1)
            self._bg_rect = RoundedRectangle(pos=self.pos, size=self.size, radius=[10])

    def _update_background(self, *args):
        self._bg_rect.pos = self.pos
        self._bg_rect.size = self.size
        self._border_rect.pos = (self.pos[0] - 2, self.pos[1] - 2)
        self._border_rect.size = (self.size[0] + 4, self.size[1] + 4)

    def update(self, reading: TireReading, alerts: list[TireAlert]) -> None:
        """
        Show a new reading.

        Args:
            reading: Latest reading for this wheel.
            alerts: Alerts raised by the reading.
        """
        self._title_label.text = f"{reading.position} Tire"

        self._score_label.text = f"{reading.pressure:.1f}"
        self._score_label.color = SCORE_COLORS[score_level(reading.pressure)]
        self._score_bar.value = min(max(reading.pressure, 0.0), 100.0)

        self._wear_label.text = f"{reading.wear_percent:.1f}%"
        self._alert_label.text = "  ".join(str(alert) for alert in alerts)

        has_alert = bool(alerts)
        if has_alert != self._has_alert:
            self._has_alert = has_alert
            self._draw_background()
