"""
Header badges for Tire Monitor.

Small rounded pills showing connection state and data freshness.
"""

import logging
from datetime import datetime, timedelta

from kivy.graphics import Color, RoundedRectangle
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.label import Label

from ...core.reading import ConnectionStatus
from ...core.status import CONNECTION_LABELS, format_last_update, is_stale

logger = logging.getLogger(__name__)


GREEN = (0.0, 0.7, 0.0, 1.0)
ORANGE = (1.0, 0.6, 0.0, 1.0)
RED = (0.9, 0.0, 0.0, 1.0)
GREY = (0.6, 0.6, 0.6, 1.0)

STATUS_COLORS = {
    ConnectionStatus.CONNECTED: GREEN,
    ConnectionStatus.CONNECTING: ORANGE,
    ConnectionStatus.ERROR: RED,
    ConnectionStatus.DISCONNECTED: GREY,
}


class StatusBadge(BoxLayout):
    """Rounded label whose text and tint can change."""

    def __init__(self, text: str = "", color: tuple = GREY, **kwargs):
        kwargs.setdefault("size_hint", (None, None))
        kwargs.setdefault("size", (170, 36))
        kwargs.setdefault("padding", [12, 4, 12, 4])
        super().__init__(**kwargs)

        self._color = color
        self._label = Label(
            text=text,
            font_size="13sp",
            color=color,
            halign="center",
            valign="middle",
        )
        self._label.bind(size=self._label.setter("text_size"))
        self.add_widget(self._label)

        self._draw_background()
        self.bind(pos=self._update_background, size=self._update_background)

    def _draw_background(self):
        """Draw a faint pill in the badge color."""
        self.canvas.before.clear()
        with self.canvas.before:
            Color(self._color[0], self._color[1], self._color[2], 0.15)
            self._bg_rect = RoundedRectangle(pos=self.pos, size=self.size, radius=[18])

    def _update_background(self, *args):
        self._bg_rect.pos = self.pos
        self._bg_rect.size = self.size

    def show(self, text: str, color: tuple) -> None:
        """Change the badge text and color."""
        self._label.text = text
        if color != self._color:
            self._color = color
            self._label.color = color
            self._draw_background()

    @property
    def text(self) -> str:
        return self._label.text


class ConnectionBadge(StatusBadge):
    """Badge reflecting the WebSocket connection status."""

    def __init__(self, **kwargs):
        super().__init__(
            text=CONNECTION_LABELS[ConnectionStatus.DISCONNECTED],
            color=STATUS_COLORS[ConnectionStatus.DISCONNECTED],
            **kwargs,
        )

    def update(self, status: ConnectionStatus) -> None:
        self.show(CONNECTION_LABELS[status], STATUS_COLORS[status])


class LastUpdateBadge(StatusBadge):
    """Badge showing the age of the last message; orange once stale."""

    def __init__(self, **kwargs):
        super().__init__(text=format_last_update(None, datetime.now()), color=ORANGE, **kwargs)

    def update(self, last_update: datetime | None, max_age: timedelta) -> None:
        now = datetime.now()
        stale = is_stale(last_update, now, max_age)
        self.show(format_last_update(last_update, now), ORANGE if stale else GREEN)
