"""
First-run onboarding for Tire Monitor.

Swipeable introduction pages with page dots and a Skip / Get Started button.
"""

import logging
from dataclasses import dataclass
from typing import Callable

from kivy.graphics import Color, Ellipse
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.button import Button
from kivy.uix.carousel import Carousel
from kivy.uix.label import Label
from kivy.uix.widget import Widget

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OnboardingPage:
    """Content of a single onboarding page."""

    title: str
    description: str


ONBOARDING_PAGES = [
    OnboardingPage(
        title="Tire Monitoring",
        description=(
            "Monitor your tires in real time.\n"
            "Pressure and wear are shown as scores out of 100."
        ),
    ),
    OnboardingPage(
        title="Connection Status",
        description=(
            "Check the connection status in the top bar.\n"
            "If the connection drops, the app reconnects automatically."
        ),
    ),
    OnboardingPage(
        title="Data Updates",
        description=(
            "See when data was last received.\n"
            "The badge turns orange when data goes stale."
        ),
    ),
    OnboardingPage(
        title="Settings",
        description=(
            "Adjust the server IP, alert thresholds and more\n"
            "from the Settings screen."
        ),
    ),
]

ACTIVE_DOT = (0.4, 0.7, 1.0, 1)
INACTIVE_DOT = (0.8, 0.8, 0.8, 1)


class PageDot(Widget):
    """Small circle marking one page."""

    def __init__(self, **kwargs):
        kwargs.setdefault("size_hint", (None, None))
        kwargs.setdefault("size", (8, 8))
        super().__init__(**kwargs)
        self._active = False
        self._draw()
        self.bind(pos=self._draw)

    def _draw(self, *args):
        self.canvas.clear()
        with self.canvas:
            Color(*(ACTIVE_DOT if self._active else INACTIVE_DOT))
            Ellipse(pos=self.pos, size=self.size)

    def set_active(self, active: bool) -> None:
        if active != self._active:
            self._active = active
            self._draw()


class OnboardingPageWidget(BoxLayout):
    """Centered title and description for one page."""

    def __init__(self, page: OnboardingPage, **kwargs):
        kwargs.setdefault("orientation", "vertical")
        kwargs.setdefault("padding", [40, 40, 40, 160])
        kwargs.setdefault("spacing", 20)
        super().__init__(**kwargs)

        self.add_widget(Widget())
        title = Label(
            text=page.title,
            font_size="28sp",
            bold=True,
            size_hint_y=None,
            height=60,
            color=ACTIVE_DOT,
        )
        self.add_widget(title)

        description = Label(
            text=page.description,
            font_size="16sp",
            halign="center",
            valign="top",
        )
        description.bind(size=description.setter("text_size"))
        self.add_widget(description)


class OnboardingScreen(BoxLayout):
    """
    Onboarding carousel.

    Both Skip and Get Started finish onboarding; the caller persists the
    flag and switches to the main screen.
    """

    def __init__(
        self,
        on_complete: Callable[[], None] | None = None,
        pages: list[OnboardingPage] | None = None,
        **kwargs,
    ):
        kwargs.setdefault("orientation", "vertical")
        super().__init__(**kwargs)

        self.on_complete = on_complete
        self.pages = pages or ONBOARDING_PAGES
        self.current_page = 0

        self._create_ui()

    def _create_ui(self):
        self.carousel = Carousel(direction="right", loop=False, size_hint=(1, 1))
        for page in self.pages:
            self.carousel.add_widget(OnboardingPageWidget(page))
        self.carousel.bind(index=self._on_page_changed)
        self.add_widget(self.carousel)

        footer = BoxLayout(
            orientation="vertical",
            size_hint_y=None,
            height=120,
            padding=[0, 0, 0, 48],
            spacing=24,
        )

        dot_row = BoxLayout(orientation="horizontal", size_hint_y=None, height=8)
        dot_row.add_widget(Widget())
        self._dots = []
        for _ in self.pages:
            dot = PageDot()
            self._dots.append(dot)
            dot_row.add_widget(dot)
            dot_row.add_widget(Widget(size_hint_x=None, width=8))
        dot_row.add_widget(Widget())
        footer.add_widget(dot_row)

        button_row = BoxLayout(orientation="horizontal")
        button_row.add_widget(Widget())
        self.action_button = Button(size_hint=(None, 1), width=180, font_size="16sp")
        self.action_button.bind(on_press=self._on_action)
        button_row.add_widget(self.action_button)
        button_row.add_widget(Widget())
        footer.add_widget(button_row)

        self.add_widget(footer)
        self._update_controls()

    def _on_page_changed(self, instance, index):
        self.current_page = index or 0
        self._update_controls()

    def _update_controls(self):
        for i, dot in enumerate(self._dots):
            dot.set_active(i == self.current_page)
        if self.is_last_page:
            self.action_button.text = "Get Started"
        else:
            self.action_button.text = "Skip"

    @property
    def is_last_page(self) -> bool:
        return self.current_page == len(self.pages) - 1

    def _on_action(self, instance):
        """Handle Skip / Get Started press."""
        logger.info(f"Onboarding finished on page {self.current_page + 1}/{len(self.pages)}")
        if self.on_complete:
            self.on_complete()
