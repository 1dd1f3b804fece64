"""
Unit tests for the onboarding page controls.

Page switching logic runs against stand-in controls so no window or GL
context is needed. The full widget tree is built only when a display is
available.
"""

import os

import pytest

from tiremonitor.mobile.screens.onboarding_screen import (
    ONBOARDING_PAGES,
    OnboardingPage,
    OnboardingScreen,
)


class StubDot:
    def __init__(self):
        self._active = False

    def set_active(self, active):
        self._active = active


class StubButton:
    text = ""


class HeadlessOnboardingScreen(OnboardingScreen):
    """OnboardingScreen with plain stand-ins for the Kivy controls."""

    def _create_ui(self):
        self._dots = [StubDot() for _ in self.pages]
        self.action_button = StubButton()
        self._update_controls()


@pytest.fixture
def completed():
    return []


@pytest.fixture
def screen(completed):
    return HeadlessOnboardingScreen(on_complete=lambda: completed.append(True))


def active_dots(screen):
    return [i for i, dot in enumerate(screen._dots) if dot._active]


class TestOnboardingControls:
    """Tests for the dots and the Skip / Get Started button."""

    def test_four_pages(self, screen):
        assert len(screen.pages) == 4
        assert screen.pages == ONBOARDING_PAGES

    def test_first_page_offers_skip(self, screen):
        assert screen.current_page == 0
        assert not screen.is_last_page
        assert screen.action_button.text == "Skip"
        assert active_dots(screen) == [0]

    def test_middle_page_still_offers_skip(self, screen):
        screen._on_page_changed(None, 2)

        assert screen.action_button.text == "Skip"
        assert active_dots(screen) == [2]

    def test_last_page_offers_get_started(self, screen):
        screen._on_page_changed(None, 3)

        assert screen.is_last_page
        assert screen.action_button.text == "Get Started"
        assert active_dots(screen) == [3]

    def test_swiping_back_restores_skip(self, screen):
        screen._on_page_changed(None, 3)
        screen._on_page_changed(None, 1)

        assert screen.action_button.text == "Skip"
        assert active_dots(screen) == [1]

    def test_none_index_treated_as_first_page(self, screen):
        screen._on_page_changed(None, None)
        assert screen.current_page == 0

    def test_skip_completes(self, screen, completed):
        screen._on_action(None)
        assert completed == [True]

    def test_get_started_completes(self, screen, completed):
        screen._on_page_changed(None, 3)
        screen._on_action(None)
        assert completed == [True]

    def test_single_page_starts_on_get_started(self):
        screen = HeadlessOnboardingScreen(pages=[OnboardingPage("Only", "One page")])

        assert screen.is_last_page
        assert screen.action_button.text == "Get Started"

    def test_no_callback_is_harmless(self):
        screen = HeadlessOnboardingScreen()
        screen._on_action(None)


@pytest.mark.skipif(not os.environ.get("DISPLAY"), reason="Kivy widgets need a display")
class TestOnboardingWidgets:
    """Tests against the real Kivy widget tree."""

    def test_carousel_index_drives_button(self):
        completed = []
        screen = OnboardingScreen(on_complete=lambda: completed.append(True))

        assert len(screen.carousel.slides) == 4
        assert screen.action_button.text == "Skip"

        screen.carousel.index = 3
        assert screen.action_button.text == "Get Started"
        assert [dot._active for dot in screen._dots] == [False, False, False, True]

        screen.action_button.dispatch("on_press")
        assert completed == [True]
