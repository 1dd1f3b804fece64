"""
Pytest fixtures for Tire Monitor tests.

Provides common test fixtures including:
- Test configuration
- Settings backed by a temporary file
- Fake WebSocket and timer doubles for the monitor service
"""

import json
import os

# Kivy must not parse pytest's command-line arguments
os.environ["KIVY_NO_ARGS"] = "1"
os.environ.setdefault("KIVY_NO_CONSOLELOG", "1")

import pytest

from tiremonitor.core.monitor_service import TireMonitorService
from tiremonitor.core.settings import MonitorSettings


@pytest.fixture
def test_config():
    """Test configuration dictionary."""
    return {
        "app": {"name": "Bicycle Tire Monitor", "debug": False},
        "server": {"port": 8080},
        "connection": {"reconnect_delay": 5.0},
        "display": {"refresh_interval": 1.0, "grid_columns": 2},
        "storage": {"settings_file": ""},
        "logging": {"level": "INFO"},
    }


@pytest.fixture
def settings(tmp_path):
    """Settings stored in a temporary file."""
    return MonitorSettings.create(tmp_path / "settings.json")


@pytest.fixture
def sample_payload():
    """Telemetry message with two wheels."""
    return json.dumps(
        {
            "Front": {"position": "Front", "pressure": 92.5, "wear": 0.25},
            "Rear": {"position": "Rear", "pressure": 85, "wear": 0.8},
        }
    )


class FakeWebSocketApp:
    """Stand-in for websocket.WebSocketApp that never touches the network."""

    def __init__(self, url, on_message=None, on_error=None, on_close=None):
        self.url = url
        self.on_message = on_message
        self.on_error = on_error
        self.on_close = on_close
        self.closed = False
        self.run_count = 0

    def run_forever(self):
        self.run_count += 1

    def close(self):
        self.closed = True

    def receive(self, message):
        self.on_message(self, message)

    def fail(self, error):
        self.on_error(self, error)

    def drop(self, code=1006, reason=None):
        self.on_close(self, code, reason)


class FakeTimer:
    """Stand-in for threading.Timer fired manually by tests."""

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function()


class FakeNetwork:
    """Records every socket and timer the service creates."""

    def __init__(self):
        self.sockets: list[FakeWebSocketApp] = []
        self.timers: list[FakeTimer] = []
        self.fail_connect: Exception | None = None

    def ws_factory(self, url, **callbacks):
        if self.fail_connect is not None:
            raise self.fail_connect
        ws = FakeWebSocketApp(url, **callbacks)
        self.sockets.append(ws)
        return ws

    def timer_factory(self, interval, function):
        timer = FakeTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def socket(self) -> FakeWebSocketApp:
        """Most recently opened socket."""
        return self.sockets[-1]

    @property
    def active_timers(self) -> list[FakeTimer]:
        return [t for t in self.timers if t.started and not t.cancelled]


@pytest.fixture
def network():
    return FakeNetwork()


@pytest.fixture
def service(settings, network):
    """Monitor service wired to the fake network."""
    svc = TireMonitorService(
        settings,
        port=8080,
        reconnect_delay=5.0,
        ws_factory=network.ws_factory,
        timer_factory=network.timer_factory,
    )
    yield svc
    svc.dispose()
