"""
Reconnecting WebSocket client for tire telemetry.

Holds a single connection to the telemetry server, decodes each message
into tire readings and fans the results out to subscribers. Every failure
(socket error, closed connection, failed connect) leads to the same
recovery: log and reconnect after a fixed delay, forever.
"""

import logging
import threading
from datetime import datetime
from typing import Any, Callable

import websocket

from .reading import ConnectionStatus, TelemetryError, TireReading, parse_snapshot
from .settings import MonitorSettings

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8080
DEFAULT_RECONNECT_DELAY = 5.0

TireDataCallback = Callable[[dict[str, TireReading]], None]
StatusCallback = Callable[[ConnectionStatus], None]
LastUpdateCallback = Callable[[datetime], None]


class TireMonitorService:
    """
    WebSocket client publishing tire readings, connection status and
    last-update times.

    Subscriber callbacks run on the socket thread; UI code must marshal
    them onto its own thread.

    Usage:
        service = TireMonitorService(settings)
        unsubscribe = service.subscribe_tire_data(print)
        service.initialize()
        ...
        service.dispose()
    """

    def __init__(
        self,
        settings: MonitorSettings,
        port: int = DEFAULT_PORT,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        ws_factory: Callable[..., Any] = websocket.WebSocketApp,
        timer_factory: Callable[..., Any] = threading.Timer,
    ):
        """
        Initialize the service. No connection is opened until initialize().

        Args:
            settings: Settings providing the server address.
            port: Telemetry server port.
            reconnect_delay: Seconds to wait before each reconnect attempt.
            ws_factory: Callable building a websocket.WebSocketApp-like object.
            timer_factory: Callable building a threading.Timer-like object.
        """
        self.settings = settings
        self.port = port
        self.reconnect_delay = reconnect_delay
        self._ws_factory = ws_factory
        self._timer_factory = timer_factory

        self._lock = threading.RLock()
        self._ws: Any = None
        self._ws_thread: threading.Thread | None = None
        self._reconnect_timer: Any = None
        self._attempt_errored = False
        self._disposed = False

        self._tire_data_subscribers: list[TireDataCallback] = []
        self._status_subscribers: list[StatusCallback] = []
        self._last_update_subscribers: list[LastUpdateCallback] = []

        # Latest published values
        self.status = ConnectionStatus.DISCONNECTED
        self.readings: dict[str, TireReading] = {}
        self.last_update: datetime | None = None

        # Statistics
        self.messages_received = 0
        self.messages_dropped = 0
        self.connect_attempts = 0

    @property
    def ws_url(self) -> str:
        """Server URL, rebuilt from the current settings on every call."""
        return f"ws://{self.settings.server_ip}:{self.port}"

    @property
    def reconnect_pending(self) -> bool:
        """Check if a reconnect attempt is scheduled."""
        return self._reconnect_timer is not None

    def initialize(self) -> None:
        """Open the first connection."""
        self.connect()

    def connect(self) -> None:
        """Start a connection attempt to the current server address."""
        with self._lock:
            if self._disposed:
                return
            self._cancel_reconnect()
            self._attempt_errored = False
            self.connect_attempts += 1
            # One connection at a time: retire the current socket first
            old_ws = self._ws
            self._ws = None

        if old_ws is not None:
            self._close_socket(old_ws)

        url = self.ws_url
        self._update_connection_status(ConnectionStatus.CONNECTING)
        logger.info(f"Connecting to {url}")

        try:
            ws = self._ws_factory(
                url,
                on_message=self._on_message,
                on_error=self._on_error,
                on_close=self._on_close,
            )
            with self._lock:
                # A concurrent connect() or dispose() may have run meanwhile
                if self._disposed:
                    stale = ws
                else:
                    stale, self._ws = self._ws, ws
            if stale is not None:
                self._close_socket(stale)
            if stale is ws:
                return
            self._ws_thread = threading.Thread(
                target=ws.run_forever,
                name="TireMonitorSocket",
                daemon=True,
            )
            self._ws_thread.start()
        except Exception as e:
            logger.error(f"Connection error: {e}")
            self._update_connection_status(ConnectionStatus.ERROR)
            self._schedule_reconnect()

    def reconnect(self) -> None:
        """Drop the current connection and connect again immediately."""
        self.connect()

    def dispose(self) -> None:
        """Close the connection and stop all callbacks and reconnects."""
        with self._lock:
            self._disposed = True
            self._cancel_reconnect()
            ws = self._ws
            self._ws = None
            self._tire_data_subscribers.clear()
            self._status_subscribers.clear()
            self._last_update_subscribers.clear()

        if ws is not None:
            self._close_socket(ws)

        logger.info(
            f"TireMonitorService disposed: "
            f"received={self.messages_received}, "
            f"dropped={self.messages_dropped}, "
            f"attempts={self.connect_attempts}"
        )

    def subscribe_tire_data(self, callback: TireDataCallback) -> Callable[[], None]:
        """Register for decoded readings. Returns an unsubscribe function."""
        return self._subscribe(self._tire_data_subscribers, callback)

    def subscribe_connection_status(self, callback: StatusCallback) -> Callable[[], None]:
        """Register for connection status changes. Returns an unsubscribe function."""
        return self._subscribe(self._status_subscribers, callback)

    def subscribe_last_update(self, callback: LastUpdateCallback) -> Callable[[], None]:
        """Register for message receive times. Returns an unsubscribe function."""
        return self._subscribe(self._last_update_subscribers, callback)

    def _subscribe(self, subscribers: list, callback: Callable) -> Callable[[], None]:
        with self._lock:
            subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in subscribers:
                    subscribers.remove(callback)

        return unsubscribe

    def _publish(self, subscribers: list, value: Any) -> None:
        with self._lock:
            targets = list(subscribers)
        for callback in targets:
            try:
                callback(value)
            except Exception as e:
                logger.error(f"Subscriber error: {e}")

    def _update_connection_status(self, status: ConnectionStatus) -> None:
        with self._lock:
            self.status = status
        self._publish(self._status_subscribers, status)

    def _on_message(self, ws: Any, message: str | bytes) -> None:
        if ws is not self._ws:
            return

        self._update_connection_status(ConnectionStatus.CONNECTED)

        try:
            readings = parse_snapshot(message)
        except TelemetryError as e:
            with self._lock:
                self.messages_dropped += 1
            logger.warning(f"Dropped telemetry message: {e}")
            return

        now = datetime.now()
        with self._lock:
            self.readings = readings
            self.last_update = now
            self.messages_received += 1

        self._publish(self._tire_data_subscribers, readings)
        self._publish(self._last_update_subscribers, now)

    def _on_error(self, ws: Any, error: Exception) -> None:
        with self._lock:
            if ws is not self._ws:
                return
            self._attempt_errored = True

        logger.error(f"WebSocket error: {error}")
        self._update_connection_status(ConnectionStatus.ERROR)
        self._schedule_reconnect()

    def _on_close(self, ws: Any, close_status_code: int | None, close_msg: str | None) -> None:
        with self._lock:
            if ws is not self._ws:
                return
            errored = self._attempt_errored

        logger.info(f"WebSocket connection closed (code={close_status_code})")
        if not errored:
            self._update_connection_status(ConnectionStatus.DISCONNECTED)
        self._schedule_reconnect()

    def _schedule_reconnect(self) -> None:
        """Schedule one reconnect after the fixed delay."""
        with self._lock:
            if self._disposed or self._reconnect_timer is not None:
                return
            timer = self._timer_factory(self.reconnect_delay, self._on_reconnect_timer)
            timer.daemon = True
            self._reconnect_timer = timer
            timer.start()

        logger.info(f"Reconnecting in {self.reconnect_delay:.0f}s")

    def _on_reconnect_timer(self) -> None:
        with self._lock:
            self._reconnect_timer = None
        self.connect()

    def _cancel_reconnect(self) -> None:
        # Caller holds self._lock
        if self._reconnect_timer is not None:
            self._reconnect_timer.cancel()
            self._reconnect_timer = None

    def _close_socket(self, ws: Any) -> None:
        try:
            ws.close()
        except Exception as e:
            logger.warning(f"Error closing WebSocket: {e}")
