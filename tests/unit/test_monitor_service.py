"""
Unit tests for TireMonitorService.

The WebSocket and the reconnect timer are replaced by fakes, so every
callback is driven synchronously by the test.
"""

import json
from datetime import datetime

import pytest

from tiremonitor.core.reading import ConnectionStatus, TireReading


@pytest.fixture
def events(service):
    """Everything the service publishes, in order."""
    recorded = {"status": [], "data": [], "last_update": []}
    service.subscribe_connection_status(recorded["status"].append)
    service.subscribe_tire_data(recorded["data"].append)
    service.subscribe_last_update(recorded["last_update"].append)
    return recorded


class TestConnect:
    """Tests for opening connections."""

    def test_ws_url_uses_settings(self, service, settings):
        assert service.ws_url == "ws://192.168.0.100:8080"
        settings.set_server_ip("10.0.0.5")
        assert service.ws_url == "ws://10.0.0.5:8080"

    def test_no_connection_before_initialize(self, service, network):
        assert network.sockets == []
        assert service.status == ConnectionStatus.DISCONNECTED

    def test_initialize_connects(self, service, network, events):
        service.initialize()

        assert len(network.sockets) == 1
        assert network.socket.url == "ws://192.168.0.100:8080"
        assert events["status"] == [ConnectionStatus.CONNECTING]
        assert service.connect_attempts == 1

    def test_connect_exception_schedules_reconnect(self, service, network, events):
        network.fail_connect = OSError("network unreachable")
        service.initialize()

        assert events["status"] == [ConnectionStatus.CONNECTING, ConnectionStatus.ERROR]
        assert len(network.active_timers) == 1
        assert network.active_timers[0].interval == 5.0
        assert network.active_timers[0].daemon is True


class TestMessages:
    """Tests for message decoding and fan-out."""

    def test_message_publishes_readings(self, service, network, events, sample_payload):
        service.initialize()
        network.socket.receive(sample_payload)

        assert events["status"][-1] == ConnectionStatus.CONNECTED
        assert len(events["data"]) == 1
        readings = events["data"][0]
        assert readings["Rear"] == TireReading(position="Rear", pressure=85.0, wear=0.8)
        assert len(events["last_update"]) == 1
        assert isinstance(events["last_update"][0], datetime)

    def test_latest_values_kept(self, service, network, sample_payload):
        service.initialize()
        network.socket.receive(sample_payload)

        assert service.status == ConnectionStatus.CONNECTED
        assert list(service.readings) == ["Front", "Rear"]
        assert service.last_update is not None
        assert service.messages_received == 1

    def test_each_message_replaces_snapshot(self, service, network, events, sample_payload):
        service.initialize()
        network.socket.receive(sample_payload)
        network.socket.receive(
            json.dumps({"Rear": {"position": "Rear", "pressure": 60, "wear": 0.85}})
        )

        assert list(events["data"][-1]) == ["Rear"]
        assert service.readings["Rear"].pressure == 60.0
        assert len(events["last_update"]) == 2

    def test_connected_published_per_message(self, service, network, events, sample_payload):
        service.initialize()
        network.socket.receive(sample_payload)
        network.socket.receive(sample_payload)

        assert events["status"].count(ConnectionStatus.CONNECTED) == 2

    def test_invalid_message_dropped(self, service, network, events):
        service.initialize()
        network.socket.receive("not json")

        assert events["status"][-1] == ConnectionStatus.CONNECTED
        assert events["data"] == []
        assert events["last_update"] == []
        assert service.messages_dropped == 1
        assert network.active_timers == []

    @pytest.mark.parametrize(
        "message",
        [
            '{"Front": {"position": "Front", "pressure": ' + "9" * 400 + ', "wear": 0.1}}',
            '{"Front": {"position": "Front", "pressure": ' + "1" * 5000 + ', "wear": 0.1}}',
            "[" * 100000,
        ],
        ids=["float-overflow", "digit-limit", "deep-nesting"],
    )
    def test_oversized_message_dropped(self, service, network, events, message):
        service.initialize()
        network.socket.receive(message)

        assert service.messages_dropped == 1
        assert events["data"] == []
        assert service.status == ConnectionStatus.CONNECTED
        assert network.active_timers == []

    def test_failing_subscriber_does_not_block_others(self, service, network, sample_payload):
        received = []

        def broken(readings):
            raise RuntimeError("boom")

        service.subscribe_tire_data(broken)
        service.subscribe_tire_data(received.append)
        service.initialize()
        network.socket.receive(sample_payload)

        assert len(received) == 1

    def test_unsubscribe(self, service, network, sample_payload):
        received = []
        unsubscribe = service.subscribe_tire_data(received.append)
        unsubscribe()
        unsubscribe()  # second call is harmless

        service.initialize()
        network.socket.receive(sample_payload)

        assert received == []


class TestReconnect:
    """Tests for the fixed-delay reconnect policy."""

    def test_error_reconnects_after_fixed_delay(self, service, network, events):
        service.initialize()
        network.socket.fail(ConnectionRefusedError("refused"))

        assert events["status"][-1] == ConnectionStatus.ERROR
        assert [t.interval for t in network.active_timers] == [5.0]

    def test_close_reconnects(self, service, network, events):
        service.initialize()
        network.socket.drop()

        assert events["status"][-1] == ConnectionStatus.DISCONNECTED
        assert len(network.active_timers) == 1

    def test_error_then_close_schedules_once(self, service, network, events):
        service.initialize()
        network.socket.fail(ConnectionResetError("reset"))
        network.socket.drop()

        assert events["status"][-1] == ConnectionStatus.ERROR
        assert ConnectionStatus.DISCONNECTED not in events["status"]
        assert len(network.active_timers) == 1

    def test_timer_opens_new_connection(self, service, network, events):
        service.initialize()
        network.socket.drop()
        network.active_timers[0].fire()

        assert len(network.sockets) == 2
        assert events["status"][-1] == ConnectionStatus.CONNECTING
        assert not service.reconnect_pending

    def test_retries_forever_without_backoff(self, service, network):
        network.fail_connect = OSError("down")
        service.initialize()

        for _ in range(10):
            network.active_timers[-1].fire()

        intervals = {t.interval for t in network.timers}
        assert intervals == {5.0}
        assert service.connect_attempts == 11

    def test_reconnect_uses_updated_server(self, service, network, settings):
        service.initialize()
        settings.set_server_ip("10.0.0.9")
        network.socket.drop()
        network.active_timers[0].fire()

        assert network.socket.url == "ws://10.0.0.9:8080"

    def test_manual_reconnect(self, service, network, settings):
        service.initialize()
        old = network.socket
        settings.set_server_ip("10.0.0.9")
        service.reconnect()

        assert old.closed
        assert network.socket is not old
        assert network.socket.url == "ws://10.0.0.9:8080"

    def test_manual_reconnect_cancels_pending_timer(self, service, network):
        service.initialize()
        network.socket.drop()
        timer = network.active_timers[0]
        service.reconnect()

        assert timer.cancelled
        assert network.active_timers == []

    def test_error_without_close_retires_socket(self, service, network):
        service.initialize()
        old = network.socket
        old.fail(ConnectionResetError("reset"))
        network.active_timers[0].fire()

        assert old.closed
        assert len(network.sockets) == 2
        assert [ws for ws in network.sockets if not ws.closed] == [network.socket]

    def test_connect_while_connected_closes_previous(self, service, network, sample_payload):
        service.initialize()
        first = network.socket
        first.receive(sample_payload)
        service.connect()

        assert first.closed
        assert not network.socket.closed
        assert network.socket is not first

    def test_status_consistent_after_error(self, service, network):
        service.initialize()
        network.socket.fail(ConnectionResetError("reset"))
        network.socket.drop()

        assert service.status == ConnectionStatus.ERROR
        network.active_timers[0].fire()
        network.socket.drop()
        assert service.status == ConnectionStatus.DISCONNECTED

    def test_old_socket_callbacks_ignored(self, service, network, events, sample_payload):
        service.initialize()
        old = network.socket
        service.reconnect()
        status_count = len(events["status"])

        old.drop()
        old.receive(sample_payload)

        assert len(events["status"]) == status_count
        assert events["data"] == []
        assert network.active_timers == []


class TestDispose:
    """Tests for shutdown."""

    def test_dispose_closes_socket(self, service, network):
        service.initialize()
        service.dispose()

        assert network.socket.closed

    def test_dispose_cancels_pending_reconnect(self, service, network):
        service.initialize()
        network.socket.drop()
        timer = network.active_timers[0]
        service.dispose()

        assert timer.cancelled

    def test_nothing_after_dispose(self, service, network, events, sample_payload):
        service.initialize()
        ws = network.socket
        service.dispose()
        status_count = len(events["status"])

        ws.receive(sample_payload)
        ws.drop()
        service.connect()

        assert len(events["status"]) == status_count
        assert events["data"] == []
        assert len(network.sockets) == 1
        assert network.active_timers == []

    def test_dispose_without_connection(self, service):
        service.dispose()
