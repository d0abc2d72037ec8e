"""
Tests for publishing to Socket.IO rooms from request handlers.
"""
import asyncio
import logging

import socketio

from menuboard.services.broadcast import (
    Broadcaster,
    create_socket_server,
    display_room,
    menu_room,
    pairing_room,
    restaurant_room,
)


class RecordingServer:
    """Stands in for the Socket.IO server; keeps every emit."""

    def __init__(self, participants=()):
        self.emitted = []
        self.disconnected = []
        self.manager = self
        self.participants = list(participants)

    async def emit(self, event, data, to=None, namespace=None):
        self.emitted.append((to, event, data))

    async def disconnect(self, sid, namespace=None):
        if sid == "broken":
            raise ConnectionError("socket gone")
        self.disconnected.append(sid)

    def get_participants(self, namespace, room):
        return iter(self.participants)


class FailingServer(RecordingServer):
    async def emit(self, event, data, to=None, namespace=None):
        raise ConnectionError("transport down")


class TestRoomKeys:
    def test_room_names(self):
        assert restaurant_room("r1") == "restaurant-r1"
        assert menu_room("m1") == "menu-m1"
        assert display_room("d1") == "display-d1"
        assert pairing_room("ABC123") == "pairing-ABC123"


class TestSocketServer:
    def test_wildcard_origins(self):
        sio = create_socket_server(["*"])

        assert isinstance(sio, socketio.AsyncServer)
        assert sio.eio.cors_allowed_origins == "*"

    def test_listed_origins(self):
        sio = create_socket_server(["http://localhost:3000"])

        assert sio.eio.cors_allowed_origins == ["http://localhost:3000"]


class TestPublish:
    """Tests for handing emits to the server loop."""

    def test_publish_from_worker_thread_keeps_order(self):
        server = RecordingServer()

        async def scenario():
            broadcaster = Broadcaster(server, asyncio.get_running_loop())

            def handler():
                return [broadcaster.publish("display-1", "menu-assigned", {"n": n}) for n in range(50)]

            futures = await asyncio.to_thread(handler)
            await asyncio.gather(*(asyncio.wrap_future(future) for future in futures))

        asyncio.run(scenario())

        assert [data["n"] for _, _, data in server.emitted] == list(range(50))
        assert {room for room, _, _ in server.emitted} == {"display-1"}

    def test_publish_from_event_loop(self):
        server = RecordingServer()

        async def scenario():
            broadcaster = Broadcaster(server, asyncio.get_running_loop())
            await asyncio.wrap_future(broadcaster.publish("menu-1", "menu-updated", {"menu": {}}))

        asyncio.run(scenario())

        assert server.emitted == [("menu-1", "menu-updated", {"menu": {}})]

    def test_unbound_publish_is_dropped(self, caplog):
        server = RecordingServer()
        broadcaster = Broadcaster(server)

        with caplog.at_level(logging.WARNING):
            assert broadcaster.publish("menu-1", "menu-updated", {}) is None

        assert server.emitted == []
        assert "broadcaster is not running" in caplog.text

    def test_emit_failure_is_logged(self, caplog):
        async def scenario():
            broadcaster = Broadcaster(FailingServer(), asyncio.get_running_loop())
            future = broadcaster.publish("display-1", "display-updated", {})
            await asyncio.wait([asyncio.wrap_future(future)])

        with caplog.at_level(logging.WARNING):
            asyncio.run(scenario())

        assert "Failed to emit display-updated to display-1: transport down" in caplog.text


class TestClose:
    def test_close_disconnects_every_client(self, caplog):
        server = RecordingServer(participants=[("a", "eio-a"), ("broken", "eio-b"), ("c", "eio-c")])

        async def scenario():
            broadcaster = Broadcaster(server, asyncio.get_running_loop())
            await broadcaster.close()
            return broadcaster

        with caplog.at_level(logging.WARNING):
            broadcaster = asyncio.run(scenario())

        assert server.disconnected == ["a", "c"]
        assert "Error disconnecting broken" in caplog.text
        assert broadcaster.loop is None

    def test_publish_after_close_is_dropped(self):
        server = RecordingServer()

        async def scenario():
            broadcaster = Broadcaster(server, asyncio.get_running_loop())
            await broadcaster.close()
            return broadcaster.publish("display-1", "display-updated", {})

        assert asyncio.run(scenario()) is None
        assert server.emitted == []

    def test_close_without_clients(self):
        broadcaster = Broadcaster(create_socket_server(["*"]))

        asyncio.run(broadcaster.close())

        assert broadcaster.connected_sids() == []
