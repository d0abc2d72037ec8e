"""
Room-scoped broadcast over the Socket.IO server.

A room is an opaque string key. Clients join rooms through the socket
handlers; ``publish`` emits an event to the members of one room at the
instant of the call. Nothing is buffered for clients that join later, so
clients fetch current state after joining.

Route handlers run in worker threads while the Socket.IO server lives on the
event loop, so emits are handed to that loop with
``asyncio.run_coroutine_threadsafe``. Emits scheduled in order are written
to each client's Engine.IO queue in the same order.
"""
import asyncio
import logging
from concurrent.futures import Future
from functools import partial
from typing import Any, List, Optional, Union

import socketio

logger = logging.getLogger(__name__)

NAMESPACE = "/"


def restaurant_room(restaurant_id) -> str:
    return f"restaurant-{restaurant_id}"


def menu_room(menu_id) -> str:
    return f"menu-{menu_id}"


def display_room(display_id) -> str:
    return f"display-{display_id}"


def pairing_room(pairing_code: str) -> str:
    return f"pairing-{pairing_code}"


def create_socket_server(cors_origins: List[str]) -> socketio.AsyncServer:
    """Socket.IO server for display and dashboard clients."""
    allowed: Union[str, List[str]] = "*" if "*" in cors_origins else cors_origins
    return socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=allowed,
        logger=False,
        engineio_logger=False,
    )


class Broadcaster:
    """
    Publishes events to Socket.IO rooms on behalf of request handlers.

    Bound to the server's event loop in the application lifespan and handed
    to routes through a dependency. Publishing never raises: a delivery
    problem is logged and the mutation that triggered it still succeeds.
    """

    def __init__(self, sio: socketio.AsyncServer, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.sio = sio
        self.loop = loop

    def publish(self, room: str, event: str, payload: Any) -> Optional[Future]:
        """
        Schedule ``event`` with ``payload`` for everyone currently in ``room``.

        Returns the future of the scheduled emit, or None when the broadcaster
        is not bound to a running loop. An empty room is not an error.
        """
        loop = self.loop
        if loop is None or loop.is_closed():
            logger.warning(f"Dropping {event} for {room}: broadcaster is not running")
            return None

        future = asyncio.run_coroutine_threadsafe(
            self.sio.emit(event, payload, to=room, namespace=NAMESPACE),
            loop,
        )
        future.add_done_callback(partial(self._report, event, room))
        logger.debug(f"Scheduled {event} for {room}")
        return future

    @staticmethod
    def _report(event: str, room: str, future: Future) -> None:
        if future.cancelled():
            logger.warning(f"Emit of {event} to {room} was cancelled")
            return
        error = future.exception()
        if error is not None:
            logger.warning(f"Failed to emit {event} to {room}: {error}")

    def connected_sids(self) -> List[str]:
        return [sid for sid, _ in self.sio.manager.get_participants(NAMESPACE, None)]

    def members(self, room: str) -> List[str]:
        return [sid for sid, _ in self.sio.manager.get_participants(NAMESPACE, room)]

    async def close(self) -> None:
        """Disconnect every client and stop accepting publishes."""
        self.loop = None
        sids = self.connected_sids()
        for sid in sids:
            try:
                await self.sio.disconnect(sid, namespace=NAMESPACE)
            except Exception as e:
                logger.warning(f"Error disconnecting {sid}: {e}")
        logger.info(f"Broadcaster closed ({len(sids)} client(s))")
