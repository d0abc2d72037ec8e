"""
Socket.IO events through which display and dashboard clients join rooms.

Displays join by id (``join-display``) or, before pairing, by code
(``pair-display``). Dashboards join a restaurant or menu room with an
access token, either in the event data or in the connect ``auth`` payload.
Every join answers through the Socket.IO acknowledgement with
``{"ok": true, "room": ...}`` or ``{"ok": false, "error": ...}``.
"""
import logging
from typing import Any, Optional
from uuid import UUID

import socketio
from sqlalchemy.orm import sessionmaker
from starlette.concurrency import run_in_threadpool

from menuboard.core.security import user_id_from_token
from menuboard.db.session import get_session_factory
from menuboard.models.menu import Menu
from menuboard.models.restaurant import Restaurant
from menuboard.services.broadcast import (
    NAMESPACE,
    display_room,
    menu_room,
    pairing_room,
    restaurant_room,
)

logger = logging.getLogger(__name__)

JOIN_DISPLAY = "join-display"
PAIR_DISPLAY = "pair-display"
JOIN_RESTAURANT = "join-restaurant"
JOIN_MENU = "join-menu"


class JoinRefused(Exception):
    """A join message was malformed or not authorized; the connection stays open."""


def _field(data: Any, key: str) -> Any:
    if isinstance(data, dict):
        return data.get(key)
    return None


def _parse_uuid(value: Any, label: str) -> UUID:
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise JoinRefused(f"Invalid {label}")


def _check_owner(factory: sessionmaker, token: Any, restaurant_id: Optional[UUID], menu_id: Optional[UUID]) -> UUID:
    """Return the restaurant id the token's user may watch, or raise JoinRefused."""
    user_id = user_id_from_token(token) if isinstance(token, str) else None
    if not user_id:
        raise JoinRefused("Invalid or expired token")

    with factory() as db:
        if menu_id is not None:
            menu = db.get(Menu, menu_id)
            if menu is None:
                raise JoinRefused("Menu not found")
            restaurant = menu.restaurant
        else:
            restaurant = db.get(Restaurant, restaurant_id)
        if restaurant is None:
            raise JoinRefused("Restaurant not found")
        if str(restaurant.owner_id) != user_id:
            raise JoinRefused("Access denied")
        return restaurant.id


class SocketHandlers:
    """
    Registers the room-join events on a Socket.IO server.

    ``session_factory`` opens the sessions used for dashboard ownership
    checks; tests point it at their own database.
    """

    def __init__(self, sio: socketio.AsyncServer, session_factory: Optional[sessionmaker] = None):
        self.sio = sio
        self.session_factory = session_factory or get_session_factory()

        sio.on("connect", self.connect, namespace=NAMESPACE)
        sio.on("disconnect", self.disconnect, namespace=NAMESPACE)
        sio.on(JOIN_DISPLAY, self.join_display, namespace=NAMESPACE)
        sio.on(PAIR_DISPLAY, self.pair_display, namespace=NAMESPACE)
        sio.on(JOIN_RESTAURANT, self.join_restaurant, namespace=NAMESPACE)
        sio.on(JOIN_MENU, self.join_menu, namespace=NAMESPACE)

    async def connect(self, sid: str, environ: dict, auth: Any = None):
        token = _field(auth, "token")
        if isinstance(token, str):
            await self.sio.save_session(sid, {"token": token}, namespace=NAMESPACE)
        logger.info(f"Client connected: {sid}")

    async def disconnect(self, sid: str, *args):
        logger.info(f"Client disconnected: {sid}")

    async def _token(self, sid: str, data: Any) -> Any:
        token = _field(data, "token")
        if token is None:
            session = await self.sio.get_session(sid, namespace=NAMESPACE)
            token = session.get("token")
        return token

    async def room_for(self, sid: str, event: str, data: Any) -> str:
        """Work out which room a client message asks to join."""
        if event == JOIN_DISPLAY:
            display_id = data if not isinstance(data, dict) else data.get("displayId")
            return display_room(_parse_uuid(display_id, "display id"))

        if event == PAIR_DISPLAY:
            code = _field(data, "pairingCode")
            if not isinstance(code, str) or not code:
                raise JoinRefused("Pairing code is required")
            return pairing_room(code)

        if event == JOIN_RESTAURANT:
            restaurant_id = _parse_uuid(_field(data, "restaurantId"), "restaurant id")
            token = await self._token(sid, data)
            await run_in_threadpool(_check_owner, self.session_factory, token, restaurant_id, None)
            return restaurant_room(restaurant_id)

        if event == JOIN_MENU:
            menu_id = _parse_uuid(_field(data, "menuId"), "menu id")
            token = await self._token(sid, data)
            await run_in_threadpool(_check_owner, self.session_factory, token, None, menu_id)
            return menu_room(menu_id)

        raise JoinRefused(f"Unknown event: {event}")

    async def _join(self, sid: str, event: str, data: Any) -> dict:
        try:
            room = await self.room_for(sid, event, data)
        except JoinRefused as e:
            logger.warning(f"{sid} {event} refused: {e}")
            return {"ok": False, "error": str(e)}

        await self.sio.enter_room(sid, room, namespace=NAMESPACE)
        logger.info(f"{sid} joined {room}")
        return {"ok": True, "room": room}

    async def join_display(self, sid: str, data: Any = None) -> dict:
        return await self._join(sid, JOIN_DISPLAY, data)

    async def pair_display(self, sid: str, data: Any = None) -> dict:
        return await self._join(sid, PAIR_DISPLAY, data)

    async def join_restaurant(self, sid: str, data: Any = None) -> dict:
        return await self._join(sid, JOIN_RESTAURANT, data)

    async def join_menu(self, sid: str, data: Any = None) -> dict:
        return await self._join(sid, JOIN_MENU, data)
