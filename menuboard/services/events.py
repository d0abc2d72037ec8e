"""
Mapping from successful mutations to the room and event each one publishes.

Dashboards and display clients derive room keys on their own, so the room
and event name for every operation are fixed here and nowhere else.
"""
import logging
from typing import Any, Optional
from uuid import UUID

from menuboard.services.broadcast import (
    Broadcaster,
    display_room,
    menu_room,
    pairing_room,
    restaurant_room,
)

logger = logging.getLogger(__name__)

MENU_CREATED = "menu-created"
MENU_UPDATED = "menu-updated"
MENU_DELETED = "menu-deleted"
ITEM_CREATED = "item-created"
ITEM_UPDATED = "item-updated"
ITEM_AVAILABILITY_CHANGED = "item-availability-changed"
ITEM_DELETED = "item-deleted"
DISPLAY_CREATED = "display-created"
DISPLAY_UPDATED = "display-updated"
MENU_ASSIGNED = "menu-assigned"
MEDIA_UPLOADED = "media-uploaded"
MEDIA_REMOVED = "media-removed"
DISPLAY_DELETED = "display-deleted"
DISPLAY_PAIRED = "display-paired"
RESTAURANT_UPDATED = "restaurant-updated"


def _id(value: Optional[UUID]) -> Optional[str]:
    return str(value) if value is not None else None


class MutationEvents:
    """
    Publishes the event for each state change.

    Called after the change is committed. Publishing never raises: the
    mutation already succeeded, so a delivery problem is only logged.
    """

    def __init__(self, broadcaster: Broadcaster):
        self.broadcaster = broadcaster

    def _emit(self, room: str, event: str, payload: dict[str, Any]) -> None:
        try:
            self.broadcaster.publish(room, event, payload)
        except Exception as e:
            logger.warning(f"Failed to publish {event} to {room}: {e}")

    # Menus

    def menu_created(self, restaurant_id: UUID, menu: dict) -> None:
        self._emit(restaurant_room(restaurant_id), MENU_CREATED, {"menu": menu})

    def menu_updated(self, menu_id: UUID, menu: dict) -> None:
        self._emit(menu_room(menu_id), MENU_UPDATED, {"menu": menu})

    def menu_deleted(self, menu_id: UUID) -> None:
        self._emit(menu_room(menu_id), MENU_DELETED, {"menuId": _id(menu_id)})

    # Items

    def item_created(self, restaurant_id: UUID, item: dict) -> None:
        self._emit(restaurant_room(restaurant_id), ITEM_CREATED, {"item": item})

    def item_updated(self, restaurant_id: UUID, item: dict) -> None:
        self._emit(restaurant_room(restaurant_id), ITEM_UPDATED, {"item": item})

    def item_availability_changed(self, restaurant_id: UUID, item_id: UUID, is_available: bool) -> None:
        self._emit(
            restaurant_room(restaurant_id),
            ITEM_AVAILABILITY_CHANGED,
            {"itemId": _id(item_id), "isAvailable": is_available},
        )

    def item_deleted(self, restaurant_id: UUID, item_id: UUID) -> None:
        self._emit(restaurant_room(restaurant_id), ITEM_DELETED, {"itemId": _id(item_id)})

    # Displays

    def display_created(self, restaurant_id: UUID, display: dict) -> None:
        self._emit(restaurant_room(restaurant_id), DISPLAY_CREATED, {"display": display})

    def display_updated(self, display_id: UUID, display: dict) -> None:
        self._emit(display_room(display_id), DISPLAY_UPDATED, {"display": display})

    def menu_assigned(self, display_id: UUID, menu_id: Optional[UUID]) -> None:
        self._emit(
            display_room(display_id),
            MENU_ASSIGNED,
            {"displayId": _id(display_id), "menuId": _id(menu_id)},
        )

    def media_uploaded(self, display_id: UUID, media_url: str, media_type: str) -> None:
        self._emit(
            display_room(display_id),
            MEDIA_UPLOADED,
            {"displayId": _id(display_id), "mediaUrl": media_url, "mediaType": media_type},
        )

    def media_removed(self, display_id: UUID) -> None:
        self._emit(display_room(display_id), MEDIA_REMOVED, {"displayId": _id(display_id)})

    def display_deleted(self, display_id: UUID) -> None:
        self._emit(display_room(display_id), DISPLAY_DELETED, {"displayId": _id(display_id)})

    def display_paired(self, pairing_code: str, display_id: UUID, display_name: str) -> None:
        self._emit(
            pairing_room(pairing_code),
            DISPLAY_PAIRED,
            {"displayId": _id(display_id), "displayName": display_name},
        )

    # Restaurant

    def restaurant_updated(self, restaurant_id: UUID, restaurant: dict) -> None:
        self._emit(restaurant_room(restaurant_id), RESTAURANT_UPDATED, {"restaurant": restaurant})
