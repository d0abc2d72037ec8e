"""
Display Pydantic schemas and the single display transform used by every
endpoint and event that carries a display.
"""
from datetime import datetime
from typing import List, Optional, Union
from uuid import UUID

from menuboard.models.display import Display
from menuboard.schemas.base import CamelModel, Name
from menuboard.schemas.item import ItemResponse


class DisplayCreate(CamelModel):
    name: Name
    current_menu: Optional[UUID] = None


class DisplayUpdate(CamelModel):
    name: Name
    current_menu: Optional[UUID] = None


class AssignMenuRequest(CamelModel):
    menu_id: Optional[UUID] = None


class PairRequest(CamelModel):
    pairing_code: Optional[str] = None


class MenuSummary(CamelModel):
    """A display's current menu flattened for the screen."""
    id: UUID
    name: str
    description: Optional[str] = None
    items: List[ItemResponse] = []


class DisplayResponse(CamelModel):
    id: UUID
    name: str
    pairing_code: str
    # Populated summary, bare menu id, or null
    current_menu: Union[MenuSummary, UUID, None] = None
    media_url: Optional[str] = None
    media_type: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PairResponse(CamelModel):
    message: str
    display_id: str
    display_name: str


class PairingCodeResponse(CamelModel):
    message: str
    pairing_code: str


def transform_display(display: Optional[Display], populate_menu: bool = True) -> Optional[DisplayResponse]:
    """
    Normalize a display for clients.

    With ``populate_menu`` the current menu is flattened to
    ``{id, name, description, items}``; otherwise only its id is passed
    through. A display without a menu always carries ``null``.
    """
    if display is None:
        return None

    current_menu: Union[MenuSummary, UUID, None] = None
    if display.current_menu_id is not None:
        if populate_menu and display.current_menu is not None:
            menu = display.current_menu
            current_menu = MenuSummary(
                id=menu.id,
                name=menu.name,
                description=menu.description,
                items=[ItemResponse.model_validate(item) for item in menu.items],
            )
        else:
            current_menu = display.current_menu_id

    return DisplayResponse(
        id=display.id,
        name=display.name,
        pairing_code=display.pairing_code,
        current_menu=current_menu,
        media_url=display.media_url,
        media_type=display.media_type,
        created_at=display.created_at,
        updated_at=display.updated_at,
    )
