"""
Displays router: screen management for owners plus the public pairing
endpoints used by display clients.
"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from menuboard.core.config import get_settings
from menuboard.core.deps import (
    get_current_user,
    get_events,
    get_media_storage,
    get_owned_restaurant,
    require_owner,
)
from menuboard.core.errors import NotFound, ValidationFailed
from menuboard.db.session import get_db
from menuboard.models.display import Display
from menuboard.models.menu import Menu
from menuboard.models.restaurant import Restaurant
from menuboard.models.user import User
from menuboard.schemas.display import (
    AssignMenuRequest,
    DisplayCreate,
    DisplayResponse,
    DisplayUpdate,
    PairingCodeResponse,
    PairRequest,
    PairResponse,
    transform_display,
)
from menuboard.services.events import MutationEvents
from menuboard.services.media import MediaStorage, media_type_for
from menuboard.services.pairing import PairingCodeService

router = APIRouter(prefix="/displays", tags=["displays"])
settings = get_settings()


def get_owned_display(db: Session, display_id: UUID, user: User) -> Display:
    """Get a display through its restaurant's ownership, raise 404/403 otherwise."""
    display = db.get(Display, display_id)
    if not display:
        raise NotFound("Display not found")
    require_owner(display.restaurant, user)
    return display


def get_restaurant_menu(db: Session, restaurant_id: UUID, menu_id: UUID) -> Menu:
    """A menu may only be shown on displays of the restaurant that owns it."""
    menu = db.get(Menu, menu_id)
    if not menu or menu.restaurant_id != restaurant_id:
        raise NotFound("Menu not found")
    return menu


@router.post("/restaurants/{restaurant_id}", response_model=DisplayResponse, status_code=status.HTTP_201_CREATED)
def create_display(
    display_data: DisplayCreate,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
    events: MutationEvents = Depends(get_events),
):
    """Create a display; its pairing code is generated before the insert."""
    if display_data.current_menu is not None:
        get_restaurant_menu(db, restaurant.id, display_data.current_menu)

    pairing = PairingCodeService(db)
    display = Display(
        restaurant_id=restaurant.id,
        name=display_data.name,
        current_menu_id=display_data.current_menu,
    )
    pairing.assign(display)
    db.add(display)
    pairing.commit()
    db.refresh(display)

    response = transform_display(display, populate_menu=False)
    events.display_created(restaurant.id, response.to_payload())
    return response


@router.get("/restaurants/{restaurant_id}", response_model=List[DisplayResponse])
def list_displays(restaurant: Restaurant = Depends(get_owned_restaurant)):
    return [transform_display(display) for display in restaurant.displays]


@router.post("/pair", response_model=PairResponse)
def pair_display(
    pair_data: PairRequest,
    db: Session = Depends(get_db),
    events: MutationEvents = Depends(get_events),
):
    """
    Resolve a pairing code typed on a dashboard and tell the waiting
    display client which display it is.

    Public: the display has no credentials of its own.
    """
    if not pair_data.pairing_code:
        raise ValidationFailed("Pairing code is required")

    display = PairingCodeService(db).resolve(pair_data.pairing_code)
    events.display_paired(pair_data.pairing_code, display.id, display.name)

    return PairResponse(
        message="Display paired successfully",
        display_id=str(display.id),
        display_name=display.name,
    )


@router.get("/pair/{pairing_code}", response_model=DisplayResponse)
def get_display_by_pairing_code(pairing_code: str, db: Session = Depends(get_db)):
    """Public lookup used by display clients holding only their code."""
    display = PairingCodeService(db).resolve(pairing_code)
    return transform_display(display)


@router.get("/{display_id}", response_model=DisplayResponse)
def get_display(
    display_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return transform_display(get_owned_display(db, display_id, current_user))


@router.put("/{display_id}", response_model=DisplayResponse)
def update_display(
    display_id: UUID,
    display_data: DisplayUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    events: MutationEvents = Depends(get_events),
):
    display = get_owned_display(db, display_id, current_user)

    update_dict = display_data.model_dump(exclude_unset=True)
    display.name = display_data.name
    if "current_menu" in update_dict:
        if display_data.current_menu is not None:
            get_restaurant_menu(db, display.restaurant_id, display_data.current_menu)
        display.current_menu_id = display_data.current_menu

    db.commit()
    db.refresh(display)

    response = transform_display(display, populate_menu=False)
    events.display_updated(display.id, response.to_payload())
    return response


@router.patch("/{display_id}/assign-menu", response_model=DisplayResponse)
def assign_menu(
    display_id: UUID,
    assignment: AssignMenuRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    events: MutationEvents = Depends(get_events),
):
    """Show a menu on a display, or clear it with ``menuId: null``."""
    display = get_owned_display(db, display_id, current_user)

    if assignment.menu_id is not None:
        get_restaurant_menu(db, display.restaurant_id, assignment.menu_id)
    display.current_menu_id = assignment.menu_id
    db.commit()
    db.refresh(display)

    events.menu_assigned(display.id, assignment.menu_id)
    return transform_display(display)


@router.post("/{display_id}/upload-media", response_model=DisplayResponse)
async def upload_display_media(
    display_id: UUID,
    media: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    events: MutationEvents = Depends(get_events),
    storage: MediaStorage = Depends(get_media_storage),
):
    """Attach an override image or video (50MB max) to a display."""
    display = get_owned_display(db, display_id, current_user)

    media_url = await storage.save(
        media,
        prefix="media",
        max_bytes=settings.DISPLAY_MEDIA_MAX_BYTES,
        allowed_kinds={"image", "video"},
    )
    previous_url = display.media_url
    display.set_media(media_url, media_type_for(media.content_type))
    db.commit()
    db.refresh(display)
    storage.discard(previous_url)

    events.media_uploaded(display.id, display.media_url, display.media_type)
    return transform_display(display, populate_menu=False)


@router.delete("/{display_id}/media", response_model=DisplayResponse)
def remove_display_media(
    display_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    events: MutationEvents = Depends(get_events),
    storage: MediaStorage = Depends(get_media_storage),
):
    display = get_owned_display(db, display_id, current_user)

    previous_url = display.media_url
    display.clear_media()
    db.commit()
    db.refresh(display)
    storage.discard(previous_url)

    events.media_removed(display.id)
    return transform_display(display, populate_menu=False)


@router.patch("/{display_id}/regenerate-pairing-code", response_model=PairingCodeResponse)
def regenerate_pairing_code(
    display_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Issue a new pairing code; the old one stops working immediately."""
    display = get_owned_display(db, display_id, current_user)
    new_code = PairingCodeService(db).rotate(display)
    return PairingCodeResponse(message="New pairing code generated", pairing_code=new_code)


@router.delete("/{display_id}")
def delete_display(
    display_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    events: MutationEvents = Depends(get_events),
    storage: MediaStorage = Depends(get_media_storage),
):
    """Delete a display; it leaves its restaurant's display list in the same commit."""
    display = get_owned_display(db, display_id, current_user)
    media_url = display.media_url

    db.delete(display)
    db.commit()
    storage.discard(media_url)

    events.display_deleted(display_id)
    return {"message": "Display deleted successfully"}
