"""
Items router for creating, editing, toggling and illustrating menu items.
"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from menuboard.core.config import get_settings
from menuboard.core.deps import (
    get_current_user,
    get_events,
    get_media_storage,
    get_owned_restaurant,
    require_owner,
)
from menuboard.core.errors import NotFound
from menuboard.db.session import get_db
from menuboard.models.item import Item
from menuboard.models.restaurant import Restaurant
from menuboard.models.user import User
from menuboard.schemas.item import ItemCreate, ItemImageResponse, ItemResponse, ItemUpdate
from menuboard.services.events import MutationEvents
from menuboard.services.media import MediaStorage

router = APIRouter(prefix="/items", tags=["items"])
settings = get_settings()


def get_owned_item(db: Session, item_id: UUID, user: User) -> Item:
    """Get an item through its restaurant's ownership, raise 404/403 otherwise."""
    item = db.get(Item, item_id)
    if not item:
        raise NotFound("Item not found")
    require_owner(item.restaurant, user)
    return item


@router.post("/restaurants/{restaurant_id}", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
def create_item(
    item_data: ItemCreate,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
    events: MutationEvents = Depends(get_events),
):
    item = Item(restaurant_id=restaurant.id, **item_data.model_dump())
    db.add(item)
    db.commit()
    db.refresh(item)

    response = ItemResponse.model_validate(item)
    events.item_created(restaurant.id, response.to_payload())
    return response


@router.get("/restaurants/{restaurant_id}", response_model=List[ItemResponse])
def list_items(
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    """List a restaurant's items, newest first."""
    query = (
        select(Item)
        .where(Item.restaurant_id == restaurant.id)
        .order_by(Item.created_at.desc())
    )
    return [ItemResponse.model_validate(item) for item in db.execute(query).scalars().all()]


@router.put("/{item_id}", response_model=ItemResponse)
def update_item(
    item_id: UUID,
    item_data: ItemUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    events: MutationEvents = Depends(get_events),
):
    item = get_owned_item(db, item_id, current_user)

    update_dict = item_data.model_dump()
    if update_dict["is_available"] is None:
        update_dict.pop("is_available")
    for field, value in update_dict.items():
        setattr(item, field, value)

    db.commit()
    db.refresh(item)

    response = ItemResponse.model_validate(item)
    events.item_updated(item.restaurant_id, response.to_payload())
    return response


@router.patch("/{item_id}/toggle", response_model=ItemResponse)
def toggle_item_availability(
    item_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    events: MutationEvents = Depends(get_events),
):
    """Flip an item between available and sold out."""
    item = get_owned_item(db, item_id, current_user)

    item.is_available = not item.is_available
    db.commit()
    db.refresh(item)

    events.item_availability_changed(item.restaurant_id, item.id, item.is_available)
    return ItemResponse.model_validate(item)


@router.delete("/{item_id}")
def delete_item(
    item_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    events: MutationEvents = Depends(get_events),
):
    """Delete an item; it also disappears from every menu listing it."""
    item = get_owned_item(db, item_id, current_user)
    restaurant_id = item.restaurant_id

    db.delete(item)
    db.commit()

    events.item_deleted(restaurant_id, item_id)
    return {"message": "Item deleted successfully"}


@router.post("/{item_id}/upload-image", response_model=ItemImageResponse)
async def upload_item_image(
    item_id: UUID,
    image: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    events: MutationEvents = Depends(get_events),
    storage: MediaStorage = Depends(get_media_storage),
):
    """Attach an image (image/* only, 5MB max) to an item."""
    item = get_owned_item(db, item_id, current_user)

    image_url = await storage.save(
        image,
        prefix="item",
        max_bytes=settings.ITEM_IMAGE_MAX_BYTES,
        allowed_kinds={"image"},
    )
    previous_url = item.image_url
    item.image_url = image_url
    db.commit()
    db.refresh(item)
    storage.discard(previous_url)

    events.item_updated(item.restaurant_id, ItemResponse.model_validate(item).to_payload())
    return ItemImageResponse(image_url=image_url)
