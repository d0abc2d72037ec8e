"""
Menus router: CRUD for a restaurant's menus and their ordered item lists.
"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from menuboard.core.deps import get_current_user, get_events, get_owned_restaurant, require_owner
from menuboard.core.errors import NotFound, ValidationFailed
from menuboard.db.session import get_db
from menuboard.models.item import Item
from menuboard.models.menu import Menu
from menuboard.models.restaurant import Restaurant
from menuboard.models.user import User
from menuboard.schemas.menu import MenuCreate, MenuResponse, MenuUpdate
from menuboard.services.events import MutationEvents

router = APIRouter(prefix="/menus", tags=["menus"])


def get_owned_menu(db: Session, menu_id: UUID, user: User) -> Menu:
    """Get a menu the user owns, raise 404/403 otherwise."""
    menu = db.get(Menu, menu_id)
    if not menu:
        raise NotFound("Menu not found")
    require_owner(menu.restaurant, user)
    return menu


def resolve_items(db: Session, restaurant: Restaurant, item_ids: List[UUID]) -> List[Item]:
    """
    Load items by id, in the requested order.

    Every id must name an item of ``restaurant``; repeated ids are kept.
    """
    if not item_ids:
        return []
    found = {
        item.id: item
        for item in db.execute(
            select(Item).where(Item.id.in_(set(item_ids)), Item.restaurant_id == restaurant.id)
        ).scalars()
    }
    missing = [str(item_id) for item_id in item_ids if item_id not in found]
    if missing:
        raise ValidationFailed(
            "Unknown items",
            message=f"Items not found in this restaurant: {', '.join(missing)}",
        )
    return [found[item_id] for item_id in item_ids]


@router.post("/restaurants/{restaurant_id}", response_model=MenuResponse, status_code=status.HTTP_201_CREATED)
def create_menu(
    menu_data: MenuCreate,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
    events: MutationEvents = Depends(get_events),
):
    """Create a menu for a restaurant."""
    menu = Menu(
        restaurant_id=restaurant.id,
        name=menu_data.name,
        description=menu_data.description,
    )
    menu.set_items(resolve_items(db, restaurant, menu_data.items))
    db.add(menu)
    db.commit()
    db.refresh(menu)

    response = MenuResponse.model_validate(menu)
    events.menu_created(restaurant.id, response.to_payload())
    return response


@router.get("/restaurants/{restaurant_id}", response_model=List[MenuResponse])
def list_menus(restaurant: Restaurant = Depends(get_owned_restaurant)):
    """List all menus of a restaurant with their items."""
    return [MenuResponse.model_validate(menu) for menu in restaurant.menus]


@router.get("/{menu_id}", response_model=MenuResponse)
def get_menu(
    menu_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return MenuResponse.model_validate(get_owned_menu(db, menu_id, current_user))


@router.put("/{menu_id}", response_model=MenuResponse)
def update_menu(
    menu_id: UUID,
    menu_data: MenuUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    events: MutationEvents = Depends(get_events),
):
    """
    Update a menu's name, description and item list.

    ``description`` and ``items`` are left unchanged when omitted; an empty
    ``items`` list clears the menu.
    """
    menu = get_owned_menu(db, menu_id, current_user)

    update_dict = menu_data.model_dump(exclude_unset=True)
    menu.name = menu_data.name
    if "description" in update_dict:
        menu.description = menu_data.description
    if menu_data.items is not None:
        menu.set_items(resolve_items(db, menu.restaurant, menu_data.items))

    db.commit()
    db.refresh(menu)

    response = MenuResponse.model_validate(menu)
    events.menu_updated(menu.id, response.to_payload())
    return response


@router.delete("/{menu_id}")
def delete_menu(
    menu_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    events: MutationEvents = Depends(get_events),
):
    """Delete a menu. Displays showing it are left without a menu."""
    menu = get_owned_menu(db, menu_id, current_user)

    db.delete(menu)
    db.commit()

    events.menu_deleted(menu_id)
    return {"message": "Menu deleted successfully"}
