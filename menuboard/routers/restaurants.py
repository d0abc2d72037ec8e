"""
Restaurant router: owner's restaurant details, rename and counts.
"""
from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from menuboard.core.deps import get_current_user, get_events, get_owned_restaurant
from menuboard.core.errors import NotFound
from menuboard.db.session import get_db
from menuboard.models.display import Display
from menuboard.models.item import Item
from menuboard.models.menu import Menu
from menuboard.models.restaurant import Restaurant
from menuboard.models.user import User
from menuboard.schemas.display import transform_display
from menuboard.schemas.item import ItemResponse
from menuboard.schemas.menu import MenuResponse
from menuboard.schemas.restaurant import (
    OwnerSummary,
    RestaurantDetail,
    RestaurantResponse,
    RestaurantStats,
    RestaurantUpdate,
)
from menuboard.services.events import MutationEvents

router = APIRouter(prefix="/restaurants", tags=["restaurants"])


def restaurant_detail(restaurant: Restaurant) -> RestaurantDetail:
    return RestaurantDetail(
        id=restaurant.id,
        name=restaurant.name,
        owner=OwnerSummary.model_validate(restaurant.owner),
        menus=[MenuResponse.model_validate(menu) for menu in restaurant.menus],
        items=[ItemResponse.model_validate(item) for item in restaurant.items],
        displays=[transform_display(display) for display in restaurant.displays],
        created_at=restaurant.created_at,
        updated_at=restaurant.updated_at,
    )


@router.get("/my/restaurant", response_model=RestaurantDetail)
def get_my_restaurant(current_user: User = Depends(get_current_user)):
    """
    Get the current user's restaurant.
    """
    if current_user.restaurant is None:
        raise NotFound("No restaurant found for this user")
    return restaurant_detail(current_user.restaurant)


@router.get("/{restaurant_id}", response_model=RestaurantDetail)
def get_restaurant(restaurant: Restaurant = Depends(get_owned_restaurant)):
    return restaurant_detail(restaurant)


@router.put("/{restaurant_id}", response_model=RestaurantResponse)
def update_restaurant(
    restaurant_data: RestaurantUpdate,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
    events: MutationEvents = Depends(get_events),
):
    restaurant.name = restaurant_data.name
    db.commit()
    db.refresh(restaurant)

    response = RestaurantResponse.model_validate(restaurant)
    events.restaurant_updated(restaurant.id, response.to_payload())
    return response


@router.get("/{restaurant_id}/stats", response_model=RestaurantStats)
def get_restaurant_stats(
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    def count(model) -> int:
        return db.execute(
            select(func.count()).select_from(model).where(model.restaurant_id == restaurant.id)
        ).scalar_one()

    return RestaurantStats(
        total_menus=count(Menu),
        total_items=count(Item),
        total_displays=count(Display),
    )
