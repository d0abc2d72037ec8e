"""
Restaurant Pydantic schemas.
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from menuboard.schemas.base import CamelModel, Name
from menuboard.schemas.display import DisplayResponse
from menuboard.schemas.item import ItemResponse
from menuboard.schemas.menu import MenuResponse


class RestaurantUpdate(CamelModel):
    name: Name


class RestaurantResponse(CamelModel):
    id: UUID
    name: str
    owner_id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OwnerSummary(CamelModel):
    id: UUID
    email: str


class RestaurantDetail(CamelModel):
    """Restaurant with its owner and every collection expanded."""
    id: UUID
    name: str
    owner: OwnerSummary
    menus: List[MenuResponse] = []
    items: List[ItemResponse] = []
    displays: List[DisplayResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RestaurantStats(CamelModel):
    total_menus: int
    total_items: int
    total_displays: int
