"""
Menu Pydantic schemas for API request/response models.
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from menuboard.schemas.base import CamelModel, Name
from menuboard.schemas.item import ItemResponse


class MenuCreate(CamelModel):
    """Request model for creating a menu. Item order is display order."""
    name: Name
    description: Optional[str] = None
    items: List[UUID] = Field(default_factory=list)


class MenuUpdate(CamelModel):
    """Request model for updating a menu. Omitted description/items are left unchanged."""
    name: Name
    description: Optional[str] = None
    items: Optional[List[UUID]] = None


class MenuResponse(CamelModel):
    """Response model for a menu with its items expanded in order."""
    id: UUID
    restaurant_id: UUID
    name: str
    description: Optional[str] = None
    items: List[ItemResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
