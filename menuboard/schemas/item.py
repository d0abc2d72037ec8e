"""
Item Pydantic schemas for API request/response models.
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from menuboard.schemas.base import CamelModel, Name


class ItemCreate(CamelModel):
    """Request model for creating an item."""
    name: Name
    description: Optional[str] = None
    price: float = Field(ge=0)
    category: Name
    image_url: Optional[str] = None
    is_available: bool = True


class ItemUpdate(CamelModel):
    """Request model for replacing an item's fields. Availability is kept when omitted."""
    name: Name
    description: Optional[str] = None
    price: float = Field(ge=0)
    category: Name
    image_url: Optional[str] = None
    is_available: Optional[bool] = None


class ItemResponse(CamelModel):
    """Response model for a single item."""
    id: UUID
    restaurant_id: UUID
    name: str
    description: Optional[str] = None
    price: float
    category: str
    image_url: Optional[str] = None
    is_available: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ItemImageResponse(CamelModel):
    image_url: str
