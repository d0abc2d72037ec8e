"""
Auth-related Pydantic schemas for request/response validation.
"""
from typing import List
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from menuboard.schemas.base import CamelModel, Name


class UserRegister(CamelModel):
    """Schema for user registration request."""
    email: EmailStr
    password: str = Field(min_length=6)
    restaurant_name: Name

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserLogin(CamelModel):
    """Schema for user login request."""
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class RestaurantRef(CamelModel):
    """Restaurant as embedded in the auth response: collections are id lists."""
    id: UUID
    name: str
    owner: UUID
    menus: List[UUID] = []
    items: List[UUID] = []
    displays: List[UUID] = []


class UserResponse(CamelModel):
    """Schema for user response (without password)."""
    id: UUID
    email: str
    restaurant: RestaurantRef | None = None


class AuthResponse(CamelModel):
    token: str
    user: UserResponse
