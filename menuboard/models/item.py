"""
Menu items: the dishes and products a restaurant can put on its screens.
"""
import uuid
from sqlalchemy import Column, String, Text, Boolean, Numeric, DateTime, ForeignKey, Uuid, func
from sqlalchemy.orm import relationship

from menuboard.db.base import Base


class Item(Base):
    """A dish or product sold by the restaurant."""
    __tablename__ = "items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(Uuid(as_uuid=True), ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    category = Column(String(100), nullable=False)
    image_url = Column(String(500))
    is_available = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    restaurant = relationship("Restaurant", back_populates="items")
    # Removing an item drops it from every menu that lists it
    menu_entries = relationship("MenuEntry", back_populates="item", cascade="all, delete-orphan")
