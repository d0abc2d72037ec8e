"""
Menus and their ordered item lists.
"""
import uuid
from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, Uuid, func
from sqlalchemy.orm import relationship

from menuboard.db.base import Base


class Menu(Base):
    """A named, ordered selection of items shown together on a display."""
    __tablename__ = "menus"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(Uuid(as_uuid=True), ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    restaurant = relationship("Restaurant", back_populates="menus")
    entries = relationship(
        "MenuEntry",
        back_populates="menu",
        cascade="all, delete-orphan",
        order_by="MenuEntry.position",
    )
    # Deleting a menu nulls current_menu_id on the displays showing it
    displays = relationship("Display", back_populates="current_menu")

    @property
    def items(self):
        """Items in display order."""
        return [entry.item for entry in self.entries]

    def set_items(self, items) -> None:
        """Replace the item list, keeping the given order (duplicates allowed)."""
        self.entries = [MenuEntry(item=item, position=index) for index, item in enumerate(items)]


class MenuEntry(Base):
    """
    One slot in a menu's item list.

    Position is the on-screen order; it is rewritten as a whole whenever the
    list is replaced, so it is indexed but not unique.
    """
    __tablename__ = "menu_entries"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    menu_id = Column(Uuid(as_uuid=True), ForeignKey("menus.id", ondelete="CASCADE"), nullable=False, index=True)
    item_id = Column(Uuid(as_uuid=True), ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    menu = relationship("Menu", back_populates="entries")
    item = relationship("Item", back_populates="menu_entries", lazy="joined")
