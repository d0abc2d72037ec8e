import uuid
from sqlalchemy import Column, String, DateTime, Uuid, func, ForeignKey
from sqlalchemy.orm import relationship
from menuboard.db.base import Base

class Restaurant(Base):
    __tablename__ = "restaurants"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    owner = relationship("User", back_populates="restaurant")
    menus = relationship("Menu", back_populates="restaurant", cascade="all, delete-orphan", order_by="Menu.created_at")
    items = relationship("Item", back_populates="restaurant", cascade="all, delete-orphan", order_by="Item.created_at")
    displays = relationship("Display", back_populates="restaurant", cascade="all, delete-orphan", order_by="Display.created_at")

    def is_owned_by(self, user_id) -> bool:
        return self.owner_id == user_id
