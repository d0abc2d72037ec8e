"""
Display model: one physical screen paired through a short code.
"""
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid, CheckConstraint, func
from sqlalchemy.orm import relationship

from menuboard.db.base import Base

MEDIA_TYPES = ("image", "video")


class Display(Base):
    """
    A screen that renders the menu assigned to it.

    The pairing code is unique across all displays and is assigned before the
    first insert; media_url and media_type are always set and cleared together.
    """
    __tablename__ = "displays"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(Uuid(as_uuid=True), ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    pairing_code = Column(String(16), nullable=False, unique=True, index=True)
    current_menu_id = Column(Uuid(as_uuid=True), ForeignKey("menus.id", ondelete="SET NULL"), nullable=True)
    media_url = Column(String(500))
    media_type = Column(String(10))
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    restaurant = relationship("Restaurant", back_populates="displays")
    current_menu = relationship("Menu", back_populates="displays")

    __table_args__ = (
        CheckConstraint(
            "media_type IS NULL OR media_type IN ('image', 'video')",
            name="ck_displays_media_type",
        ),
    )

    def set_media(self, url: str, media_type: str) -> None:
        if media_type not in MEDIA_TYPES:
            raise ValueError(f"Unsupported media type: {media_type}")
        self.media_url = url
        self.media_type = media_type

    def clear_media(self) -> None:
        self.media_url = None
        self.media_type = None
