# app/models/stylist.py
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from app.models.base import Base


class Stylist(Base):
    """A member of a salon's staff who can be booked"""
    __tablename__ = "stylists"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    salon_id = Column(Uuid(as_uuid=True), ForeignKey("salons.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    display_name = Column(String(120), nullable=False)
    avatar_url = Column(String(500), nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    is_apprentice = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    salon = relationship("Salon", back_populates="stylists")
    work_hours = relationship("WorkHourRule", back_populates="stylist", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Stylist(id={self.id}, display_name={self.display_name})>"

    def to_dict(self):
        return {
            "id": str(self.id),
            "salon_id": str(self.salon_id),
            "display_name": self.display_name,
            "avatar_url": self.avatar_url,
            "active": self.active,
            "is_apprentice": self.is_apprentice,
        }
