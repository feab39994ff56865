# app/models/service.py
"""
Service Model - bookable salon services
Each service belongs to one salon; duration drives slot length.
"""
from sqlalchemy import Column, String, Integer, ForeignKey, Boolean, DateTime, Uuid, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from app.models.base import Base


class Service(Base):
    """
    Source of truth for price and duration of a bookable service.
    Inactive services are never offered by the slot scanner.
    """
    __tablename__ = "services"
    __table_args__ = (
        CheckConstraint("duration_min > 0", name="ck_services_duration_positive"),
        CheckConstraint("price_cents >= 0", name="ck_services_price_non_negative"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    salon_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("salons.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    title = Column(String(200), nullable=False)
    duration_min = Column(Integer, nullable=False)
    price_cents = Column(Integer, nullable=False)
    active = Column(Boolean, nullable=False, default=True, index=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    # Relationships
    salon = relationship("Salon", back_populates="services")

    def __repr__(self):
        return f"<Service(id={self.id}, title={self.title}, salon_id={self.salon_id})>"

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "salon_id": str(self.salon_id),
            "title": self.title,
            "duration_min": self.duration_min,
            "price_cents": self.price_cents,
            "active": self.active,
        }

    @property
    def formatted_price(self) -> str:
        """Return human-readable price string"""
        return f"{self.price_cents / 100:.2f} €".replace(".", ",")

    @property
    def formatted_duration(self) -> str:
        """Return human-readable duration string"""
        hours = self.duration_min // 60
        minutes = self.duration_min % 60

        if hours > 0 and minutes > 0:
            return f"{hours}h {minutes}m"
        elif hours > 0:
            return f"{hours}h"
        else:
            return f"{minutes}m"
