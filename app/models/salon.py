# app/models/salon.py
"""
Salon Model
A salon owns its services, stylists, work-hour rules, absences and bookings.
"""
from sqlalchemy import Column, String, DateTime, JSON, Text, Numeric, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from app.models.base import Base
from app.config.settings import get_settings


def _default_timezone():
    return get_settings().SALON_TIMEZONE


class Salon(Base):
    __tablename__ = "salons"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    slug = Column(String(200), nullable=False, unique=True, index=True)

    # Location
    address = Column(Text, nullable=False)
    lat = Column(Numeric(10, 8), nullable=True)
    lng = Column(Numeric(11, 8), nullable=True)

    # Contact information
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)

    # System configuration
    timezone = Column(String(50), nullable=False, default=_default_timezone)
    open_hours_json = Column(JSON, nullable=True)  # Display only, slots come from work-hour rules

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    services = relationship("Service", back_populates="salon", cascade="all, delete-orphan")
    stylists = relationship("Stylist", back_populates="salon", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Salon(id={self.id}, slug={self.slug})>"

    def to_dict(self, include_details=False):
        """Convert to dictionary for API responses"""
        data = {
            "id": str(self.id),
            "name": self.name,
            "slug": self.slug,
            "address": self.address,
            "lat": float(self.lat) if self.lat is not None else None,
            "lng": float(self.lng) if self.lng is not None else None,
            "timezone": self.timezone,
        }

        if include_details:
            data.update({
                "phone": self.phone,
                "email": self.email,
                "open_hours_json": self.open_hours_json,
                "services": [s.to_dict() for s in self.services],
                "stylists": [s.to_dict() for s in self.stylists],
            })
        else:
            data["services"] = [
                {"id": str(s.id), "title": s.title, "price_cents": s.price_cents}
                for s in self.services
                if s.active
            ]

        return data
