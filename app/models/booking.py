# ===== app/models/booking.py =====
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Uuid, Index, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from .base import Base
import enum
import uuid


class BookingStatus(str, enum.Enum):
    REQUESTED = "requested"
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    CANCELLED = "cancelled"

    @classmethod
    def values(cls):
        return [s.value for s in cls]


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("starts_at < ends_at", name="ck_bookings_start_before_end"),
        Index("ix_bookings_stylist_range", "stylist_id", "starts_at", "ends_at"),
        Index("ix_bookings_salon_starts_at", "salon_id", "starts_at"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # References
    salon_id = Column(Uuid(as_uuid=True), ForeignKey("salons.id", ondelete="CASCADE"), nullable=False)
    service_id = Column(Uuid(as_uuid=True), ForeignKey("services.id", ondelete="CASCADE"), nullable=False)
    stylist_id = Column(Uuid(as_uuid=True), ForeignKey("stylists.id", ondelete="SET NULL"), nullable=True)
    customer_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)

    # Appointment details, ends_at includes the turnover buffer
    starts_at = Column(DateTime(timezone=True), nullable=False)
    ends_at = Column(DateTime(timezone=True), nullable=False)
    note = Column(Text, nullable=True)

    # Status tracking
    status = Column(String(20), nullable=False, default=BookingStatus.REQUESTED.value)  # requested, confirmed, declined, cancelled
    cancellation_reason = Column(Text, nullable=True)

    # Reminders & notifications
    reminder_sent = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    salon = relationship("Salon")
    service = relationship("Service")
    stylist = relationship("Stylist")
    customer = relationship("User")

    @property
    def is_occupying(self) -> bool:
        return self.status != BookingStatus.CANCELLED.value

    def __repr__(self):
        return f"<Booking(id={self.id}, stylist_id={self.stylist_id}, status={self.status})>"
