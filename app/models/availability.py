# ===== app/models/availability.py =====
from sqlalchemy import Column, String, Integer, Time, DateTime, ForeignKey, Text, Uuid, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.models.base import Base
import uuid


class WorkHourRule(Base):
    """Recurring weekly availability window of one stylist"""
    __tablename__ = "work_hours"
    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_work_hours_start_before_end"),
        CheckConstraint("weekday BETWEEN 0 AND 6", name="ck_work_hours_weekday_range"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    salon_id = Column(Uuid(as_uuid=True), ForeignKey("salons.id", ondelete="CASCADE"), nullable=False, index=True)
    stylist_id = Column(Uuid(as_uuid=True), ForeignKey("stylists.id", ondelete="CASCADE"), nullable=False, index=True)

    weekday = Column(Integer, nullable=False)  # 0=Sunday, 6=Saturday
    start_time = Column(Time, nullable=False)  # Salon-local clock time
    end_time = Column(Time, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    stylist = relationship("Stylist", back_populates="work_hours")

    def to_dict(self):
        return {
            "id": str(self.id),
            "salon_id": str(self.salon_id),
            "stylist_id": str(self.stylist_id),
            "weekday": self.weekday,
            "start": self.start_time.strftime("%H:%M"),
            "end": self.end_time.strftime("%H:%M"),
        }


class Absence(Base):
    """Concrete time-off span (vacation, sick leave) overriding work-hour rules"""
    __tablename__ = "absences"
    __table_args__ = (
        CheckConstraint("starts_at < ends_at", name="ck_absences_start_before_end"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    salon_id = Column(Uuid(as_uuid=True), ForeignKey("salons.id", ondelete="CASCADE"), nullable=False, index=True)
    stylist_id = Column(Uuid(as_uuid=True), ForeignKey("stylists.id", ondelete="CASCADE"), nullable=False, index=True)

    starts_at = Column(DateTime(timezone=True), nullable=False)
    ends_at = Column(DateTime(timezone=True), nullable=False)
    reason = Column(Text, nullable=True)  # "Vacation", "Sick", etc.

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def to_dict(self):
        from app.utils.time_window import ensure_utc

        return {
            "id": str(self.id),
            "salon_id": str(self.salon_id),
            "stylist_id": str(self.stylist_id),
            "starts_at": ensure_utc(self.starts_at).isoformat(),
            "ends_at": ensure_utc(self.ends_at).isoformat(),
            "reason": self.reason,
        }
