# ============================================================================
# FILE: app/models/user.py
# Identity collaborator - the engine only reads customer contact details
# ============================================================================
from sqlalchemy import Column, String, DateTime, Uuid, Enum as SQLEnum
from sqlalchemy.sql import func
import uuid
import enum
from app.models.base import Base


class UserRole(str, enum.Enum):
    """Platform-level user roles."""
    OWNER = "owner"
    SALON_OWNER = "salon_owner"
    STYLIST = "stylist"
    CUSTOMER = "customer"


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=True, index=True)
    first_name = Column(String(120), nullable=True)
    last_name = Column(String(120), nullable=True)
    role = Column(
        SQLEnum(UserRole, values_callable=lambda e: [m.value for m in e]),
        default=UserRole.CUSTOMER,
        nullable=False,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
