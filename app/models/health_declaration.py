"""
Health Declaration Model
Stores COVID-19 self-declarations submitted through the public form
"""
import datetime
import enum
import uuid

from sqlalchemy import Column, String, Text, Boolean, DateTime, Numeric, Index, Enum as SQLEnum
from database import Base


class DeclarationStatus(str, enum.Enum):
    """Review status of a declaration"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


def generate_declaration_id() -> str:
    return str(uuid.uuid4())


class HealthDeclaration(Base):
    """
    Health Declaration Model
    One self-reported health record; reviewed by administrators via status
    """
    __tablename__ = "health_declarations"

    id = Column(String(36), primary_key=True, default=generate_declaration_id)

    # Declaration content
    name = Column(String(100), nullable=False)
    temperature = Column(Numeric(4, 2), nullable=False)  # Celsius, 30.00 - 45.00
    has_symptoms = Column(Boolean, nullable=False, default=False)
    symptoms = Column(Text, nullable=True)  # Comma-separated free text
    has_contact = Column(Boolean, nullable=False, default=False)
    contact_details = Column(Text, nullable=True)

    # Review workflow
    status = Column(
        SQLEnum(
            DeclarationStatus,
            name="declaration_status",
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=DeclarationStatus.PENDING,
    )

    # Audit
    ip_address = Column(String(45), nullable=True)  # Fits IPv6
    user_agent = Column(Text, nullable=True)

    # Timestamps (server local time)
    created_at = Column(DateTime(timezone=True), default=datetime.datetime.now, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=datetime.datetime.now,
        onupdate=datetime.datetime.now,
        nullable=False,
    )

    __table_args__ = (
        Index('ix_health_declarations_created_at', 'created_at'),
        Index('ix_health_declarations_name', 'name'),
        Index('ix_health_declarations_status', 'status'),
        Index('ix_health_declarations_temperature', 'temperature'),
    )

    def __repr__(self):
        return f"<HealthDeclaration(id={self.id}, name='{self.name}', status={self.status})>"
