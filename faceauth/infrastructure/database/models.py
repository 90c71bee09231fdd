"""SQLAlchemy models for the face authentication service."""
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class IdentityRecord(Base):
    """Registered identity with an optional canonical face descriptor."""

    __tablename__ = "identities"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    first_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    face_descriptor: Mapped[Optional[List[float]]] = mapped_column(
        JSON(none_as_null=True),
        nullable=True,
        comment="Canonical face descriptor, NULL for password-only identities"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow
    )

    # Relationships
    face_samples: Mapped[List["FaceSampleRecord"]] = relationship(
        back_populates="identity",
        cascade="all, delete-orphan",
        order_by="FaceSampleRecord.timestamp"
    )


class FaceSampleRecord(Base):
    """Append-only history of descriptors captured for an identity."""

    __tablename__ = "face_samples"
    __table_args__ = (
        Index("idx_face_samples_identity", "identity_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )
    identity_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("identities.id", ondelete="CASCADE")
    )
    descriptor: Mapped[List[float]] = mapped_column(JSON, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow
    )

    # Relationships
    identity: Mapped[IdentityRecord] = relationship(
        back_populates="face_samples"
    )
