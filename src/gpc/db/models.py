"""ORM models for the contribution record store.

Donations, charities, organizations, formal volunteer hours and skill
endorsements are owned by other parts of the platform and are read-only here.
Self-reported hours and validation requests are written by the validator.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gpc.db.base import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Lookup tables
# ---------------------------------------------------------------------------


class Charity(Base):
    """Maps to the 'charities' table (charity display names)."""

    __tablename__ = "charities"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class Organization(Base):
    """Organizations volunteers can name on self-reported hours."""

    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class SkillEndorsement(Base):
    """A skill endorsement received by a volunteer."""

    __tablename__ = "skill_endorsements"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    recipient_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    endorser_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    skill: Mapped[str] = mapped_column(String(128), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


# ---------------------------------------------------------------------------
# Ledger: donations and formal hours
# ---------------------------------------------------------------------------


class Donation(Base):
    """A settled cryptocurrency donation."""

    __tablename__ = "donations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    donor_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    charity_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("charities.id", ondelete="SET NULL"), nullable=True,
    )
    amount: Mapped[Decimal | None] = mapped_column(Numeric(20, 8), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    charity: Mapped[Charity | None] = relationship("Charity", lazy="selectin")


class FormalVolunteerHours(Base):
    """Hours logged through a charity's own approval workflow."""

    __tablename__ = "volunteer_hours"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    volunteer_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    charity_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("charities.id", ondelete="SET NULL"), nullable=True,
    )
    hours: Mapped[Decimal | None] = mapped_column(Numeric(6, 2), nullable=True)
    date_performed: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    charity: Mapped[Charity | None] = relationship("Charity", lazy="selectin")


# ---------------------------------------------------------------------------
# Self-reported hours and validation requests
# ---------------------------------------------------------------------------


class SelfReportedHours(Base):
    """Volunteer-entered hours, optionally validated by a verified organization."""

    __tablename__ = "self_reported_hours"
    __table_args__ = (
        Index("idx_self_reported_hours_volunteer_status", "volunteer_id", "validation_status"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    volunteer_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    activity_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    hours: Mapped[Decimal] = mapped_column(Numeric(4, 1), nullable=False)
    activity_type: Mapped[str] = mapped_column(String(32), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)

    organization_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("organizations.id", ondelete="SET NULL"), nullable=True, index=True,
    )
    organization_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    organization_contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    validation_status: Mapped[str] = mapped_column(String(16), nullable=False, default="unvalidated")
    validation_request_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    validated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    validated_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(String(32), nullable=True)
    rejection_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    verification_hash: Mapped[str | None] = mapped_column(String(66), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    organization: Mapped[Organization | None] = relationship("Organization", lazy="selectin")


class ValidationRequest(Base):
    """A request asking an organization to confirm self-reported hours."""

    __tablename__ = "validation_requests"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    self_reported_hours_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("self_reported_hours.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    organization_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    volunteer_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending", index=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    responded_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(String(32), nullable=True)
    rejection_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_resubmission: Mapped[bool] = mapped_column(Boolean, default=False)
    original_request_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("validation_requests.id"), nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
