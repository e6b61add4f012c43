"""SQLAlchemy ORM models for stored debts and user profiles"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Float, DateTime, Integer, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DebtRow(Base):
    """Stored debt snapshot; replaced whole on every update"""

    __tablename__ = "debt"

    # Ids are unique per user, so an exported document can be restored under another user
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(Text, primary_key=True, index=True)
    creditor_name = Column(Text, nullable=False)
    category = Column(Text, nullable=False)  # revolving | installment
    balance = Column(Float, nullable=False)
    minimum_payment = Column(Float, nullable=True)
    interest_rate = Column(Float, nullable=False)
    term_months = Column(Integer, nullable=True)
    fee = Column(Float, nullable=True)
    fee_mode = Column(Text, nullable=True)  # upfront | monthly
    position = Column(Integer, nullable=False, default=0)  # insertion order within a user
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class UserProfileRow(Base):
    """Available funds and preferences for one user"""

    __tablename__ = "user_profile"

    user_id = Column(Text, primary_key=True)
    available_funds = Column(Float, nullable=False, default=0.0)
    currency = Column(String(3), nullable=False, default="USD")
    default_min_payment_percent = Column(Float, nullable=False, default=2.0)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
