"""Data access layer for debts and user profiles"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from avalanche_planner.config import settings
from avalanche_planner.infrastructure.database.models import DebtRow, UserProfileRow
from avalanche_planner.domain.exceptions import DebtNotFoundError
from avalanche_planner.domain.models import (
    DebtCategory,
    DebtDraft,
    DebtRecord,
    FeeMode,
    InstallmentDebt,
    LoanFee,
    RevolvingDebt,
    UserProfile,
)
from avalanche_planner.domain.validation import build_debt


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes, always stored as UTC
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def row_to_debt(row: DebtRow) -> DebtRecord:
    """
    Map a stored row onto its domain variant.

    Rows were validated on the way in, so they are not checked again; a
    tighter term cap in later settings must not make stored debts unreadable.
    """
    common = dict(
        id=row.id,
        creditor_name=row.creditor_name,
        balance=row.balance,
        interest_rate=row.interest_rate,
        minimum_payment=row.minimum_payment,
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )

    if row.category == DebtCategory.REVOLVING.value:
        return RevolvingDebt(**common)

    fee = LoanFee(row.fee, FeeMode(row.fee_mode)) if row.fee and row.fee_mode else None
    return InstallmentDebt(term_months=row.term_months, fee=fee, **common)


def _apply_snapshot(row: DebtRow, debt: DebtRecord) -> None:
    row.creditor_name = debt.creditor_name
    row.category = debt.category.value
    row.balance = debt.balance
    row.minimum_payment = debt.minimum_payment
    row.interest_rate = debt.interest_rate
    if isinstance(debt, InstallmentDebt):
        row.term_months = debt.term_months
        row.fee = debt.fee.amount if debt.fee else None
        row.fee_mode = debt.fee.mode.value if debt.fee else None
    else:
        row.term_months = None
        row.fee = None
        row.fee_mode = None


class DebtRepository:
    """Repository for debt records"""

    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, user_id: str, debt_id: str) -> Optional[DebtRow]:
        return (
            self.db.query(DebtRow)
            .filter(DebtRow.user_id == user_id, DebtRow.id == debt_id)
            .first()
        )

    def get_debts_by_user(self, user_id: str) -> List[DebtRecord]:
        """Fetch a user's debts in the order they were created"""
        rows = (
            self.db.query(DebtRow)
            .filter(DebtRow.user_id == user_id)
            .order_by(DebtRow.position, DebtRow.created_at)
            .all()
        )
        return [row_to_debt(row) for row in rows]

    def get_debt(self, user_id: str, debt_id: str) -> Optional[DebtRecord]:
        row = self._get_row(user_id, debt_id)
        return row_to_debt(row) if row else None

    def create_debt(
        self,
        user_id: str,
        draft: DebtDraft,
        *,
        debt_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> DebtRecord:
        """
        Persist a new debt; raises DebtValidationError for an invalid draft.

        Identifier and timestamps are minted unless given, which is how an
        imported record keeps its identity.
        """
        now = datetime.now(timezone.utc)
        created_at = _as_utc(created_at) or now
        updated_at = _as_utc(updated_at) or created_at
        debt = build_debt(
            draft,
            debt_id=debt_id or str(uuid.uuid4()),
            created_at=created_at,
            updated_at=updated_at,
            max_term_months=settings.max_installment_term_months,
        )

        last_position = (
            self.db.query(func.max(DebtRow.position)).filter(DebtRow.user_id == user_id).scalar()
        )
        row = DebtRow(
            id=debt.id,
            user_id=user_id,
            position=(last_position or 0) + 1,
            created_at=created_at,
            updated_at=updated_at,
        )
        _apply_snapshot(row, debt)
        self.db.add(row)
        self.db.flush()  # Surface constraint errors without committing
        return debt

    def replace_debt(self, user_id: str, debt_id: str, draft: DebtDraft) -> DebtRecord:
        """Swap in a new snapshot of an existing debt, keeping its creation time"""
        row = self._get_row(user_id, debt_id)
        if row is None:
            raise DebtNotFoundError(debt_id)

        now = datetime.now(timezone.utc)
        debt = build_debt(
            draft,
            debt_id=debt_id,
            created_at=_as_utc(row.created_at),
            updated_at=now,
            max_term_months=settings.max_installment_term_months,
        )

        _apply_snapshot(row, debt)
        row.updated_at = now
        self.db.flush()
        return debt

    def delete_debt(self, user_id: str, debt_id: str) -> None:
        row = self._get_row(user_id, debt_id)
        if row is None:
            raise DebtNotFoundError(debt_id)
        self.db.delete(row)
        self.db.flush()

    def delete_all_for_user(self, user_id: str) -> int:
        """Remove every debt a user holds, returning how many were removed"""
        count = (
            self.db.query(DebtRow)
            .filter(DebtRow.user_id == user_id)
            .delete(synchronize_session="fetch")
        )
        self.db.flush()
        return count


class ProfileRepository:
    """Repository for user financial profiles"""

    def __init__(self, db: Session):
        self.db = db

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        row = self.db.get(UserProfileRow, user_id)
        if row is None:
            return None

        return UserProfile(
            available_funds=row.available_funds,
            currency=row.currency or settings.default_currency,
            default_min_payment_percent=row.default_min_payment_percent or settings.default_min_payment_percent,
            updated_at=_as_utc(row.updated_at),
        )

    def save_profile(self, user_id: str, profile: UserProfile) -> UserProfile:
        """Insert or overwrite a user's profile"""
        now = datetime.now(timezone.utc)
        row = self.db.get(UserProfileRow, user_id)
        if row is None:
            row = UserProfileRow(user_id=user_id)
            self.db.add(row)

        row.available_funds = profile.available_funds
        row.currency = profile.currency
        row.default_min_payment_percent = profile.default_min_payment_percent
        row.updated_at = now
        self.db.flush()

        return UserProfile(
            available_funds=profile.available_funds,
            currency=profile.currency,
            default_min_payment_percent=profile.default_min_payment_percent,
            updated_at=now,
        )
