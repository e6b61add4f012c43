"""Validation of candidate debts and construction of debt records"""

import math
from datetime import datetime
from typing import List, Optional

from avalanche_planner.domain.exceptions import DebtValidationError
from avalanche_planner.domain.models import (
    DebtCategory,
    DebtDraft,
    DebtRecord,
    FeeMode,
    InstallmentDebt,
    LoanFee,
    RevolvingDebt,
)

_CATEGORIES = tuple(c.value for c in DebtCategory)
_FEE_MODES = tuple(m.value for m in FeeMode)


def _finite(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)


def validate(draft: DebtDraft, *, max_term_months: int = 24) -> List[str]:
    """
    Check a candidate debt and describe every problem found.

    An empty list means the draft may be stored. Installment-only fields are
    ignored for revolving debts.
    """
    errors: List[str] = []

    if not draft.creditor_name or not draft.creditor_name.strip():
        errors.append("Creditor name is required")

    if not draft.category:
        errors.append("Debt category is required")
    elif draft.category not in _CATEGORIES:
        errors.append("Debt category must be 'revolving' or 'installment'")

    if not _finite(draft.balance) or draft.balance <= 0:
        errors.append("Balance must be greater than 0")

    if draft.minimum_payment is not None and (
        not _finite(draft.minimum_payment) or draft.minimum_payment <= 0
    ):
        errors.append("Minimum payment must be greater than 0 if provided")

    if not _finite(draft.interest_rate) or not 0 <= draft.interest_rate <= 100:
        errors.append("Interest rate must be between 0 and 100")

    if draft.category == DebtCategory.INSTALLMENT.value:
        if draft.term_months is not None and not 1 <= draft.term_months <= max_term_months:
            errors.append(f"Loan term must be between 1 and {max_term_months} months")

        if draft.fee is not None and not _finite(draft.fee):
            errors.append("Loan fee must be a finite amount")
        elif draft.fee is not None and draft.fee < 0:
            errors.append("Loan fee cannot be negative")

        if _finite(draft.fee) and draft.fee > 0:
            if not draft.fee_mode:
                errors.append("Loan fee mode is required when a fee is specified")
            elif draft.fee_mode not in _FEE_MODES:
                errors.append("Loan fee mode must be 'upfront' or 'monthly'")

    return errors


def build_debt(
    draft: DebtDraft,
    *,
    debt_id: str,
    created_at: Optional[datetime] = None,
    updated_at: Optional[datetime] = None,
    max_term_months: int = 24,
) -> DebtRecord:
    """Turn a draft into the matching debt variant, refusing drafts that don't validate"""
    errors = validate(draft, max_term_months=max_term_months)
    if errors:
        raise DebtValidationError(errors)

    common = dict(
        id=debt_id,
        creditor_name=draft.creditor_name.strip(),
        balance=draft.balance,
        interest_rate=draft.interest_rate,
        minimum_payment=draft.minimum_payment,
        created_at=created_at,
        updated_at=updated_at,
    )

    if draft.category == DebtCategory.REVOLVING.value:
        return RevolvingDebt(**common)

    # A zero fee carries no mode and is dropped
    fee = LoanFee(draft.fee, FeeMode(draft.fee_mode)) if draft.fee else None
    return InstallmentDebt(term_months=draft.term_months, fee=fee, **common)
