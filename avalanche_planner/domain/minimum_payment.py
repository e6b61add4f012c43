"""Minimum payment derivation for debts that don't state one"""

from typing import Optional

from avalanche_planner.domain.amortization import loan_fee_amount, monthly_rate
from avalanche_planner.domain.models import DebtRecord, FeeMode, InstallmentDebt

FALLBACK_MIN_PAYMENT_PERCENT = 2.0


def loan_payment(principal: float, annual_rate_percent: float, term_months: int) -> float:
    """Level monthly payment that amortizes principal over term_months"""
    if annual_rate_percent == 0:
        return principal / term_months

    rate = monthly_rate(annual_rate_percent)
    growth = (1 + rate) ** term_months
    return principal * rate * growth / (growth - 1)


def effective_balance(debt: DebtRecord) -> float:
    """Balance plus any upfront loan fee"""
    return debt.balance + loan_fee_amount(debt, FeeMode.UPFRONT)


def resolve_minimum_payment(
    debt: DebtRecord,
    default_percent: Optional[float] = FALLBACK_MIN_PAYMENT_PERCENT,
    *,
    payment_floor: float = 25.0,
) -> float:
    """
    Minimum monthly payment to use for a debt in a calculation pass.

    Resolution order:
    - An explicit positive minimum payment always wins
    - Installment loans with a term: annuity payment on the effective
      balance, plus the monthly fee when one applies
    - Everything else: default_percent of the balance, never below payment_floor

    The debt itself is left untouched.
    """
    if debt.minimum_payment is not None and debt.minimum_payment > 0:
        return debt.minimum_payment

    if isinstance(debt, InstallmentDebt) and debt.term_months:
        payment = loan_payment(effective_balance(debt), debt.interest_rate, debt.term_months)
        return payment + loan_fee_amount(debt, FeeMode.MONTHLY)

    if default_percent is None:
        default_percent = FALLBACK_MIN_PAYMENT_PERCENT

    return max(debt.balance * default_percent / 100, payment_floor)
