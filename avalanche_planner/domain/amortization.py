"""Amortization math and month-by-month breakdowns under compound monthly interest"""

import math
from typing import Iterator, Optional, Union

from avalanche_planner.domain.models import DebtRecord, FeeMode, InstallmentDebt, MonthRow


def monthly_rate(annual_rate_percent: float) -> float:
    """Convert an APR in percent to a monthly rate"""
    return annual_rate_percent / 100 / 12


def loan_fee_amount(debt: Optional[DebtRecord], mode: FeeMode) -> float:
    """Fee charged under the given mode, or 0 for anything but a matching installment loan"""
    if isinstance(debt, InstallmentDebt) and debt.fee is not None and debt.fee.mode == mode:
        return debt.fee.amount
    return 0.0


def months_to_payoff(
    balance: float,
    monthly_payment: float,
    annual_rate_percent: float,
) -> Union[int, float]:
    """
    Number of monthly payments needed to clear a balance.

    Uses the fixed-payment amortization closed form
    n = -ln(1 - r*P/A) / ln(1 + r), rounded up so a partial final month
    counts as a full one.

    Returns:
        0 for a non-positive balance or payment, math.inf when the payment
        never exceeds the accruing interest.
    """
    if monthly_payment <= 0 or balance <= 0:
        return 0

    rate = monthly_rate(annual_rate_percent)

    # Payment must outrun interest or the balance never shrinks
    if monthly_payment <= balance * rate:
        return math.inf

    if rate == 0:
        return math.ceil(balance / monthly_payment)

    months = -math.log(1 - rate * balance / monthly_payment) / math.log(1 + rate)
    return math.ceil(months)


def total_interest(balance: float, monthly_payment: float, annual_rate_percent: float) -> float:
    """Interest paid over the life of a debt at a fixed monthly payment"""
    months = months_to_payoff(balance, monthly_payment, annual_rate_percent)
    if months == math.inf or months == 0:
        return 0.0

    return max(0.0, monthly_payment * months - balance)


def monthly_breakdown(
    balance: float,
    payment: float,
    annual_rate_percent: float,
    month_count: int,
    debt: Optional[DebtRecord] = None,
) -> Iterator[MonthRow]:
    """
    Yield one MonthRow per month until the balance is cleared or month_count is reached.

    Every call starts over from the given inputs. When the debt is an
    installment loan, an upfront fee is added to the starting balance and a
    monthly fee is carved out of each payment before principal.
    """
    rate = monthly_rate(annual_rate_percent)
    current_balance = balance + loan_fee_amount(debt, FeeMode.UPFRONT)
    monthly_fee = loan_fee_amount(debt, FeeMode.MONTHLY)

    month = 1
    while month <= month_count and current_balance > 0:
        interest = current_balance * rate
        available_for_principal = payment - interest - monthly_fee

        # Never negative, never past the remaining balance
        principal = min(max(0.0, available_for_principal), current_balance)
        current_balance = max(0.0, current_balance - principal)

        yield MonthRow(
            month=month,
            interest=interest,
            principal=principal,
            payment=interest + principal + monthly_fee,
            balance=current_balance,
        )
        month += 1
