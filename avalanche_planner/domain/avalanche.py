"""Avalanche allocation engine - core business logic for repayment recommendations"""

import math
from dataclasses import replace
from typing import List, Optional, Sequence

from avalanche_planner.domain.amortization import months_to_payoff, monthly_breakdown, total_interest
from avalanche_planner.domain.minimum_payment import FALLBACK_MIN_PAYMENT_PERCENT, resolve_minimum_payment
from avalanche_planner.domain.models import (
    AvalancheRecommendation,
    DebtRecord,
    DebtSummary,
    Strategy,
)


def _with_minimums(
    debts: Sequence[DebtRecord],
    default_min_percent: Optional[float],
    payment_floor: float,
) -> List[DebtRecord]:
    """Working copies carrying a resolved minimum payment"""
    return [
        replace(
            debt,
            minimum_payment=resolve_minimum_payment(
                debt, default_min_percent, payment_floor=payment_floor
            ),
        )
        for debt in debts
    ]


def _recommend(
    debt: DebtRecord,
    surplus: float,
    is_target: bool,
    months_to_show: int,
) -> AvalancheRecommendation:
    minimum = debt.minimum_payment
    recommended = minimum + (surplus if is_target else 0.0)

    # Interest saved versus paying only the minimum
    interest_saved = max(
        0.0,
        total_interest(debt.balance, minimum, debt.interest_rate)
        - total_interest(debt.balance, recommended, debt.interest_rate),
    )

    return AvalancheRecommendation(
        debt_id=debt.id,
        creditor_name=debt.creditor_name,
        category=debt.category,
        balance=debt.balance,
        interest_rate=debt.interest_rate,
        minimum_payment=minimum,
        recommended_payment=recommended,
        is_target=is_target,
        months_to_payoff=months_to_payoff(debt.balance, recommended, debt.interest_rate),
        interest_saved=interest_saved,
        breakdown=tuple(
            monthly_breakdown(debt.balance, recommended, debt.interest_rate, months_to_show, debt)
        ),
    )


def calculate_avalanche_strategy(
    debts: Sequence[DebtRecord],
    available_funds: float,
    months_to_show: int = 6,
    default_min_percent: Optional[float] = FALLBACK_MIN_PAYMENT_PERCENT,
    *,
    payment_floor: float = 25.0,
) -> Strategy:
    """
    Main entry point: allocate this month's funds across debts, highest APR first.

    Every debt gets its minimum payment; whatever is left over (the surplus)
    goes entirely to the highest-rate debt. Ties on rate keep input order.

    Months to debt-free is the target debt's payoff time only; paid-off
    payments are not rolled onto the next debt.
    """
    if not debts:
        return Strategy(
            total_available_funds=available_funds,
            total_minimum_payments=0.0,
            surplus=available_funds,
        )

    # sorted() is stable, so equal rates keep their input order
    ranked = sorted(
        _with_minimums(debts, default_min_percent, payment_floor),
        key=lambda d: d.interest_rate,
        reverse=True,
    )

    total_minimum = sum(d.minimum_payment for d in ranked)
    surplus = max(0.0, available_funds - total_minimum)

    recommendations = tuple(
        _recommend(debt, surplus, index == 0 and surplus > 0, months_to_show)
        for index, debt in enumerate(ranked)
    )

    target = next((r for r in recommendations if r.is_target), None)

    return Strategy(
        total_available_funds=available_funds,
        total_minimum_payments=total_minimum,
        surplus=surplus,
        recommendations=recommendations,
        total_months_to_debt_free=target.months_to_payoff if target else math.inf,
        total_interest_saved=target.interest_saved if target else 0.0,
    )


def summarize(
    debts: Sequence[DebtRecord],
    default_min_percent: Optional[float] = FALLBACK_MIN_PAYMENT_PERCENT,
    *,
    payment_floor: float = 25.0,
) -> DebtSummary:
    """Portfolio totals, using resolved minimum payments"""
    if not debts:
        return DebtSummary(total_balance=0.0, total_minimum=0.0, max_rate=0.0, min_rate=0.0, count=0)

    rates = [d.interest_rate for d in debts]

    return DebtSummary(
        total_balance=sum(d.balance for d in debts),
        total_minimum=sum(
            resolve_minimum_payment(d, default_min_percent, payment_floor=payment_floor)
            for d in debts
        ),
        max_rate=max(rates),
        min_rate=min(rates),
        count=len(debts),
    )
