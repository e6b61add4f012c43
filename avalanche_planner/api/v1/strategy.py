"""GET /v1/strategy and GET /v1/summary - avalanche recommendations over stored debts"""

import time
from fastapi import APIRouter, Depends, Query, Request

from avalanche_planner.api.v1.schemas import StrategyResponse, SummaryResponse
from avalanche_planner.api.dependencies import (
    get_debt_repository,
    get_profile_repository,
    get_request_id,
    get_user_id,
)
from avalanche_planner.config import settings
from avalanche_planner.infrastructure.database.repositories import DebtRepository, ProfileRepository
from avalanche_planner.domain.avalanche import calculate_avalanche_strategy, summarize
from avalanche_planner.infrastructure.observability.metrics import record_strategy
from avalanche_planner.infrastructure.observability.logging import log_strategy

router = APIRouter()


@router.get("/strategy", response_model=StrategyResponse)
def get_strategy(
    request: Request,
    months_to_show: int = Query(
        settings.default_months_to_show,
        ge=1,
        le=settings.max_months_to_show,
        description="Months of breakdown to project per debt",
    ),
    user_id: str = Depends(get_user_id),
    debt_repo: DebtRepository = Depends(get_debt_repository),
    profile_repo: ProfileRepository = Depends(get_profile_repository),
):
    """
    Recommend this month's payments using the avalanche method.

    Flow:
    1. Load the user's debts and profile
    2. Resolve minimums, rank by APR and give the surplus to the top debt
    3. Project each debt month by month over the requested window

    Without a saved profile, available funds are 0 and only minimums are shown.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    debts = debt_repo.get_debts_by_user(user_id)
    profile = profile_repo.get_profile(user_id)

    available_funds = profile.available_funds if profile else 0.0
    default_percent = (
        profile.default_min_payment_percent if profile else settings.default_min_payment_percent
    )
    currency = profile.currency if profile else settings.default_currency

    strategy = calculate_avalanche_strategy(
        debts,
        available_funds,
        months_to_show,
        default_percent,
        payment_floor=settings.minimum_payment_floor,
    )

    duration_ms = (time.time() - start_time) * 1000
    record_strategy(strategy)
    target = strategy.target
    log_strategy(
        request_id,
        user_id,
        len(debts),
        strategy.surplus,
        target.debt_id if target else None,
        duration_ms,
    )

    return StrategyResponse.from_strategy(user_id, currency, strategy)


@router.get("/summary", response_model=SummaryResponse)
def get_summary(
    user_id: str = Depends(get_user_id),
    debt_repo: DebtRepository = Depends(get_debt_repository),
    profile_repo: ProfileRepository = Depends(get_profile_repository),
):
    """Totals across the user's debts"""
    profile = profile_repo.get_profile(user_id)
    summary = summarize(
        debt_repo.get_debts_by_user(user_id),
        profile.default_min_payment_percent if profile else settings.default_min_payment_percent,
        payment_floor=settings.minimum_payment_floor,
    )
    return SummaryResponse.from_summary(user_id, summary)
