"""Pydantic schemas for API request/response validation"""

import math
from datetime import datetime, timezone
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from avalanche_planner.domain.models import (
    SUPPORTED_CURRENCIES,
    AvalancheRecommendation,
    DebtDraft,
    DebtRecord,
    DebtSummary,
    InstallmentDebt,
    MonthRow,
    Strategy,
    UserProfile,
)


def finite_or_none(value: Union[int, float]) -> Optional[int]:
    """Months as JSON: None stands for "never paid off" """
    return None if math.isinf(value) else int(value)


class DebtRequest(BaseModel):
    """
    Request body for POST /v1/debts and PUT /v1/debts/{debt_id}

    Fields are deliberately loose; range and consistency checks come from
    domain validation so every problem is reported at once.
    """

    creditor_name: Optional[str] = None
    category: Optional[str] = Field(None, description="revolving | installment")
    balance: Optional[float] = None
    minimum_payment: Optional[float] = Field(None, description="Omit to derive a minimum")
    interest_rate: Optional[float] = Field(None, description="APR in percent")
    term_months: Optional[int] = None
    fee: Optional[float] = None
    fee_mode: Optional[str] = Field(None, description="upfront | monthly")

    def to_draft(self) -> DebtDraft:
        return DebtDraft(**self.model_dump())


class DebtResponse(BaseModel):
    """Stored debt"""

    debt_id: str
    creditor_name: str
    category: str
    balance: float
    minimum_payment: Optional[float] = None
    interest_rate: float
    term_months: Optional[int] = None
    fee: Optional[float] = None
    fee_mode: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_debt(cls, debt: DebtRecord) -> "DebtResponse":
        installment = isinstance(debt, InstallmentDebt)
        fee = debt.fee if installment else None
        return cls(
            debt_id=debt.id,
            creditor_name=debt.creditor_name,
            category=debt.category.value,
            balance=debt.balance,
            minimum_payment=debt.minimum_payment,
            interest_rate=debt.interest_rate,
            term_months=debt.term_months if installment else None,
            fee=fee.amount if fee else None,
            fee_mode=fee.mode.value if fee else None,
            created_at=debt.created_at,
            updated_at=debt.updated_at,
        )


class ValidationErrorResponse(BaseModel):
    """Body returned with HTTP 422 when a debt fails validation"""

    errors: List[str]


class ProfileRequest(BaseModel):
    """Request body for PUT /v1/profile"""

    available_funds: float = Field(..., ge=0, allow_inf_nan=False, description="Monthly money left after expenses")
    currency: str = Field("USD", description="ISO currency code")
    default_min_payment_percent: float = Field(2.0, ge=1, le=10)

    @field_validator("currency")
    @classmethod
    def supported_currency(cls, value: str) -> str:
        value = value.upper()
        if value not in SUPPORTED_CURRENCIES:
            raise ValueError(f"currency must be one of {', '.join(SUPPORTED_CURRENCIES)}")
        return value

    def to_profile(self) -> UserProfile:
        return UserProfile(
            available_funds=self.available_funds,
            currency=self.currency,
            default_min_payment_percent=self.default_min_payment_percent,
        )


class ProfileResponse(ProfileRequest):
    """Stored profile"""

    updated_at: Optional[datetime] = None

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "ProfileResponse":
        return cls(
            available_funds=profile.available_funds,
            currency=profile.currency,
            default_min_payment_percent=profile.default_min_payment_percent,
            updated_at=profile.updated_at,
        )


class MonthRowSchema(BaseModel):
    """Single month of a payoff projection"""

    month: int
    interest: float
    principal: float
    payment: float
    balance: float

    @classmethod
    def from_row(cls, row: MonthRow) -> "MonthRowSchema":
        return cls(
            month=row.month,
            interest=row.interest,
            principal=row.principal,
            payment=row.payment,
            balance=row.balance,
        )


class RecommendationSchema(BaseModel):
    """Per-debt recommendation"""

    debt_id: str
    creditor_name: str
    category: str
    balance: float
    interest_rate: float
    minimum_payment: float
    recommended_payment: float
    is_target: bool
    months_to_payoff: Optional[int] = Field(None, description="null when the payment never clears the debt")
    interest_saved: float
    breakdown: List[MonthRowSchema]
    continues_beyond_window: bool

    @classmethod
    def from_recommendation(cls, rec: AvalancheRecommendation) -> "RecommendationSchema":
        return cls(
            debt_id=rec.debt_id,
            creditor_name=rec.creditor_name,
            category=rec.category.value,
            balance=rec.balance,
            interest_rate=rec.interest_rate,
            minimum_payment=rec.minimum_payment,
            recommended_payment=rec.recommended_payment,
            is_target=rec.is_target,
            months_to_payoff=finite_or_none(rec.months_to_payoff),
            interest_saved=rec.interest_saved,
            breakdown=[MonthRowSchema.from_row(row) for row in rec.breakdown],
            continues_beyond_window=bool(rec.breakdown) and rec.breakdown[-1].balance > 0,
        )


class StrategyResponse(BaseModel):
    """Response for GET /v1/strategy"""

    user_id: str
    currency: str
    total_available_funds: float
    total_minimum_payments: float
    surplus: float
    recommendations: List[RecommendationSchema]
    total_months_to_debt_free: Optional[int] = None
    total_interest_saved: float
    calculated_at: datetime

    @classmethod
    def from_strategy(cls, user_id: str, currency: str, strategy: Strategy) -> "StrategyResponse":
        return cls(
            user_id=user_id,
            currency=currency,
            total_available_funds=strategy.total_available_funds,
            total_minimum_payments=strategy.total_minimum_payments,
            surplus=strategy.surplus,
            recommendations=[
                RecommendationSchema.from_recommendation(r) for r in strategy.recommendations
            ],
            total_months_to_debt_free=finite_or_none(strategy.total_months_to_debt_free),
            total_interest_saved=strategy.total_interest_saved,
            calculated_at=datetime.now(timezone.utc),
        )


class SummaryResponse(BaseModel):
    """Response for GET /v1/summary"""

    user_id: str
    total_balance: float
    total_minimum: float
    max_rate: float
    min_rate: float
    count: int

    @classmethod
    def from_summary(cls, user_id: str, summary: DebtSummary) -> "SummaryResponse":
        return cls(
            user_id=user_id,
            total_balance=summary.total_balance,
            total_minimum=summary.total_minimum,
            max_rate=summary.max_rate,
            min_rate=summary.min_rate,
            count=summary.count,
        )


class ExportResponse(BaseModel):
    """Response for GET /v1/export"""

    debts: List[DebtResponse]
    profile: Optional[ProfileResponse] = None
    exported_at: datetime


class ImportedDebt(DebtRequest):
    """One debt of an import document; identity fields are kept when present"""

    debt_id: Optional[str] = Field(None, min_length=1, max_length=36)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_draft(self) -> DebtDraft:
        return DebtDraft(**self.model_dump(exclude={"debt_id", "created_at", "updated_at"}))


class ImportRequest(BaseModel):
    """Request body for POST /v1/import; an export document is accepted as is"""

    debts: List[ImportedDebt] = Field(default_factory=list)
    profile: Optional[ProfileRequest] = None


class ImportResponse(BaseModel):
    """Response for POST /v1/import"""

    user_id: str
    debts_imported: int
    profile_imported: bool
