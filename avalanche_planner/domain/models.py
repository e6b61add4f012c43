"""Domain models - immutable value types for debts, profiles and projections"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import ClassVar, Optional, Tuple, Union


class DebtCategory(str, Enum):
    """Kind of obligation: open-ended credit or a fixed-term loan"""

    REVOLVING = "revolving"
    INSTALLMENT = "installment"


class FeeMode(str, Enum):
    """How an installment loan fee is charged"""

    UPFRONT = "upfront"  # added to principal once
    MONTHLY = "monthly"  # added to every period's payment


SUPPORTED_CURRENCIES = ("USD", "EUR", "GBP", "CAD", "AUD", "JPY")


@dataclass(frozen=True)
class LoanFee:
    """Fee attached to an installment loan"""

    amount: float
    mode: FeeMode


@dataclass(frozen=True)
class RevolvingDebt:
    """Open-ended credit such as a credit card"""

    category: ClassVar[DebtCategory] = DebtCategory.REVOLVING

    id: str
    creditor_name: str
    balance: float
    interest_rate: float  # APR, percent
    minimum_payment: Optional[float] = None  # None means "derive"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class InstallmentDebt:
    """Fixed-term loan with optional term and fee"""

    category: ClassVar[DebtCategory] = DebtCategory.INSTALLMENT

    id: str
    creditor_name: str
    balance: float
    interest_rate: float
    minimum_payment: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    term_months: Optional[int] = None
    fee: Optional[LoanFee] = None


DebtRecord = Union[RevolvingDebt, InstallmentDebt]


@dataclass(frozen=True)
class DebtDraft:
    """
    Candidate debt as submitted by a caller.

    Nothing here is checked; run it through validate() before building a
    DebtRecord from it.
    """

    creditor_name: Optional[str] = None
    category: Optional[str] = None
    balance: Optional[float] = None
    minimum_payment: Optional[float] = None
    interest_rate: Optional[float] = None
    term_months: Optional[int] = None
    fee: Optional[float] = None
    fee_mode: Optional[str] = None


@dataclass(frozen=True)
class UserProfile:
    """Monthly funds available for debt repayment plus preferences"""

    available_funds: float
    currency: str = "USD"
    default_min_payment_percent: float = 2.0
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class MonthRow:
    """One month of an amortization breakdown"""

    month: int  # 1-based
    interest: float
    principal: float
    payment: float
    balance: float


@dataclass(frozen=True)
class AvalancheRecommendation:
    """Projected payment plan for a single debt"""

    debt_id: str
    creditor_name: str
    category: DebtCategory
    balance: float
    interest_rate: float
    minimum_payment: float
    recommended_payment: float
    is_target: bool
    months_to_payoff: Union[int, float]  # math.inf when never paid off
    interest_saved: float
    breakdown: Tuple[MonthRow, ...] = ()


@dataclass(frozen=True)
class Strategy:
    """Single-period avalanche allocation across all debts"""

    total_available_funds: float
    total_minimum_payments: float
    surplus: float
    recommendations: Tuple[AvalancheRecommendation, ...] = field(default_factory=tuple)
    total_months_to_debt_free: Union[int, float] = 0
    total_interest_saved: float = 0.0

    @property
    def target(self) -> Optional[AvalancheRecommendation]:
        return next((r for r in self.recommendations if r.is_target), None)


@dataclass(frozen=True)
class DebtSummary:
    """Portfolio-level totals"""

    total_balance: float
    total_minimum: float
    max_rate: float
    min_rate: float
    count: int
