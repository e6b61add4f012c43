"""Prometheus metrics for monitoring strategy calculations, debt submissions and request latency"""

from prometheus_client import Counter, Histogram

from avalanche_planner.domain.models import DebtRecord, Strategy

# Strategy metrics
strategy_counter = Counter(
    "avalanche_strategy_total",
    "Total avalanche strategies calculated",
    ["outcome"],  # targeted | no_surplus | empty
)

surplus_histogram = Histogram(
    "avalanche_surplus_amount",
    "Surplus funds directed at the target debt",
    buckets=[0, 50, 100, 250, 500, 1000, 2500, 5000],
)

# Debt metrics
debt_saved_counter = Counter(
    "avalanche_debts_saved_total",
    "Debts created or replaced",
    ["category"],  # revolving | installment
)

debt_rejected_counter = Counter(
    "avalanche_debts_rejected_total",
    "Debt submissions that failed validation",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_strategy(strategy: Strategy) -> None:
    """Record strategy metrics for monitoring how often surplus is available"""
    if not strategy.recommendations:
        outcome = "empty"
    elif strategy.target is None:
        outcome = "no_surplus"
    else:
        outcome = "targeted"
        surplus_histogram.observe(strategy.surplus)

    strategy_counter.labels(outcome=outcome).inc()


def record_debt_saved(debt: DebtRecord) -> None:
    debt_saved_counter.labels(category=debt.category.value).inc()
