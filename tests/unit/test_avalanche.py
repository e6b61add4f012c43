"""Unit tests for the avalanche allocation engine"""

import math
import pytest
from avalanche_planner.domain.avalanche import calculate_avalanche_strategy, summarize
from avalanche_planner.domain.minimum_payment import resolve_minimum_payment
from avalanche_planner.domain.models import DebtDraft, RevolvingDebt
from avalanche_planner.domain.validation import build_debt, validate


def _debt(debt_id: str, rate: float, balance: float = 2000.0, minimum: float = 50.0) -> RevolvingDebt:
    return RevolvingDebt(
        id=debt_id,
        creditor_name=debt_id.title(),
        balance=balance,
        interest_rate=rate,
        minimum_payment=minimum,
    )


def test_empty_debts_keep_all_funds_as_surplus():
    strategy = calculate_avalanche_strategy([], 750.0)

    assert strategy.recommendations == ()
    assert strategy.total_minimum_payments == 0
    assert strategy.surplus == 750.0
    assert strategy.total_months_to_debt_free == 0
    assert strategy.target is None


def test_surplus_goes_to_highest_rate_debt(credit_card, student_loan):
    """Test card at 24.99% (minimum 2% -> 100) takes the 700 surplus over the 6.5% loan"""
    strategy = calculate_avalanche_strategy([student_loan, credit_card], 1000.0, 6, 2)

    assert strategy.total_minimum_payments == pytest.approx(300.0)
    assert strategy.surplus == pytest.approx(700.0)

    card, loan = strategy.recommendations
    assert card.debt_id == "card"
    assert card.minimum_payment == pytest.approx(100.0)
    assert card.is_target is True
    assert card.recommended_payment == pytest.approx(800.0)

    assert loan.debt_id == "student"
    assert loan.is_target is False
    assert loan.recommended_payment == pytest.approx(200.0)


def test_recommendations_sorted_by_rate_descending():
    debts = [_debt("low", 3.5), _debt("high", 29.99), _debt("mid", 15.0)]
    strategy = calculate_avalanche_strategy(debts, 1000.0)

    assert [r.debt_id for r in strategy.recommendations] == ["high", "mid", "low"]


def test_equal_rates_keep_input_order():
    debts = [_debt("first", 10.0), _debt("top", 20.0), _debt("second", 10.0)]
    strategy = calculate_avalanche_strategy(debts, 1000.0)

    assert [r.debt_id for r in strategy.recommendations] == ["top", "first", "second"]


def test_exactly_one_target_with_surplus():
    debts = [_debt("a", 12.0), _debt("b", 18.0), _debt("c", 18.0)]
    strategy = calculate_avalanche_strategy(debts, 400.0)

    targets = [r for r in strategy.recommendations if r.is_target]
    assert len(targets) == 1
    assert targets[0].debt_id == "b"
    assert targets[0].recommended_payment == pytest.approx(50.0 + 250.0)


def test_no_target_when_funds_only_cover_minimums():
    debts = [_debt("a", 12.0), _debt("b", 18.0)]
    strategy = calculate_avalanche_strategy(debts, 100.0)

    assert strategy.surplus == 0
    assert not any(r.is_target for r in strategy.recommendations)
    assert strategy.total_months_to_debt_free == math.inf
    assert strategy.total_interest_saved == 0


def test_surplus_never_negative_when_funds_fall_short():
    debts = [_debt("a", 12.0), _debt("b", 18.0)]
    strategy = calculate_avalanche_strategy(debts, 60.0)

    assert strategy.surplus == 0
    assert [r.recommended_payment for r in strategy.recommendations] == [50.0, 50.0]


def test_target_drives_aggregate_figures():
    debts = [_debt("a", 12.0), _debt("b", 18.0)]
    strategy = calculate_avalanche_strategy(debts, 300.0)
    target = strategy.target

    assert target.debt_id == "b"
    assert strategy.total_months_to_debt_free == target.months_to_payoff
    assert strategy.total_interest_saved == target.interest_saved


def test_interest_saved_only_for_target():
    debts = [_debt("a", 12.0), _debt("b", 18.0)]
    target, other = calculate_avalanche_strategy(debts, 300.0).recommendations

    assert target.interest_saved > 0
    assert other.interest_saved == 0


def test_breakdown_respects_window():
    strategy = calculate_avalanche_strategy([_debt("a", 12.0, balance=10000)], 300.0, months_to_show=9)

    assert len(strategy.recommendations[0].breakdown) == 9


def test_caller_debts_not_modified(credit_card, student_loan):
    calculate_avalanche_strategy([credit_card, student_loan], 1000.0)

    assert credit_card.minimum_payment is None


def test_calculation_is_deterministic(sample_debts):
    first = calculate_avalanche_strategy(sample_debts, 2500.0, 12, 2)
    second = calculate_avalanche_strategy(sample_debts, 2500.0, 12, 2)

    assert first == second


def test_mixed_portfolio_resolves_each_minimum(sample_debts):
    strategy = calculate_avalanche_strategy(sample_debts, 2500.0, 6, 2)
    by_id = {r.debt_id: r for r in strategy.recommendations}

    assert [r.debt_id for r in strategy.recommendations] == ["visa", "personal", "student", "auto"]
    for debt in sample_debts:
        assert by_id[debt.id].minimum_payment == pytest.approx(resolve_minimum_payment(debt, 2))

    # Upfront fee is part of the personal loan's projected balance
    personal = by_id["personal"].breakdown[0]
    assert personal.balance == pytest.approx(3100 - personal.principal)


def test_zero_funds_still_well_formed(sample_debts):
    strategy = calculate_avalanche_strategy(sample_debts, 0.0)

    assert strategy.surplus == 0
    assert len(strategy.recommendations) == len(sample_debts)
    assert strategy.target is None


def test_summarize_empty():
    summary = summarize([])

    assert summary.count == 0
    assert summary.total_balance == 0
    assert summary.max_rate == 0
    assert summary.min_rate == 0


def test_summarize_portfolio(sample_debts):
    summary = summarize(sample_debts, 2)

    assert summary.count == 4
    assert summary.total_balance == pytest.approx(35000.0)
    assert summary.max_rate == 24.99
    assert summary.min_rate == 4.2
    assert summary.total_minimum == pytest.approx(
        sum(resolve_minimum_payment(d, 2) for d in sample_debts)
    )


def test_validated_zero_rate_debt_with_huge_balance_does_not_raise():
    """Test the largest finite balance that validates still yields a projection"""
    draft = DebtDraft(creditor_name="Card", category="revolving", balance=1e300, interest_rate=0.0, minimum_payment=50.0)
    assert validate(draft) == []

    strategy = calculate_avalanche_strategy([build_debt(draft, debt_id="big")], 500.0)

    assert strategy.recommendations[0].months_to_payoff > 0
