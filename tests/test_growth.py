import math

import pytest

from wealthcalc.core.growth import (
    compound_lump_sum,
    fixed_deposit_value,
    gold_bond_value,
    listing_then_compound,
    payout_scheme_value,
    quarterly_payout_scheme_value,
    recurring_contribution_future_value,
    recurring_schedule,
    step_up_recurring_future_value,
)
from wealthcalc.core.rates import cagr, effective_monthly_rate, to_decimal, to_percent
from wealthcalc.models import Compounding, Frequency


def test_lump_sum_annual_compounding():
    value = compound_lump_sum(100000, 0.08, 5)
    assert round(value, 2) == 146932.81


def test_lump_sum_invalid_inputs_return_zero():
    assert compound_lump_sum(0, 0.08, 5) == 0.0
    assert compound_lump_sum(-100, 0.08, 5) == 0.0
    assert compound_lump_sum(100000, 0.08, 0) == 0.0
    assert compound_lump_sum(100000, None, 5) == 0.0


def test_lump_sum_zero_rate_keeps_principal():
    assert compound_lump_sum(100000, 0.0, 5) == 100000


def test_monthly_sip_annuity_due():
    # 5,000/month at 12% p.a. (1% per month), contributions at the start of each month
    value = recurring_contribution_future_value(5000, 0.12, 60)
    assert value == pytest.approx(412431.83, abs=0.01)


def test_monthly_sip_zero_rate_is_plain_sum():
    assert recurring_contribution_future_value(5000, 0.0, 60) == 300000


def test_recurring_missing_rate_returns_zero():
    assert recurring_contribution_future_value(5000, None, 60) == 0.0
    assert recurring_contribution_future_value(0, 0.12, 60) == 0.0


def test_step_up_without_increase_matches_closed_form():
    closed = recurring_contribution_future_value(5000, 0.12, 60)
    iterated = step_up_recurring_future_value(5000, 0.0, 5, 0.12)
    assert math.isclose(closed, iterated, rel_tol=1e-9)


def test_step_up_increases_future_value():
    flat = step_up_recurring_future_value(5000, 0.0, 10, 0.12)
    stepped = step_up_recurring_future_value(5000, 0.10, 10, 0.12)
    assert stepped > flat


def test_step_up_cap_is_reapplied_every_year():
    steps = list(
        recurring_schedule(
            100000,
            0.0,
            3,
            frequency=Frequency.YEARLY,
            compounding=Compounding.ANNUALLY,
            step_up_rate=0.10,
            yearly_cap=105000,
        )
    )
    contributions = [step.contribution for step in steps]
    assert contributions == pytest.approx([100000, 105000, 105000])
    assert steps[-1].balance == pytest.approx(310000)


def test_yearly_schedule_grows_last_deposit_for_the_remaining_fraction():
    steps = list(
        recurring_schedule(100000, 0.10, 2.5, frequency=Frequency.YEARLY, compounding=Compounding.ANNUALLY)
    )

    assert [step.contribution for step in steps] == [100000, 100000, 100000]
    assert [step.elapsed for step in steps] == [1, 2, 2.5]
    assert steps[-1].balance == pytest.approx(((100000 * 1.1 + 100000) * 1.1 + 100000) * 1.1**0.5)


def test_recurring_deposit_uses_compounding_frequency():
    quarterly = recurring_contribution_future_value(1000, 0.065, 12, Compounding.QUARTERLY)
    monthly = recurring_contribution_future_value(1000, 0.065, 12, Compounding.MONTHLY)
    # quarterly compounding has a slightly lower effective monthly rate
    assert quarterly < monthly


def test_effective_monthly_rates():
    quarterly = effective_monthly_rate(0.065, Compounding.QUARTERLY)
    assert (1 + quarterly) ** 3 == pytest.approx(1 + 0.065 / 4)

    annual = effective_monthly_rate(0.065, Compounding.ANNUALLY)
    assert (1 + annual) ** 12 == pytest.approx(1.065)

    assert effective_monthly_rate(0.12, Compounding.MONTHLY) == pytest.approx(0.01)


def test_quarterly_payout_scheme():
    payout = quarterly_payout_scheme_value(1_000_000, 0.082, 5)

    assert payout.period_interest == pytest.approx(20500)
    assert payout.total_interest == pytest.approx(410000)
    assert payout.maturity_value == pytest.approx(1_410_000)
    assert payout.period_interest * 4 * 5 == payout.total_interest


@pytest.mark.parametrize(
    "principal, rate, years",
    [(1_000_000, 0.082, 5), (250000, 0.074, 3), (1_500_000, 0.0825, 2.5)],
)
def test_payout_interest_doubles_with_tenure(principal, rate, years):
    single = payout_scheme_value(principal, rate, years, 4)
    double = payout_scheme_value(principal, rate, 2 * years, 4)

    assert double.total_interest == 2 * single.total_interest
    assert double.period_interest == single.period_interest


def test_payout_scheme_zero_rate_accepted_when_minimum_allows():
    payout = quarterly_payout_scheme_value(1_000_000, 0.0, 5)
    assert payout is not None
    assert payout.maturity_value == 1_000_000


def test_payout_scheme_rejects_missing_or_low_rate():
    assert quarterly_payout_scheme_value(1_000_000, None, 5) is None
    assert quarterly_payout_scheme_value(1_000_000, 0.0005, 5, minimum_rate=0.001) is None


def test_monthly_payout_scheme():
    payout = payout_scheme_value(900000, 0.074, 5, 12)
    assert payout.period_interest == pytest.approx(5550)
    assert payout.maturity_value == pytest.approx(900000 + 5550 * 60)


def test_fixed_deposit_quarterly():
    value = fixed_deposit_value(100000, 0.07, 1, Compounding.QUARTERLY)
    assert value == pytest.approx(107185.90, abs=0.01)


def test_fixed_deposit_cumulative_short_tenure_is_simple_interest():
    value = fixed_deposit_value(100000, 0.07, 0.5, Compounding.CUMULATIVE)
    assert value == pytest.approx(103500)

    long_value = fixed_deposit_value(100000, 0.07, 2, Compounding.CUMULATIVE)
    assert long_value == pytest.approx(100000 * 1.07**2)


def test_gold_bond_adds_semi_annual_coupon():
    value = gold_bond_value(100000, 0.08, 5)
    assert value.gold_value == pytest.approx(146932.81, abs=0.01)
    assert value.coupon_interest == pytest.approx(13227.08, abs=0.01)
    assert value.maturity_value == pytest.approx(value.gold_value + value.coupon_interest)


def test_listing_then_compound():
    assert listing_then_compound(120000, 0.12, 0) == 120000
    assert listing_then_compound(120000, 0.12, 2) == pytest.approx(120000 * 1.12**2)


def test_rate_helpers():
    assert to_decimal(8.2) == pytest.approx(0.082)
    assert to_percent(0.082) == pytest.approx(8.2)
    assert to_decimal(None) is None
    assert cagr(100000, 146932.81, 5) == pytest.approx(0.08, abs=1e-6)
    assert cagr(0, 100, 5) == 0.0
