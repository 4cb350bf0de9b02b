import pytest

from wealthcalc.core.allocation import (
    apply_equity_cap,
    average_weighted_return,
    is_balanced,
    max_equity_for_age,
    resolve_allocation,
    weighted_return,
)
from wealthcalc.models import AllocationMix, AssetReturns


@pytest.mark.parametrize(
    "age, expected",
    [
        (25, 100),
        (35, 100),
        (36, 98),  # 97.5 rounds up
        (40, 88),  # 87.5 rounds up
        (45, 75),
        (50, 75),
        (55, 63),  # 62.5 rounds up
        (60, 50),
        (70, 50),
    ],
)
def test_max_equity_for_age(age, expected):
    assert max_equity_for_age(age) == expected


def test_max_equity_never_rises_with_age():
    caps = [max_equity_for_age(age) for age in range(35, 101)]

    assert all(later <= earlier for earlier, later in zip(caps, caps[1:]))
    assert min(caps) >= 50
    assert caps[-1] == 50


def test_excess_goes_to_government_bonds_when_others_are_empty():
    capped = apply_equity_cap(AllocationMix(equity=100), 40)

    assert capped.equity == 88
    assert capped.governmentBonds == pytest.approx(12)
    assert capped.total() == pytest.approx(100)


def test_excess_is_redistributed_proportionally():
    mix = AllocationMix(equity=90, corporateBonds=6, governmentBonds=3, alternative=1)
    capped = apply_equity_cap(mix, 40)

    # 2 points of excess split 6:3:1
    assert capped.equity == 88
    assert capped.corporateBonds == pytest.approx(7.2)
    assert capped.governmentBonds == pytest.approx(3.6)
    assert capped.alternative == pytest.approx(1.2)
    assert capped.total() == pytest.approx(100)


def test_allocation_under_cap_is_unchanged():
    mix = AllocationMix(equity=50, corporateBonds=30, governmentBonds=20)
    assert apply_equity_cap(mix, 45) == mix


def test_weighted_return():
    mix = AllocationMix(equity=50, corporateBonds=30, governmentBonds=20)
    returns = AssetReturns(equity=12, corporateBonds=9, governmentBonds=8, alternative=8)
    assert weighted_return(mix, returns) == pytest.approx(0.103)


def test_balance_tolerance():
    assert is_balanced(AllocationMix(equity=50, corporateBonds=30, governmentBonds=20))
    assert is_balanced(AllocationMix(equity=50.005, corporateBonds=30, governmentBonds=20))
    assert not is_balanced(AllocationMix(equity=50, corporateBonds=30, governmentBonds=15))


def test_average_return_without_binding_caps_equals_weighted():
    mix = AllocationMix(equity=100)
    returns = AssetReturns()
    assert average_weighted_return(mix, returns, 25, 5) == pytest.approx(weighted_return(mix, returns))


def test_average_return_declines_as_caps_tighten():
    mix = AllocationMix(equity=100)
    returns = AssetReturns()
    current_age_rate = weighted_return(apply_equity_cap(mix, 40), returns)
    averaged = average_weighted_return(mix, returns, 40, 15)
    assert averaged < current_age_rate


def test_resolve_allocation_always_enforces_current_age_cap():
    outcome = resolve_allocation(AllocationMix(equity=100), AssetReturns(), 40, 10)

    assert outcome.allocation.equity == 88
    assert outcome.max_equity == 88
    assert outcome.rate == pytest.approx(0.1152)


def test_resolve_allocation_without_age_skips_cap():
    outcome = resolve_allocation(AllocationMix(equity=100), AssetReturns(), None, 10)
    assert outcome.allocation.equity == 100
    assert outcome.max_equity is None
