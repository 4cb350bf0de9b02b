import pytest

from wealthcalc.config import DEFAULT_CATEGORY_INFLATION
from wealthcalc.core.inflation import (
    future_price,
    inflation_view,
    purchasing_power,
    real_rate,
    real_value,
)


def test_zero_inflation_or_zero_years_keeps_value():
    assert real_value(100000, 0.0, 10) == 100000
    assert real_value(100000, 0.06, 0) == 100000


def test_real_value_deflates():
    assert real_value(106, 0.06, 1) == pytest.approx(100)
    assert real_value(100000, 0.06, 10) < 100000


def test_real_rate_fisher():
    assert real_rate(0.12, 0.06) == pytest.approx(0.05660377, abs=1e-8)
    assert real_rate(0.06, 0.06) == pytest.approx(0.0)


def test_future_price():
    assert future_price(100, 0.10, 2) == pytest.approx(121)


def test_inflation_view():
    view = inflation_view(146932.81, 100000, 0.08, 0.06, 5, post_tax_value=140000)

    assert view.realFutureValue == pytest.approx(146932.81 / 1.06**5, abs=0.01)
    assert view.realReturns == pytest.approx(view.realFutureValue - 100000, abs=0.01)
    assert view.realRate == pytest.approx(1.89)
    assert view.realPostTaxValue < 140000


def test_purchasing_power_by_category():
    rows = purchasing_power(1_000_000, 10, DEFAULT_CATEGORY_INFLATION)
    by_category = {row.category: row.realValue for row in rows}

    assert set(by_category) == set(DEFAULT_CATEGORY_INFLATION)
    # education inflates fastest, wholesale slowest
    assert by_category["education"] == min(by_category.values())
    assert by_category["wholesale"] == max(by_category.values())
