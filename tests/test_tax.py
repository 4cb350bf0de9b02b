import pytest

from wealthcalc.core.instruments import UnknownInstrumentError
from wealthcalc.core.tax import (
    annual_tax_breakdown,
    calculate_tax,
    cost_inflation_index,
    indexed_cost,
    tax_rule_for,
)
from wealthcalc.models import EtfKind, EvolutionRow, InstrumentType, TaxContext, TaxPolicy


def context(principal=None, returns=None, slab=0.30, used=0.0) -> TaxContext:
    return TaxContext(incomeTaxSlab=slab, principal=principal, returns=returns, ltcgExemptionUsed=used)


def test_long_term_capital_gains_use_exemption_on_returns():
    result = calculate_tax(1_200_000, InstrumentType.EQUITY, 5, context(principal=1_000_000))

    assert result.taxAmount == 10000
    assert result.postTaxCorpus == 1_190_000
    assert result.taxRate == pytest.approx(0.83)
    assert result.policy == TaxPolicy.CAPITAL_GAINS


def test_short_term_capital_gains():
    result = calculate_tax(1_200_000, InstrumentType.SIP, 0.5, context(principal=1_000_000))
    assert result.taxAmount == pytest.approx(30000)


def test_elss_needs_three_years_for_long_term():
    short = calculate_tax(1_200_000, InstrumentType.ELSS, 2, context(principal=1_000_000))
    long = calculate_tax(1_200_000, InstrumentType.ELSS, 3, context(principal=1_000_000))

    assert short.taxAmount == pytest.approx(30000)
    assert long.taxAmount == pytest.approx(10000)


def test_used_exemption_reduces_the_available_one():
    result = calculate_tax(1_200_000, InstrumentType.EQUITY, 5, context(principal=1_000_000, used=50000))
    assert result.taxAmount == pytest.approx(15000)


def test_gains_below_exemption_are_untaxed():
    result = calculate_tax(1_080_000, InstrumentType.EQUITY, 5, context(principal=1_000_000))
    assert result.taxAmount == 0
    assert result.postTaxCorpus == 1_080_000


def test_exempt_instruments():
    for instrument in (InstrumentType.PPF, InstrumentType.SSY):
        result = calculate_tax(4_000_000, instrument, 15, context(principal=2_250_000))
        assert result.taxAmount == 0
        assert result.postTaxCorpus == 4_000_000


def test_interest_taxed_at_slab():
    result = calculate_tax(150000, InstrumentType.FD, 5, context(principal=100000))
    assert result.taxAmount == pytest.approx(15000)
    assert result.taxableGain == pytest.approx(50000)


def test_returns_alone_are_enough():
    result = calculate_tax(150000, InstrumentType.NSC, 5, context(returns=50000))
    assert result.taxAmount == pytest.approx(15000)


def test_nps_taxes_forty_percent_of_returns():
    result = calculate_tax(2_000_000, InstrumentType.NPS, 20, context(principal=1_000_000))

    assert result.taxAmount == pytest.approx(120000)
    assert result.postTaxCorpus == pytest.approx(1_880_000)


def test_gold_bond_exempt_after_lock_in():
    held = calculate_tax(160000, InstrumentType.SGB, 5, context(principal=100000))
    early = calculate_tax(130000, InstrumentType.SGB, 3, context(principal=100000))

    assert held.taxAmount == 0
    assert early.taxAmount == pytest.approx(4500)


def test_debt_fund_long_term_uses_indexed_cost():
    result = calculate_tax(
        150000, InstrumentType.DEBT_MUTUAL_FUND, 3, context(principal=100000), inflation_rate=0.06
    )
    assert result.taxAmount == pytest.approx(6179.68, abs=0.01)
    assert result.policy == TaxPolicy.INDEXED


def test_debt_fund_short_term_taxed_at_slab():
    result = calculate_tax(150000, InstrumentType.DEBT_MUTUAL_FUND, 2, context(principal=100000))
    assert result.taxAmount == pytest.approx(15000)


def test_cost_inflation_index_table_and_projection():
    assert cost_inflation_index(2001) == 100
    assert cost_inflation_index(2020) == 301
    assert cost_inflation_index(2027) == 409
    assert indexed_cost(100000, 5, purchase_year=2015) == pytest.approx(118503.94, abs=0.01)


def test_etf_kind_selects_rule():
    assert tax_rule_for(InstrumentType.ETF).policy == TaxPolicy.CAPITAL_GAINS
    assert tax_rule_for(InstrumentType.ETF, EtfKind.GOLD).policy == TaxPolicy.INDEXED
    assert tax_rule_for(InstrumentType.ETF, EtfKind.INTERNATIONAL).policy == TaxPolicy.CAPITAL_GAINS


def test_unknown_instrument_fails_loudly():
    with pytest.raises(UnknownInstrumentError):
        tax_rule_for("crypto")
    with pytest.raises(UnknownInstrumentError):
        calculate_tax(100000, "crypto", 5, context(principal=50000))


def test_tds_note_uses_senior_threshold():
    regular = calculate_tax(1_225_000, InstrumentType.FD, 5, context(principal=1_000_000))
    senior = calculate_tax(
        1_225_000, InstrumentType.FD, 5, context(principal=1_000_000), senior_citizen=True
    )
    # 45,000 a year sits between the two thresholds
    assert regular.tdsInfo is not None
    assert senior.tdsInfo is None


def test_post_tax_never_exceeds_future_value():
    for instrument in InstrumentType:
        for holding in (0.5, 2, 5, 10):
            result = calculate_tax(250000, instrument, holding, context(principal=100000))
            assert 0 <= result.taxAmount <= 150000
            assert result.postTaxCorpus <= 250000


def test_zero_corpus_has_no_tax():
    result = calculate_tax(0, InstrumentType.FD, 5, context(principal=0))
    assert result.taxAmount == 0
    assert result.taxRate == 0


def test_annual_breakdown_only_for_interest_schemes():
    rows = [
        EvolutionRow(period=1, label="Year 1", openingBalance=0, contribution=100000, growth=7000, closingBalance=107000),
        EvolutionRow(period=2, label="Year 2", openingBalance=107000, contribution=0, growth=7490, closingBalance=114490),
    ]
    breakdown = annual_tax_breakdown(InstrumentType.FD, rows, 0.30)

    assert [row.tax for row in breakdown] == pytest.approx([2100, 2247])
    assert annual_tax_breakdown(InstrumentType.PPF, rows, 0.30) == []
