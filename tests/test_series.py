"""Test compounding indices, ramp series and macro resolution"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from proforma.models import Deal, ExitSettings, MacroOverrides, RampSettings, RefinanceTerms, SaleTerms
from proforma.ramp import exit_year_index, resolve_macro
from proforma.series import (
    YEARS, build_index, ramp_series, rates_from_flat, rates_from_override,
    resolve_rates, year_key,
)

def test_index_floor_and_compounding():
    idx = build_index(0.03)
    for y in range(0, 5):
        assert idx[year_key(y)] == 1.0, f"Year {y} should be at the floor"
    for y in range(5, 11):
        expected = idx[year_key(y - 1)] * 1.03
        assert idx[year_key(y)] == pytest.approx(expected, rel=1e-12)
    assert idx["y10"] == pytest.approx(1.03 ** 6)

def test_index_custom_floor():
    idx = build_index(0.10, floor_year=1)
    assert idx["y1"] == 1.0
    assert idx["y2"] == pytest.approx(1.10)
    assert idx["y3"] == pytest.approx(1.21)

def test_sparse_override_missing_years_are_zero_rate():
    idx = build_index(rates_from_override({"y5": 0.05, "y7": 0.10}))
    assert idx["y5"] == pytest.approx(1.05)
    assert idx["y6"] == pytest.approx(1.05), "Year 6 has no override, rate 0"
    assert idx["y7"] == pytest.approx(1.155)
    assert idx["y10"] == pytest.approx(1.155)

def test_override_ignores_bad_keys():
    rates = rates_from_override({"y3": 0.02, "year5": 0.5, "y42": 0.9})
    assert rates["y3"] == 0.02
    assert set(rates) == {year_key(y) for y in YEARS}

def test_resolve_rates_fallback():
    assert resolve_rates(3.0, None) == rates_from_flat(3.0)
    assert resolve_rates(3.0, {}) == rates_from_flat(3.0), "Empty override falls back to flat"
    assert resolve_rates(3.0, {"y5": 0.01})["y5"] == 0.01
    assert resolve_rates(3.0, {"y5": 0.01})["y6"] == 0.0
    assert rates_from_flat(3.0)["y8"] == pytest.approx(0.03)

def test_ramp_series():
    s = ramp_series([0.8, 0.9, 1.0, 1.0])
    assert s["y0"] == 1.0
    assert s["y1"] == 0.8
    assert s["y2"] == 0.9
    assert all(s[year_key(y)] == 1.0 for y in range(3, 11))

def test_exit_year_index():
    assert exit_year_index(ExitSettings(strategy="SALE", sale=SaleTerms(exit_year=7))) == 7
    assert exit_year_index(ExitSettings(strategy="REFINANCE", refinance=RefinanceTerms(refinance_year=3))) == 3
    assert exit_year_index(ExitSettings(strategy="HOLD_FOREVER")) == 10
    assert exit_year_index(None) == 10
    assert exit_year_index(ExitSettings(strategy="SALE", sale=SaleTerms(exit_year=15))) == 10
    assert exit_year_index(ExitSettings(strategy="SALE", sale=SaleTerms(exit_year=0))) == 1

def test_resolve_macro_uses_overrides():
    deal = Deal(
        id="d1",
        ramp=RampSettings(topline_growth_pct=3, inflation_pct=2),
        macro=MacroOverrides(inflation_rate_by_year={"y5": 0.04}),
        exit=ExitSettings(strategy="SALE", sale=SaleTerms(exit_year=6)),
    )
    macro = resolve_macro(deal)
    assert macro.exit_year == 6
    assert macro.growth_index["y5"] == pytest.approx(1.03)
    assert macro.inflation_index["y5"] == pytest.approx(1.04)
    assert macro.inflation_index["y6"] == pytest.approx(1.04)
    assert macro.revenue_ramp["y1"] == 0.8
    assert macro.cost_ramp["y1"] == 1.1

def test_resolve_macro_missing_deal():
    macro = resolve_macro(None)
    assert macro.exit_year == 10
    assert macro.growth_index["y4"] == 1.0
