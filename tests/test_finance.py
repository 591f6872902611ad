"""Test debt schedule, balloon detection and DSCR"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from proforma.finance import (
    balance_at_year_end, build_debt_schedule, debt_service_by_year, dscr, dscr_by_year,
    financing_amounts, first_year_interest, interest_by_year, monthly_payment, principal_by_year,
)
from proforma.models import FinancingSettings
from proforma.series import empty_series

def base_financing(**kw):
    params = dict(ltc_pct=40, interest_rate_pct=5.5, loan_term_years=20, amort_years=25, io_period_years=0)
    params.update(kw)
    return FinancingSettings(**params)

def test_balloon_when_amortization_exceeds_term():
    sched = build_debt_schedule(base_financing(), 2_500_000)
    assert sched.loan_amount == pytest.approx(1_000_000)
    r = 0.055 / 12
    pmt = 1_000_000 * r * (1 + r) ** 300 / ((1 + r) ** 300 - 1)
    assert sched.monthly_payment == pytest.approx(pmt)
    assert len(sched.rows) == 240
    expected_balance = 1_000_000 * (1 + r) ** 240 - pmt * ((1 + r) ** 240 - 1) / r
    assert sched.has_balloon
    assert sched.balloon_payment == pytest.approx(expected_balance, rel=1e-9)
    assert sched.balloon_payment == sched.rows[-1]["balance"]
    assert sched.annual_debt_service == pytest.approx(12 * pmt)

def test_no_balloon_when_fully_amortizing():
    sched = build_debt_schedule(base_financing(loan_term_years=25), 2_500_000)
    assert not sched.has_balloon
    assert sched.balloon_payment == 0.0
    short = build_debt_schedule(base_financing(loan_term_years=25, amort_years=20), 2_500_000)
    assert not short.has_balloon
    assert short.rows[-1]["payment"] == pytest.approx(0.0, abs=1e-6), "Loan is repaid before maturity"

def test_interest_only_period():
    sched = build_debt_schedule(base_financing(io_period_years=2), 2_500_000)
    io = 1_000_000 * 0.055 / 12
    assert sched.monthly_io_payment == pytest.approx(io)
    for row in sched.rows[:24]:
        assert row["payment"] == pytest.approx(io)
        assert row["principal"] == 0.0
    assert sched.rows[23]["balance"] == pytest.approx(1_000_000)
    assert sched.rows[24]["payment"] == pytest.approx(sched.monthly_payment)
    assert first_year_interest(sched) == pytest.approx(12 * io)

def test_zero_rate_straight_line():
    sched = build_debt_schedule(base_financing(interest_rate_pct=0, loan_term_years=10, amort_years=10), 3_000_000)
    assert sched.monthly_payment == pytest.approx(10_000.0)
    assert sched.rows[-1]["balance"] == pytest.approx(0.0, abs=1e-6)
    assert not sched.has_balloon

def test_zero_loan_and_missing_financing():
    assert build_debt_schedule(base_financing(ltc_pct=0), 2_500_000).rows == []
    empty = build_debt_schedule(None, 2_500_000)
    assert empty.loan_amount == 0.0 and not empty.has_balloon

def test_financing_amounts():
    amounts = financing_amounts(base_financing(), 2_500_000)
    assert amounts["loan_amount"] == pytest.approx(1_000_000)
    assert amounts["equity_required"] == pytest.approx(1_500_000)
    assert financing_amounts(None, 100)["equity_required"] == 100

def test_yearly_rollups():
    sched = build_debt_schedule(base_financing(), 2_500_000)
    service = debt_service_by_year(sched)
    assert service["y1"] == pytest.approx(12 * sched.monthly_payment)
    interest = interest_by_year(sched)
    principal = principal_by_year(sched)
    assert interest["y1"] + principal["y1"] == pytest.approx(service["y1"])
    assert balance_at_year_end(sched, 1) == pytest.approx(1_000_000 - principal["y1"])
    assert balance_at_year_end(sched, 0) == pytest.approx(1_000_000)

def test_monthly_payment_matches_annuity():
    assert monthly_payment(120_000, 0.0, 120) == pytest.approx(1000.0)
    assert monthly_payment(100_000, 0.06, 360) == pytest.approx(599.55, abs=0.01)

def test_dscr():
    assert dscr(150.0, 100.0) == 1.5
    assert dscr(150.0, 0.0) == 0.0
    sched = build_debt_schedule(base_financing(), 2_500_000)
    ebitda = empty_series(2 * sched.annual_debt_service)
    out = dscr_by_year(ebitda, sched, 5)
    assert out["y3"] == pytest.approx(2.0)
    assert out["y6"] == 0.0

def test_schedule_length_is_bounded():
    sched = build_debt_schedule(base_financing(loan_term_years=5000, amort_years=5000), 2_500_000)
    assert len(sched.rows) == 50 * 12
