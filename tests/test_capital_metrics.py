"""Test sources & uses and the underwriting metrics"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from proforma.capital import calculate_capital_structure
from proforma.metrics import (
    assess_dept_margin, assess_gop_margin, assess_rooms_margin, assess_yield_on_cost,
    stabilized_year, underwriting_metrics, yield_on_cost,
)
from proforma.models import DealBudget, FinancingSettings
from proforma.statements import PL_LAYOUT, PLCell, PLRow

def test_capital_structure_default():
    """Verify loan and equity split at 40% LTC"""
    cs = calculate_capital_structure(10_000_000, FinancingSettings())
    assert cs.total_uses == pytest.approx(10_000_000)
    assert cs.construction == pytest.approx(10_000_000)
    assert cs.loan_amount == pytest.approx(4_000_000)
    assert cs.equity_required == pytest.approx(6_000_000)
    assert cs.balanced
    assert cs.funding_sequence[0][0] == "equity"

def test_loan_first_order():
    cs = calculate_capital_structure(10_000_000, FinancingSettings(investment_order="LOAN_FIRST"))
    assert [name for name, _ in cs.funding_sequence] == ["loan", "equity"]

def test_all_equity_without_financing():
    cs = calculate_capital_structure(5_000_000)
    assert cs.loan_amount == 0.0
    assert cs.equity_required == pytest.approx(5_000_000)

def test_budget_with_contingency():
    budget = DealBudget(construction=1_000_000, ffe=200_000)
    assert budget.subtotal == 1_200_000
    assert budget.contingency == pytest.approx(120_000)
    assert budget.grand_total == pytest.approx(1_320_000)

    cs = calculate_capital_structure(budget.grand_total, FinancingSettings(ltc_pct=50), budget)
    assert cs.ffe == 200_000
    assert cs.contingency == pytest.approx(120_000)
    assert cs.total_uses == pytest.approx(1_320_000)
    assert cs.loan_amount == pytest.approx(660_000)
    assert cs.total_sources == pytest.approx(cs.total_uses)

def stub_rows(year, **totals):
    rows = []
    for row_id, label, group, kind in PL_LAYOUT:
        rows.append(PLRow(row_id, label, group, kind, [PLCell(year, totals.get(row_id.replace("-", "_"), 0.0))]))
    return rows

def test_stabilized_year():
    assert stabilized_year(10) == 4
    assert stabilized_year(3) == 3
    assert stabilized_year(0) == 1

def test_underwriting_metrics():
    rows = stub_rows(
        4,
        total_revenue=1_000_000, rooms_revenue=600_000, fnb_revenue=300_000, spa_revenue=100_000,
        rooms_direct_costs=180_000, fnb_direct_costs=240_000, wellness_direct_costs=110_000,
        gop=350_000, ebitda=250_000,
    )
    m = underwriting_metrics(rows, project_cost=2_000_000, exit_year=10)
    assert m["year"] == 4
    assert m["yield_on_cost"] == pytest.approx(0.125)
    assert m["gop_margin"] == pytest.approx(0.35)
    assert m["ebitda_margin"] == pytest.approx(0.25)
    assert m["rooms_margin"] == pytest.approx(0.70)
    assert m["fnb_margin"] == pytest.approx(0.20)
    assert m["wellness_margin"] == pytest.approx(-0.10)
    assert m["assessments"] == {
        "yield_on_cost": "good",
        "gop_margin": "good",
        "rooms_margin": "good",
        "fnb_margin": "green",
        "wellness_margin": "red",
    }

def test_metrics_on_empty_rows():
    m = underwriting_metrics([], project_cost=0.0, exit_year=5)
    assert m["yield_on_cost"] == 0.0
    assert m["gop_margin"] == 0.0

def test_assessments():
    assert yield_on_cost(80, 1000) == pytest.approx(0.08)
    assert assess_yield_on_cost(0.08) == "ok"
    assert assess_yield_on_cost(0.05) == "weak"
    assert assess_gop_margin(0.10) == "weak"
    assert assess_gop_margin(0.60) == "unrealistic"
    assert assess_dept_margin(0.05) == "amber"
    assert assess_rooms_margin(0.55) == "weak"
