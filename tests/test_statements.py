"""Test the USALI P&L: waterfall identities, horizon truncation and ratios"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dataclasses import replace

import pytest

from proforma.costs import payroll_from_simple
from proforma.finance import build_debt_schedule, first_year_interest
from proforma.models import *
from proforma.rooms import build_room_model
from proforma.statements import (
    PL_LAYOUT, apply_horizon, calculate_pl, ebitda_by_year, revenue_by_year, row_by_id,
)

def base_deal():
    return Deal(
        id="lisbon-30",
        name="Lisbon Boutique",
        room_types=[RoomType("Double", 20, 1.0), RoomType("Suite", 10, 1.5)],
        capex_total=6_000_000,
        room_revenue=build_room_model(adr=140),
        fnb=FnBModel(),
        other_revenue=OtherRevenueModel(),
        opex=OpexModel(),
        payroll=PayrollModel(roles=payroll_from_simple(PayrollSimple(rooms_count=30))),
        financing=FinancingSettings(),
        exit=ExitSettings(strategy="SALE", sale=SaleTerms(exit_year=5)),
    )

def totals(rows, row_id):
    return {c.year: c.total for c in row_by_id(rows, row_id).years}

def test_row_order_and_ids():
    rows = calculate_pl(base_deal())
    assert [r.id for r in rows] == [row_id for row_id, _, _, _ in PL_LAYOUT]
    assert all(len(r.years) == 10 for r in rows)
    assert row_by_id(rows, "goi").kind == "total"
    assert row_by_id(rows, "adr").group == "KPIS"

def test_waterfall_identities():
    rows = calculate_pl(base_deal())
    t = {r.id: totals(rows, r.id) for r in rows}
    for y in range(1, 11):
        assert t["goi"][y] == t["total-revenue"][y] - t["direct-costs-total"][y], f"Year {y}: GOI"
        assert t["gop"][y] == t["goi"][y] - t["undistributed-total"][y], f"Year {y}: GOP"
        fixed = t["management-fees"][y] + t["property-taxes"][y] + t["insurance"][y]
        assert t["ebitdar"][y] == pytest.approx(t["gop"][y] - fixed, abs=1e-6), f"Year {y}: EBITDAR"
        assert t["ebitda"][y] == t["ebitdar"][y] - t["rent"][y], f"Year {y}: EBITDA"
        net = t["ebitda"][y] - t["depreciation"][y] - t["interest-expense"][y]
        assert t["net-income"][y] == pytest.approx(net, abs=1e-6), f"Year {y}: net income"

def test_subtotals_add_up():
    rows = calculate_pl(base_deal())
    t = {r.id: totals(rows, r.id) for r in rows}
    for y in range(1, 6):
        rev = t["rooms-revenue"][y] + t["fnb-revenue"][y] + t["spa-revenue"][y] + t["other-operating-revenue"][y]
        assert t["total-revenue"][y] == pytest.approx(rev)
        rooms_direct = t["rooms-direct-payroll"][y] + t["rooms-commission"][y] + t["guest-supplies-cleaning"][y]
        assert t["rooms-direct-costs"][y] == pytest.approx(rooms_direct)
        direct = (t["rooms-direct-costs"][y] + t["fnb-direct-costs"][y] + t["me-direct-costs"][y]
                  + t["wellness-direct-costs"][y] + t["other-direct-costs"][y])
        assert t["direct-costs-total"][y] == pytest.approx(direct)

def test_horizon_truncation():
    rows = calculate_pl(base_deal())
    for row in rows:
        for cell in row.years:
            if cell.year > 5:
                assert cell.total == 0.0, f"{row.id} year {cell.year} should be truncated"
                assert cell.pct_of_total_revenue == 0.0
                assert cell.per_occupied_room == 0.0
                assert cell.per_available_room == 0.0
    assert totals(rows, "total-revenue")[5] > 0

def test_truncation_leaves_earlier_years_alone():
    deal = base_deal()
    held = calculate_pl(replace(deal, exit=ExitSettings(strategy="HOLD_FOREVER")))
    sold = calculate_pl(deal)
    for a, b in zip(held, sold):
        assert a.years[:5] == b.years[:5], f"{a.id} changed within the horizon"

def test_apply_horizon_directly():
    rows = calculate_pl(replace(base_deal(), exit=ExitSettings(strategy="HOLD_FOREVER")))
    cut = apply_horizon(rows, 3)
    assert totals(cut, "ebitda")[4] == 0.0
    assert totals(cut, "ebitda")[3] == totals(rows, "ebitda")[3]
    assert totals(rows, "ebitda")[4] != 0.0, "Original rows are not mutated"

def test_idempotent():
    deal = base_deal()
    assert calculate_pl(deal) == calculate_pl(deal)

def test_ratios():
    rows = calculate_pl(base_deal())
    rooms_rev = row_by_id(rows, "rooms-revenue").years[0]
    total_rev = row_by_id(rows, "total-revenue").years[0]
    adr = row_by_id(rows, "adr").years[0]
    assert rooms_rev.pct_of_total_revenue == pytest.approx(rooms_rev.total / total_rev.total * 100)
    assert rooms_rev.per_occupied_room == pytest.approx(adr.total), "Rooms revenue per room sold is ADR"
    assert rooms_rev.per_available_room == pytest.approx(rooms_rev.total / 30)
    assert total_rev.pct_of_total_revenue == pytest.approx(100.0)
    sold = row_by_id(rows, "rooms-sold").years[0]
    assert sold.per_available_room == pytest.approx(sold.total / 30)
    assert sold.per_occupied_room == pytest.approx(1.0)
    assert adr.pct_of_total_revenue == pytest.approx(adr.total / total_rev.total * 100)
    rooms_open = row_by_id(rows, "rooms-open").years[0]
    assert (rooms_open.pct_of_total_revenue, rooms_open.per_occupied_room, rooms_open.per_available_room) == (0.0, 0.0, 0.0)

def test_kpi_rows():
    rows = calculate_pl(base_deal())
    assert totals(rows, "rooms-open")[1] == 30
    assert totals(rows, "rooms-available")[1] == 30 * 365
    occ = totals(rows, "occupancy")[4]
    assert 0 < occ <= 100, "Occupancy shown in percent"

def test_depreciation_and_interest_flat():
    deal = base_deal()
    rows = calculate_pl(deal)
    dep = totals(rows, "depreciation")
    interest = totals(rows, "interest-expense")
    assert dep[1] == pytest.approx(180_000.0)
    assert dep[1] == dep[5]
    expected = first_year_interest(build_debt_schedule(deal.financing, deal.project_cost))
    assert interest[1] == pytest.approx(expected)
    assert interest[1] == interest[4]

def test_missing_deal_all_zero():
    rows = calculate_pl(None)
    assert len(rows) == len(PL_LAYOUT)
    assert all(c.total == 0.0 for r in rows for c in r.years)

def test_missing_sub_models_contribute_zero():
    deal = replace(base_deal(), fnb=None, other_revenue=None, payroll=None, opex=None, financing=None)
    rows = calculate_pl(deal)
    assert all(v == 0.0 for v in totals(rows, "fnb-revenue").values())
    assert all(v == 0.0 for v in totals(rows, "interest-expense").values())
    assert totals(rows, "ebitda")[3] == pytest.approx(totals(rows, "rooms-revenue")[3])

def test_unknown_opex_id_contributes_zero():
    deal = base_deal()
    baseline = calculate_pl(deal)
    extra = OpexModel(items=deal.opex.items + [OpexItem("mystery", "Mystery", 5000, "FIXED_PER_MONTH", "DIRECT")])
    rows = calculate_pl(replace(deal, opex=extra))
    assert totals(rows, "ebitda") == totals(baseline, "ebitda")

def test_rent_line():
    deal = base_deal()
    items = [i if i.id != "rent" else OpexItem("rent", "Rent", 1000, "FIXED_PER_MONTH", "OTHER") for i in deal.opex.items]
    rows = calculate_pl(replace(deal, opex=OpexModel(items=items)))
    rent = totals(rows, "rent")
    assert rent[1] == pytest.approx(12_000.0)
    assert rent[5] == pytest.approx(12_240.0)

def test_year_count_clamped():
    assert len(calculate_pl(base_deal(), year_count=3)[0].years) == 3
    assert len(calculate_pl(base_deal(), year_count=50)[0].years) == 10
    assert len(calculate_pl(base_deal(), year_count=0)[0].years) == 1

def test_series_helpers():
    rows = calculate_pl(base_deal())
    ebitda = ebitda_by_year(rows)
    revenue = revenue_by_year(rows)
    assert ebitda["y0"] == 0.0
    assert ebitda["y3"] == totals(rows, "ebitda")[3]
    assert revenue["y7"] == 0.0
