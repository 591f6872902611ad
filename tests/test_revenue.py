"""Test F&B, spa and other revenue drivers and their conversions"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from proforma.models import FnBModel, FnBSimple, MealPeriod, OtherRevenueModel, OtherSettings, RampSettings
from proforma.ramp import resolve_series
from proforma.revenue import (
    ancillary_summary, fnb_from_simple, fnb_monthly, fnb_stabilized, fnb_to_simple,
    other_stabilized, project_ramped, project_revenue, spa_stabilized,
)
from proforma.rooms import build_room_model

def breakfast_only():
    return FnBModel(
        meals={
            "breakfast": MealPeriod("breakfast", 50, 10, 4, 20),
            "lunch": MealPeriod("lunch"),
            "dinner": MealPeriod("dinner"),
            "bar": MealPeriod("bar"),
        },
        avg_guests_per_occ_room=2.0,
    )

def test_fnb_stabilized():
    result = fnb_stabilized(breakfast_only(), rooms_sold=1000)
    assert result["internal"] == pytest.approx(10_000.0)    # 2000 guests x 50% x 10
    assert result["external"] == pytest.approx(29_200.0)    # 4 x 365 x 20
    assert result["total"] == pytest.approx(39_200.0)
    assert result["by_meal"]["lunch"]["total"] == 0.0

def test_fnb_monthly_sums_close_to_annual():
    model = breakfast_only()
    rows = fnb_monthly(model, build_room_model(adr=100), 10)
    assert len(rows) == 12
    assert sum(r["external"] for r in rows) == pytest.approx(29_200.0)

def test_fnb_to_simple_defaults():
    simple = fnb_to_simple(FnBModel())
    assert simple.total_guest_capture_pct == 100.0, "Summed capture 225 is capped at 100"
    assert simple.avg_check_guest == pytest.approx(19.8)
    assert simple.external_covers_per_day == pytest.approx(65.0)
    assert simple.avg_check_external == pytest.approx(27.0)

def test_fnb_simple_advanced_simple_preserves_aggregates():
    simple = FnBSimple(avg_guests_per_occ_room=1.6, total_guest_capture_pct=90,
                       avg_check_guest=22, external_covers_per_day=40, avg_check_external=30)
    model = fnb_from_simple(simple)
    assert model.meals["dinner"].guest_capture_pct == pytest.approx(31.5)
    assert model.meals["bar"].external_covers_per_day == pytest.approx(4.0)
    back = fnb_to_simple(model)
    assert back.total_guest_capture_pct == pytest.approx(90)
    assert back.avg_check_guest == pytest.approx(22)
    assert back.external_covers_per_day == pytest.approx(40)
    assert back.avg_check_external == pytest.approx(30)
    assert back.avg_guests_per_occ_room == 1.6

def test_fnb_to_simple_no_covers():
    model = FnBModel(meals={k: MealPeriod(k) for k in ("breakfast", "lunch", "dinner", "bar")})
    simple = fnb_to_simple(model)
    assert simple.avg_check_guest == 0.0
    assert simple.avg_check_external == 0.0

def test_spa_and_other():
    model = OtherRevenueModel()
    assert spa_stabilized(model) == pytest.approx(4 * 365 * 70)
    assert other_stabilized(model, 1_000_000) == pytest.approx(50_000.0)
    fixed = OtherRevenueModel(other=OtherSettings(mode="fixed", monthly_fixed=1000))
    assert other_stabilized(fixed, 1_000_000) == 12_000.0
    unknown = OtherRevenueModel(other=OtherSettings(mode="bogus"))
    assert other_stabilized(unknown, 1_000_000) == 0.0

def test_ancillary_revpar():
    summary = ancillary_summary(OtherRevenueModel(), 1_000_000, 10_950)
    assert summary["total_ancillary"] == pytest.approx(102_200 + 50_000)
    assert summary["ancillary_revpar"] == pytest.approx(152_200 / 10_950)
    assert ancillary_summary(OtherRevenueModel(), 0, 0)["ancillary_revpar"] == 0.0

def test_projection_ramp_and_growth():
    macro = resolve_series(RampSettings())
    s = project_revenue(100_000, macro)
    assert s["y0"] == 0.0
    assert s["y1"] == pytest.approx(80_000)
    assert s["y4"] == pytest.approx(100_000)
    assert s["y5"] == pytest.approx(103_000)
    fixed = project_ramped(12_000, macro)
    assert fixed["y1"] == pytest.approx(9_600)
    assert fixed["y6"] == pytest.approx(12_000), "Fixed other revenue does not grow"
