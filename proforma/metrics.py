"""Underwriting metrics and threshold assessments"""
from typing import Dict, List

from config.default_params import RAMP_YEARS, THRESHOLDS
from .statements import PLRow, row_by_id
from .units import safe_div

def _total(rows: List[PLRow], row_id: str, year: int) -> float:
    row = row_by_id(rows, row_id)
    if row is None:
        return 0.0
    return next((c.total for c in row.years if c.year == year), 0.0)

def stabilized_year(exit_year: int) -> int:
    """Last ramp year, or the exit year if earlier"""
    return max(1, min(RAMP_YEARS, exit_year))

def yield_on_cost(ebitda: float, project_cost: float) -> float:
    return safe_div(ebitda, project_cost)

def assess_yield_on_cost(value: float) -> str:
    t = THRESHOLDS['yield_on_cost']
    if value >= t['good']:
        return "good"
    if value >= t['ok']:
        return "ok"
    return "weak"

def assess_gop_margin(value: float) -> str:
    t = THRESHOLDS['gop_margin']
    if value < t['low']:
        return "weak"
    if value > t['high']:
        return "unrealistic"
    return "good"

def assess_dept_margin(value: float) -> str:
    t = THRESHOLDS['dept_margin']
    if value < t['red']:
        return "red"
    if value < t['amber']:
        return "amber"
    return "green"

def assess_rooms_margin(value: float) -> str:
    return "weak" if value < THRESHOLDS['rooms_margin']['low'] else "good"

def underwriting_metrics(rows: List[PLRow], project_cost: float, exit_year: int) -> Dict[str, object]:
    """Stabilized-year margins and yield with their assessments"""
    year = stabilized_year(exit_year)
    revenue = _total(rows, "total-revenue", year)
    rooms_rev = _total(rows, "rooms-revenue", year)
    fnb_rev = _total(rows, "fnb-revenue", year)
    spa_rev = _total(rows, "spa-revenue", year)
    ebitda = _total(rows, "ebitda", year)

    yoc = yield_on_cost(ebitda, project_cost)
    gop_margin = safe_div(_total(rows, "gop", year), revenue)
    rooms_margin = safe_div(rooms_rev - _total(rows, "rooms-direct-costs", year), rooms_rev)
    fnb_margin = safe_div(fnb_rev - _total(rows, "fnb-direct-costs", year), fnb_rev)
    wellness_margin = safe_div(spa_rev - _total(rows, "wellness-direct-costs", year), spa_rev)

    return {
        "year": year,
        "yield_on_cost": yoc,
        "gop_margin": gop_margin,
        "ebitda_margin": safe_div(ebitda, revenue),
        "rooms_margin": rooms_margin,
        "fnb_margin": fnb_margin,
        "wellness_margin": wellness_margin,
        "assessments": {
            "yield_on_cost": assess_yield_on_cost(yoc),
            "gop_margin": assess_gop_margin(gop_margin),
            "rooms_margin": assess_rooms_margin(rooms_margin),
            "fnb_margin": assess_dept_margin(fnb_margin),
            "wellness_margin": assess_dept_margin(wellness_margin),
        },
    }
