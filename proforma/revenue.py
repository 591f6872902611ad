"""Revenue sub-engines: F&B, spa and other operating revenue"""
import logging
from typing import Dict, Optional

from config.default_params import DAYS_PER_YEAR, FNB_DEFAULTS, MEAL_KEYS
from .models import Deal, FnBModel, FnBSimple, MealPeriod, OtherRevenueModel, RoomRevenueModel
from .ramp import MacroSeries
from .rooms import RoomsKpis, baseline_totals, month_metrics
from .series import YEARS, Series, combine, empty_series, year_key
from .units import clamp_pct, non_negative, safe_div

logger = logging.getLogger(__name__)

# --- F&B ---------------------------------------------------------------

def meal_revenue(meal: MealPeriod, guest_nights: float, days: float = DAYS_PER_YEAR) -> Dict[str, float]:
    """In-house and walk-in revenue for one meal period"""
    internal = guest_nights * clamp_pct(meal.guest_capture_pct) / 100.0 * non_negative(meal.avg_check_guest)
    external = non_negative(meal.external_covers_per_day) * days * non_negative(meal.avg_check_external)
    return {"internal": internal, "external": external, "total": internal + external}

def fnb_stabilized(model: FnBModel, rooms_sold: float) -> Dict[str, object]:
    """Annual F&B revenue by meal period for a year with the given rooms sold"""
    guest_nights = non_negative(rooms_sold) * non_negative(model.avg_guests_per_occ_room)
    by_meal = {}
    for key in MEAL_KEYS:
        meal = model.meals.get(key)
        if meal is None:
            continue
        by_meal[key] = meal_revenue(meal, guest_nights)
    internal = sum(m["internal"] for m in by_meal.values())
    external = sum(m["external"] for m in by_meal.values())
    return {
        "by_meal": by_meal,
        "internal": internal,
        "external": external,
        "total": internal + external,
    }

def fnb_monthly(model: FnBModel, room_model: RoomRevenueModel, total_rooms: int):
    """12-month F&B revenue following the baseline room nights and month lengths"""
    rows = []
    for r in room_model.months:
        m = month_metrics(r, total_rooms)
        guest_nights = m["rooms_sold"] * non_negative(model.avg_guests_per_occ_room)
        internal = external = 0.0
        for meal in model.meals.values():
            rev = meal_revenue(meal, guest_nights, days=r.days)
            internal += rev["internal"]
            external += rev["external"]
        rows.append({"month": r.month, "internal": internal, "external": external,
                     "total": internal + external})
    return rows

def fnb_to_simple(model: FnBModel) -> FnBSimple:
    """Aggregate view: summed capture (capped at 100), capture- and cover-weighted checks"""
    meals = list(model.meals.values())
    sum_capture = sum(m.guest_capture_pct for m in meals)
    covers = sum(m.external_covers_per_day for m in meals)
    return FnBSimple(
        avg_guests_per_occ_room=model.avg_guests_per_occ_room,
        total_guest_capture_pct=min(sum_capture, 100.0),
        avg_check_guest=safe_div(sum(m.guest_capture_pct * m.avg_check_guest for m in meals), sum_capture),
        external_covers_per_day=covers,
        avg_check_external=safe_div(sum(m.external_covers_per_day * m.avg_check_external for m in meals), covers),
    )

def fnb_from_simple(simple: FnBSimple, weights: Optional[Dict[str, float]] = None) -> FnBModel:
    """Spread the aggregate drivers across meal periods by distribution weight (%)"""
    weights = weights or FNB_DEFAULTS['distribution_weights']
    meals = {}
    for key in MEAL_KEYS:
        w = weights.get(key, 0.0) / 100.0
        meals[key] = MealPeriod(
            key=key,
            guest_capture_pct=simple.total_guest_capture_pct * w,
            avg_check_guest=simple.avg_check_guest,
            external_covers_per_day=simple.external_covers_per_day * w,
            avg_check_external=simple.avg_check_external,
        )
    return FnBModel(meals=meals, avg_guests_per_occ_room=simple.avg_guests_per_occ_room,
                    distribution_weights=dict(weights))

# --- Spa & other -------------------------------------------------------

def spa_stabilized(model: OtherRevenueModel) -> float:
    return non_negative(model.spa.treatments_per_day) * DAYS_PER_YEAR * non_negative(model.spa.avg_price_per_treatment)

def other_stabilized(model: OtherRevenueModel, rooms_revenue: float) -> float:
    other = model.other
    if other.mode == "percentage":
        return non_negative(rooms_revenue) * clamp_pct(other.percentage_of_rooms) / 100.0
    if other.mode == "fixed":
        return non_negative(other.monthly_fixed) * 12
    logger.warning("Unknown other-revenue mode %r, contributing zero", other.mode)
    return 0.0

def ancillary_summary(model: OtherRevenueModel, rooms_revenue: float, rooms_available: float) -> Dict[str, float]:
    spa = spa_stabilized(model)
    other = other_stabilized(model, rooms_revenue)
    total = spa + other
    return {
        "spa_revenue": spa,
        "other_revenue": other,
        "total_ancillary": total,
        "ancillary_revpar": safe_div(total, rooms_available),
    }

# --- Projection --------------------------------------------------------

def project_revenue(stabilized: float, macro: MacroSeries) -> Series:
    """stabilized x revenue ramp x growth index; year 0 is pre-opening"""
    out = empty_series()
    for y in YEARS[1:]:
        k = year_key(y)
        out[k] = stabilized * macro.revenue_ramp[k] * macro.growth_index[k]
    return out

def project_ramped(annual: float, macro: MacroSeries) -> Series:
    """Fixed currency revenue: revenue ramp only"""
    out = empty_series()
    for y in YEARS[1:]:
        k = year_key(y)
        out[k] = annual * macro.revenue_ramp[k]
    return out

def revenue_streams(deal: Optional[Deal], macro: MacroSeries, kpis: RoomsKpis) -> Dict[str, Series]:
    """Per-year revenue by department, plus total"""
    streams = {
        "rooms": dict(kpis.rooms_revenue),
        "fnb": empty_series(),
        "spa": empty_series(),
        "other": empty_series(),
    }
    if deal is not None:
        base = baseline_totals(deal)
        if deal.fnb is not None:
            streams["fnb"] = project_revenue(fnb_stabilized(deal.fnb, base["rooms_sold"])["total"], macro)
        if deal.other_revenue is not None:
            streams["spa"] = project_revenue(spa_stabilized(deal.other_revenue), macro)
            other = other_stabilized(deal.other_revenue, base["rooms_revenue"])
            if deal.other_revenue.other.mode == "fixed":
                streams["other"] = project_ramped(other, macro)
            else:
                streams["other"] = project_revenue(other, macro)
    streams["total"] = combine(streams["rooms"], streams["fnb"], streams["spa"], streams["other"])
    return streams
