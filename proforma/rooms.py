"""Rooms baseline model and annual KPIs (ADR, occupancy, RevPAR)"""
import calendar
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from config.default_params import (
    BASE_CALENDAR_YEAR, DAYS_PER_YEAR, ROOM_REVENUE_DEFAULTS, SEASONALITY_PRESETS,
)
from .models import Deal, MonthRow, RoomRevenueModel, RoomType
from .ramp import MacroSeries, resolve_macro
from .series import YEARS, Series, empty_series, year_key
from .units import clamp01, clamp_pct, non_negative, safe_div

logger = logging.getLogger(__name__)

@dataclass
class RoomsKpis:
    adr: Series
    occupancy: Series           # fraction 0..1
    revpar: Series
    rooms_available: Series
    rooms_sold: Series
    rooms_revenue: Series
    horizon: int

    @property
    def years(self) -> List[int]:
        return list(range(1, self.horizon + 1))

def build_room_model(adr: float = ROOM_REVENUE_DEFAULTS['adr'],
                     seasonality: str = ROOM_REVENUE_DEFAULTS['seasonality'],
                     year: int = BASE_CALENDAR_YEAR) -> RoomRevenueModel:
    """12 monthly rows at a flat ADR with occupancy from a seasonality preset"""
    occ = SEASONALITY_PRESETS.get(seasonality)
    if occ is None:
        logger.warning("Unknown seasonality preset %r, using %s", seasonality, ROOM_REVENUE_DEFAULTS['seasonality'])
        occ = SEASONALITY_PRESETS[ROOM_REVENUE_DEFAULTS['seasonality']]
    months = [
        MonthRow(month=m, adr=adr, occ_pct=occ[m - 1], days=calendar.monthrange(year, m)[1])
        for m in range(1, 13)
    ]
    return RoomRevenueModel(months=months)

def month_metrics(row: MonthRow, total_rooms: int) -> Dict[str, float]:
    """Derived figures for one baseline month"""
    available = total_rooms * max(0, int(row.days))
    occ = clamp_pct(row.occ_pct) / 100.0
    sold = available * occ
    adr = non_negative(row.adr)
    revenue = sold * adr
    return {
        "month": row.month,
        "rooms_available": available,
        "rooms_sold": sold,
        "rooms_revenue": revenue,
        "adr": adr,
        "occ_pct": occ * 100.0,
        "revpar": adr * occ,
    }

def room_model_totals(model: RoomRevenueModel, total_rooms: int) -> Dict[str, float]:
    """Annual rollup of the 12-month baseline"""
    rows = [month_metrics(r, total_rooms) for r in model.months]
    available = sum(r["rooms_available"] for r in rows)
    sold = sum(r["rooms_sold"] for r in rows)
    revenue = sum(r["rooms_revenue"] for r in rows)
    return {
        "rooms_available": available,
        "rooms_sold": sold,
        "rooms_revenue": revenue,
        "avg_adr": safe_div(revenue, sold),
        "avg_occ_pct": safe_div(sold, available) * 100.0,
        "revpar": safe_div(revenue, available),
        "months": rows,
    }

def room_type_adrs(room_types: List[RoomType], avg_adr: float) -> Dict[str, float]:
    """Split the average ADR across room types by price weight, preserving the count-weighted mean"""
    total = sum(max(0, rt.count) for rt in room_types)
    weighted = sum(max(0, rt.count) * non_negative(rt.adr_weight) for rt in room_types)
    mean_weight = safe_div(weighted, total)
    return {
        rt.name: safe_div(avg_adr * non_negative(rt.adr_weight), mean_weight)
        for rt in room_types
    }

def baseline_totals(deal: Deal) -> Dict[str, float]:
    model = deal.room_revenue
    if model is None or not model.months:
        model = build_room_model()
    return room_model_totals(model, deal.total_rooms)

def zero_kpis(horizon: int = 10) -> RoomsKpis:
    return RoomsKpis(
        adr=empty_series(), occupancy=empty_series(), revpar=empty_series(),
        rooms_available=empty_series(), rooms_sold=empty_series(),
        rooms_revenue=empty_series(), horizon=horizon,
    )

def rooms_kpis(deal: Optional[Deal], macro: Optional[MacroSeries] = None) -> RoomsKpis:
    """Annual rooms KPIs, dense over y0..y10; year 0 (pre-opening) is zero"""
    if deal is None:
        return zero_kpis()
    macro = macro or resolve_macro(deal)

    base = baseline_totals(deal)
    adr_base = base["avg_adr"]
    occ_base = base["avg_occ_pct"] / 100.0
    capacity = deal.total_rooms * DAYS_PER_YEAR

    kpis = zero_kpis(macro.exit_year)
    for y in YEARS[1:]:
        k = year_key(y)
        adr = adr_base * macro.revenue_ramp[k] * macro.growth_index[k]
        occ = clamp01(occ_base * macro.revenue_ramp[k])
        sold = capacity * occ
        kpis.adr[k] = adr
        kpis.occupancy[k] = occ
        kpis.rooms_available[k] = float(capacity)
        kpis.rooms_sold[k] = sold
        kpis.revpar[k] = adr * occ
        kpis.rooms_revenue[k] = sold * adr
    logger.debug("Deal %s rooms: ADR base %.2f, occupancy base %.4f, %d keys",
                 deal.id, adr_base, occ_base, deal.total_rooms)
    return kpis
