"""USALI profit & loss statement builder with horizon truncation"""
import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

from config.default_params import MAX_YEAR
from .costs import opex_by_item, project_payroll
from .finance import build_debt_schedule, first_year_interest
from .models import CostRampToggles, Deal
from .ramp import resolve_macro
from .revenue import revenue_streams
from .rooms import rooms_kpis
from .series import Series, empty_series, year_key
from .units import as_number, safe_div

logger = logging.getLogger(__name__)

@dataclass
class PLCell:
    year: int
    total: float
    pct_of_total_revenue: float = 0.0
    per_occupied_room: float = 0.0
    per_available_room: float = 0.0

@dataclass
class PLRow:
    id: str
    label: str
    group: str      # KPIS | REVENUE | DIRECT | UNDISTRIBUTED | FIXED | SUMMARY
    kind: str       # kpi | line | subtotal | total
    years: List[PLCell] = field(default_factory=list)

# (id, label, group, kind) in statement order
PL_LAYOUT = [
    ("rooms-open", "Rooms Open", "KPIS", "kpi"),
    ("rooms-available", "Rooms Available", "KPIS", "kpi"),
    ("rooms-sold", "Rooms Sold", "KPIS", "kpi"),
    ("adr", "ADR", "KPIS", "kpi"),
    ("occupancy", "Occupancy", "KPIS", "kpi"),
    ("revpar", "RevPAR", "KPIS", "kpi"),

    ("rooms-revenue", "Rooms Revenue", "REVENUE", "line"),
    ("fnb-revenue", "F&B Revenue", "REVENUE", "line"),
    ("spa-revenue", "Spa Revenue", "REVENUE", "line"),
    ("other-operating-revenue", "Other Operating Revenue", "REVENUE", "line"),
    ("total-revenue", "Total Revenue", "REVENUE", "total"),

    ("rooms-direct-payroll", "Rooms Direct Payroll", "DIRECT", "line"),
    ("rooms-commission", "Rooms Commission", "DIRECT", "line"),
    ("guest-supplies-cleaning", "Guest Supplies & Cleaning", "DIRECT", "line"),
    ("rooms-direct-costs", "Rooms Direct Costs", "DIRECT", "subtotal"),
    ("fnb-direct-payroll", "F&B Direct Payroll", "DIRECT", "line"),
    ("cost-of-goods-sold", "Cost of Goods Sold", "DIRECT", "line"),
    ("fnb-direct-costs", "F&B Direct Costs", "DIRECT", "subtotal"),
    ("me-costs", "M&E Costs", "DIRECT", "line"),
    ("me-direct-costs", "M&E Direct Costs", "DIRECT", "subtotal"),
    ("wellness-direct-payroll", "Wellness Direct Payroll", "DIRECT", "line"),
    ("wellness-other-costs", "Wellness Other Costs", "DIRECT", "line"),
    ("wellness-direct-costs", "Wellness Direct Costs", "DIRECT", "subtotal"),
    ("other-direct-costs", "Other Direct Costs", "DIRECT", "line"),
    ("direct-costs-total", "Direct Costs", "DIRECT", "total"),
    ("goi", "GOI", "DIRECT", "total"),

    ("ag-payroll", "A&G Payroll", "UNDISTRIBUTED", "line"),
    ("other-ag", "Other A&G", "UNDISTRIBUTED", "line"),
    ("admin-general", "Administrative & General", "UNDISTRIBUTED", "subtotal"),
    ("tech-subscriptions", "Tech Subscriptions", "UNDISTRIBUTED", "line"),
    ("it-telecommunications", "Information & Telecommunications", "UNDISTRIBUTED", "subtotal"),
    ("sales-marketing-payroll", "Sales & Marketing Payroll", "UNDISTRIBUTED", "line"),
    ("other-sm", "Other S&M", "UNDISTRIBUTED", "line"),
    ("sales-marketing", "Sales & Marketing", "UNDISTRIBUTED", "subtotal"),
    ("maintenance-payroll", "Maintenance Payroll", "UNDISTRIBUTED", "line"),
    ("maintenance-other", "Maintenance Other", "UNDISTRIBUTED", "line"),
    ("property-operations-maintenance", "Property Operations & Maintenance", "UNDISTRIBUTED", "subtotal"),
    ("utilities", "Utilities", "UNDISTRIBUTED", "line"),
    ("undistributed-total", "Indirect Costs", "UNDISTRIBUTED", "total"),
    ("gop", "GOP", "UNDISTRIBUTED", "total"),

    ("management-fees", "Management Fees", "FIXED", "line"),
    ("property-taxes", "Property Taxes", "FIXED", "line"),
    ("insurance", "Insurance", "FIXED", "line"),
    ("ebitdar", "EBITDAR", "FIXED", "total"),
    ("rent", "Rent", "FIXED", "line"),
    ("ebitda", "EBITDA", "FIXED", "total"),

    ("depreciation", "Depreciation", "SUMMARY", "line"),
    ("interest-expense", "Interest Expense", "SUMMARY", "line"),
    ("net-income", "Net Income", "SUMMARY", "total"),
]

# Opex item ids with a line of their own
OPEX_LINES = {
    "rooms-commission", "guest-supplies-cleaning", "cost-of-goods-sold", "me-costs",
    "wellness-other-costs", "other-direct-costs", "other-ag", "tech-subscriptions",
    "other-sm", "maintenance-other", "utilities", "management-fees",
    "property-taxes", "insurance", "rent",
}

PAYROLL_LINES = {
    "rooms": "rooms-direct-payroll",
    "fnb": "fnb-direct-payroll",
    "wellness": "wellness-direct-payroll",
    "ag": "ag-payroll",
    "sales": "sales-marketing-payroll",
    "maintenance": "maintenance-payroll",
}

def _add(values: Dict[str, Series], target: str, *sources: str):
    values[target] = {k: sum(values[s][k] for s in sources) for k in values[sources[0]]}

def _sub(values: Dict[str, Series], target: str, minuend: str, *subtrahends: str):
    values[target] = {
        k: values[minuend][k] - sum(values[s][k] for s in subtrahends)
        for k in values[minuend]
    }

def build_line_values(deal: Optional[Deal]) -> Dict[str, Series]:
    """Every P&L line as a dense y0..y10 series, before horizon truncation"""
    values = {row_id: empty_series() for row_id, _, _, _ in PL_LAYOUT}
    if deal is None:
        return values

    macro = resolve_macro(deal)
    kpis = rooms_kpis(deal, macro)
    streams = revenue_streams(deal, macro, kpis)
    toggles = deal.ramp.apply_cost_ramp or CostRampToggles()
    rooms = deal.total_rooms

    values["rooms-open"] = {k: (float(rooms) if k != "y0" else 0.0) for k in values["rooms-open"]}
    values["rooms-available"] = dict(kpis.rooms_available)
    values["rooms-sold"] = dict(kpis.rooms_sold)
    values["adr"] = dict(kpis.adr)
    values["occupancy"] = {k: v * 100.0 for k, v in kpis.occupancy.items()}
    values["revpar"] = dict(kpis.revpar)

    values["rooms-revenue"] = streams["rooms"]
    values["fnb-revenue"] = streams["fnb"]
    values["spa-revenue"] = streams["spa"]
    values["other-operating-revenue"] = streams["other"]
    values["total-revenue"] = streams["total"]

    items = deal.opex.items if deal.opex is not None else []
    for item_id, series in opex_by_item(items, streams, kpis.rooms_sold, macro, toggles).items():
        if item_id not in OPEX_LINES:
            logger.warning("Opex item %r has no P&L line, contributing zero", item_id)
            continue
        values[item_id] = series

    for dept, series in project_payroll(deal.payroll, macro, toggles, rooms).items():
        values[PAYROLL_LINES[dept]] = series

    _add(values, "rooms-direct-costs", "rooms-direct-payroll", "rooms-commission", "guest-supplies-cleaning")
    _add(values, "fnb-direct-costs", "fnb-direct-payroll", "cost-of-goods-sold")
    _add(values, "me-direct-costs", "me-costs")
    _add(values, "wellness-direct-costs", "wellness-direct-payroll", "wellness-other-costs")
    _add(values, "direct-costs-total", "rooms-direct-costs", "fnb-direct-costs", "me-direct-costs",
         "wellness-direct-costs", "other-direct-costs")
    _sub(values, "goi", "total-revenue", "direct-costs-total")

    _add(values, "admin-general", "ag-payroll", "other-ag")
    _add(values, "it-telecommunications", "tech-subscriptions")
    _add(values, "sales-marketing", "sales-marketing-payroll", "other-sm")
    _add(values, "property-operations-maintenance", "maintenance-payroll", "maintenance-other")
    _add(values, "undistributed-total", "admin-general", "it-telecommunications", "sales-marketing",
         "property-operations-maintenance", "utilities")
    _sub(values, "gop", "goi", "undistributed-total")

    _sub(values, "ebitdar", "gop", "management-fees", "property-taxes", "insurance")
    _sub(values, "ebitda", "ebitdar", "rent")

    # flat annual charges, not ramped
    depreciation = as_number(deal.ramp.depreciation_pct_of_capex) / 100.0 * deal.project_cost
    interest = first_year_interest(build_debt_schedule(deal.financing, deal.project_cost))
    values["depreciation"] = {k: (depreciation if k != "y0" else 0.0) for k in values["depreciation"]}
    values["interest-expense"] = {k: (interest if k != "y0" else 0.0) for k in values["interest-expense"]}
    _sub(values, "net-income", "ebitda", "depreciation", "interest-expense")
    return values

# the physical key count is not divided by itself
NO_RATIO_ROWS = {"rooms-open"}

def _cell(year: int, total: float, row_id: str, revenue: float, sold: float, rooms: float) -> PLCell:
    if row_id in NO_RATIO_ROWS:
        return PLCell(year=year, total=total)
    return PLCell(
        year=year,
        total=total,
        pct_of_total_revenue=safe_div(total, revenue) * 100.0,
        per_occupied_room=safe_div(total, sold),
        per_available_room=safe_div(total, rooms),
    )

def calculate_pl(deal: Optional[Deal], year_count: int = MAX_YEAR) -> List[PLRow]:
    """
    Build the P&L rows for years 1..year_count, truncated at the deal's exit year.

    A missing deal or sub-model contributes zeros; nothing here raises for business data.
    """
    year_count = int(min(MAX_YEAR, max(1, as_number(year_count, MAX_YEAR))))
    values = build_line_values(deal)
    years = list(range(1, year_count + 1))
    rows = [
        PLRow(id=row_id, label=label, group=group, kind=kind,
              years=[PLCell(year=y, total=values[row_id][year_key(y)]) for y in years])
        for row_id, label, group, kind in PL_LAYOUT
    ]
    exit_year = resolve_macro(deal).exit_year if deal is not None else MAX_YEAR
    return apply_horizon(rows, exit_year)

def apply_horizon(rows: List[PLRow], exit_year: int) -> List[PLRow]:
    """Zero every cell past exit_year and recompute all ratios; returns new rows"""
    def totals(row_id):
        row = row_by_id(rows, row_id)
        if row is None:
            return {}
        return {c.year: (c.total if c.year <= exit_year else 0.0) for c in row.years}

    revenue = totals("total-revenue")
    sold = totals("rooms-sold")
    rooms = totals("rooms-open")

    out = []
    for row in rows:
        cells = []
        for c in row.years:
            total = c.total if c.year <= exit_year else 0.0
            cells.append(_cell(c.year, total, row.id,
                               revenue.get(c.year, 0.0), sold.get(c.year, 0.0), rooms.get(c.year, 0.0)))
        out.append(replace(row, years=cells))
    return out

def row_by_id(rows: List[PLRow], row_id: str) -> Optional[PLRow]:
    return next((r for r in rows if r.id == row_id), None)

def series_from_row(row: Optional[PLRow]) -> Series:
    out = empty_series()
    if row is None:
        return out
    for c in row.years:
        out[year_key(c.year)] = c.total
    return out

def ebitda_by_year(rows: List[PLRow]) -> Series:
    return series_from_row(row_by_id(rows, "ebitda"))

def revenue_by_year(rows: List[PLRow]) -> Series:
    return series_from_row(row_by_id(rows, "total-revenue"))

def cells_by_year(row: Optional[PLRow]) -> Series:
    """Only the years the row actually carries"""
    if row is None:
        return {}
    return {year_key(c.year): c.total for c in row.years}
