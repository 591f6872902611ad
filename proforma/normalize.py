"""Tolerant loading of deal records into Deal models, clamping malformed numbers"""
import logging
from typing import Any, Dict, Optional

from config.default_params import MAX_LOAN_YEARS, MAX_YEAR, MEAL_KEYS, OPEX_DRIVERS, RAMP_YEARS
from .costs import payroll_from_simple
from .models import (
    CostRampToggles, Deal, DealBudget, ExitSettings, FinancingSettings, FnBModel,
    FnBSimple, MacroOverrides, MealPeriod, MonthRow, OpexItem, OpexModel,
    OtherRevenueModel, OtherSettings, PayrollModel, PayrollSimple, RampSettings,
    RefinanceTerms, Role, RoomRevenueModel, RoomType, SaleTerms, SpaSettings,
)
from .revenue import fnb_from_simple
from .units import as_number, clamp, clamp_pct, non_negative

logger = logging.getLogger(__name__)

def _num(d: Dict[str, Any], key: str, default: float, lo: float = 0.0, hi: Optional[float] = None) -> float:
    raw = d.get(key)
    value = as_number(raw, default)
    clamped = max(lo, value) if hi is None else clamp(value, lo, hi)
    if raw is not None and clamped != value:
        logger.warning("Clamped %s from %r to %s", key, raw, clamped)
    return clamped

def _int(d: Dict[str, Any], key: str, default: int, lo: int = 0, hi: Optional[int] = None) -> int:
    return int(_num(d, key, default, lo, hi))

def _curve(raw, default):
    if not isinstance(raw, (list, tuple)) or len(raw) < RAMP_YEARS:
        return list(default)
    return [non_negative(v) for v in raw[:RAMP_YEARS]]

def _rate_map(raw) -> Optional[Dict[str, float]]:
    if not isinstance(raw, dict):
        return None
    return {str(k): as_number(v) for k, v in raw.items()}

def ramp_from_dict(d: Dict[str, Any]) -> RampSettings:
    base = RampSettings()
    toggles = d.get("apply_cost_ramp") or {}
    return RampSettings(
        revenue_ramp=_curve(d.get("revenue_ramp"), base.revenue_ramp),
        cost_ramp=_curve(d.get("cost_ramp"), base.cost_ramp),
        topline_growth_pct=_num(d, "topline_growth_pct", base.topline_growth_pct, -100.0, 100.0),
        inflation_pct=_num(d, "inflation_pct", base.inflation_pct, -100.0, 100.0),
        depreciation_pct_of_capex=_num(d, "depreciation_pct_of_capex", base.depreciation_pct_of_capex, 0.0, 100.0),
        apply_cost_ramp=CostRampToggles(
            departmental=bool(toggles.get("departmental", True)),
            undistributed=bool(toggles.get("undistributed", True)),
            other_opex=bool(toggles.get("other_opex", True)),
            payroll=bool(toggles.get("payroll", True)),
        ),
    )

def financing_from_dict(d: Dict[str, Any]) -> FinancingSettings:
    base = FinancingSettings()
    order = d.get("investment_order", base.investment_order)
    if order not in ("EQUITY_FIRST", "LOAN_FIRST"):
        logger.warning("Unknown investment order %r, using %s", order, base.investment_order)
        order = base.investment_order
    return FinancingSettings(
        ltc_pct=_num(d, "ltc_pct", base.ltc_pct, 0.0, 100.0),
        investment_order=order,
        interest_rate_pct=_num(d, "interest_rate_pct", base.interest_rate_pct, 0.0, 100.0),
        loan_term_years=_int(d, "loan_term_years", base.loan_term_years, 1, MAX_LOAN_YEARS),
        amort_years=_int(d, "amort_years", base.amort_years, 1, MAX_LOAN_YEARS),
        io_period_years=_int(d, "io_period_years", base.io_period_years, 0, MAX_LOAN_YEARS),
        tax_rate_pct=_num(d, "tax_rate_pct", base.tax_rate_pct, 0.0, 100.0),
    )

def exit_from_dict(d: Dict[str, Any]) -> ExitSettings:
    strategy = d.get("strategy", "SALE")
    if strategy not in ("SALE", "REFINANCE", "HOLD_FOREVER"):
        logger.warning("Unknown exit strategy %r, using SALE", strategy)
        strategy = "SALE"
    sale = d.get("sale") or {}
    refi = d.get("refinance") or {}
    s, r = SaleTerms(), RefinanceTerms()
    return ExitSettings(
        strategy=strategy,
        sale=SaleTerms(
            exit_year=_int(sale, "exit_year", s.exit_year, 1, MAX_YEAR),
            exit_cap_rate=_num(sale, "exit_cap_rate", s.exit_cap_rate, 0.0, 100.0),
            selling_costs_pct=_num(sale, "selling_costs_pct", s.selling_costs_pct, 0.0, 100.0),
        ),
        refinance=RefinanceTerms(
            refinance_year=_int(refi, "refinance_year", r.refinance_year, 1, MAX_YEAR),
            ltv_at_refinance=_num(refi, "ltv_at_refinance", r.ltv_at_refinance, 0.0, 100.0),
            refinance_costs_pct=_num(refi, "refinance_costs_pct", r.refinance_costs_pct, 0.0, 100.0),
        ),
    )

def room_revenue_from_dict(d: Dict[str, Any]) -> RoomRevenueModel:
    months = []
    for i, row in enumerate(d.get("months") or []):
        months.append(MonthRow(
            month=_int(row, "month", i + 1, 1, 12),
            adr=_num(row, "adr", 0.0),
            occ_pct=_num(row, "occ_pct", 0.0, 0.0, 100.0),
            days=_int(row, "days", 30, 0, 31),
        ))
    return RoomRevenueModel(months=months)

def fnb_from_dict(d: Dict[str, Any]) -> FnBModel:
    """Advanced records load as-is; a simple-mode record is expanded by the distribution weights"""
    weights = d.get("distribution_weights") or None
    if d.get("mode") == "simple" and d.get("simple"):
        s = d["simple"]
        simple = FnBSimple(
            avg_guests_per_occ_room=_num(s, "avg_guests_per_occ_room", 1.8),
            total_guest_capture_pct=_num(s, "total_guest_capture_pct", 0.0),
            avg_check_guest=_num(s, "avg_check_guest", 0.0),
            external_covers_per_day=_num(s, "external_covers_per_day", 0.0),
            avg_check_external=_num(s, "avg_check_external", 0.0),
        )
        return fnb_from_simple(simple, weights)

    base = FnBModel()
    meals = {}
    raw_meals = d.get("meals") or {}
    for key in MEAL_KEYS:
        m = raw_meals.get(key)
        if m is None:
            meals[key] = base.meals[key]
            continue
        meals[key] = MealPeriod(
            key=key,
            guest_capture_pct=_num(m, "guest_capture_pct", 0.0, 0.0, 100.0),
            avg_check_guest=_num(m, "avg_check_guest", 0.0),
            external_covers_per_day=_num(m, "external_covers_per_day", 0.0),
            avg_check_external=_num(m, "avg_check_external", 0.0),
        )
    return FnBModel(
        meals=meals,
        avg_guests_per_occ_room=_num(d, "avg_guests_per_occ_room", base.avg_guests_per_occ_room),
        distribution_weights=weights,
    )

def other_revenue_from_dict(d: Dict[str, Any]) -> OtherRevenueModel:
    spa = d.get("spa") or {}
    other = d.get("other") or {}
    base = OtherRevenueModel()
    mode = other.get("mode", base.other.mode)
    if mode not in ("percentage", "fixed"):
        logger.warning("Unknown other-revenue mode %r, using percentage", mode)
        mode = "percentage"
    return OtherRevenueModel(
        spa=SpaSettings(
            treatments_per_day=_num(spa, "treatments_per_day", base.spa.treatments_per_day),
            avg_price_per_treatment=_num(spa, "avg_price_per_treatment", base.spa.avg_price_per_treatment),
        ),
        other=OtherSettings(
            mode=mode,
            percentage_of_rooms=_num(other, "percentage_of_rooms", base.other.percentage_of_rooms, 0.0, 100.0),
            monthly_fixed=_num(other, "monthly_fixed", base.other.monthly_fixed),
        ),
    )

def opex_from_dict(d: Dict[str, Any]) -> OpexModel:
    if "items" not in d:
        return OpexModel()
    items = []
    for raw in d["items"]:
        driver = raw.get("driver")
        if driver not in OPEX_DRIVERS:
            logger.warning("Opex item %s has unknown driver %r", raw.get("id"), driver)
        pct = isinstance(driver, str) and driver.startswith("PCT_")
        items.append(OpexItem(
            id=str(raw.get("id", "")),
            label=str(raw.get("label", raw.get("id", ""))),
            value=_num(raw, "value", 0.0, 0.0, 100.0 if pct else None),
            driver=driver,
            section=raw.get("section", "OTHER"),
        ))
    return OpexModel(items=items)

def payroll_from_dict(d: Dict[str, Any], rooms_count: int) -> PayrollModel:
    """Roles load as-is; a simple-mode record is expanded from the baseline FTE table"""
    if d.get("mode") == "simple" and d.get("simple") is not None:
        s = d["simple"]
        base = PayrollSimple()
        simple = PayrollSimple(
            service_level=s.get("service_level", base.service_level),
            comp_strategy=s.get("comp_strategy", base.comp_strategy),
            country_code=s.get("country_code", base.country_code),
            employer_cost_pct=_num(s, "employer_cost_pct", base.employer_cost_pct, 0.0, 100.0),
            base_reception_salary=_num(s, "base_reception_salary", base.base_reception_salary),
            fte_per_room=_num(s, "fte_per_room", base.fte_per_room),
            rooms_count=_int(s, "rooms_count", rooms_count),
        )
        return PayrollModel(roles=payroll_from_simple(simple))

    roles = []
    for i, r in enumerate(d.get("roles") or []):
        roles.append(Role(
            id=str(r.get("id", f"role-{i + 1}")),
            dept=r.get("dept", ""),
            title=r.get("title", ""),
            ftes=_num(r, "ftes", 0.0),
            base_salary=_num(r, "base_salary", 0.0),
            employer_cost_pct=_num(r, "employer_cost_pct", 25.0, 0.0, 100.0),
        ))
    return PayrollModel(roles=roles)

def budget_from_dict(d: Dict[str, Any]) -> DealBudget:
    return DealBudget(
        site_acquisition=_num(d, "site_acquisition", 0.0),
        construction=_num(d, "construction", 0.0),
        ffe=_num(d, "ffe", 0.0),
        development=_num(d, "development", 0.0),
        other_development=_num(d, "other_development", 0.0),
        pre_opening=_num(d, "pre_opening", 0.0),
        contingency_pct=_num(d, "contingency_pct", DealBudget().contingency_pct, 0.0, 100.0),
    )

def deal_from_dict(record: Dict[str, Any]) -> Deal:
    """Build a Deal from a stored record; absent blocks stay None, bad numbers are clamped"""
    room_types = [
        RoomType(
            name=str(rt.get("name", "Standard")),
            count=_int(rt, "count", 0),
            adr_weight=_num(rt, "adr_weight", 1.0),
        )
        for rt in record.get("room_types") or []
    ]
    rooms = sum(rt.count for rt in room_types)

    def block(key, loader, *args):
        raw = record.get(key)
        return loader(raw, *args) if isinstance(raw, dict) else None

    macro = record.get("macro") or {}
    return Deal(
        id=str(record.get("id", "")),
        name=str(record.get("name", "")),
        currency=str(record.get("currency", "EUR")),
        gfa_sqm=_num(record, "gfa_sqm", 0.0),
        room_types=room_types,
        capex_total=_num(record, "capex_total", 0.0),
        budget=block("budget", budget_from_dict),
        ramp=ramp_from_dict(record.get("ramp") or {}),
        macro=MacroOverrides(
            topline_growth_rate_by_year=_rate_map(macro.get("topline_growth_rate_by_year")),
            inflation_rate_by_year=_rate_map(macro.get("inflation_rate_by_year")),
        ),
        financing=block("financing", financing_from_dict),
        exit=block("exit", exit_from_dict),
        room_revenue=block("room_revenue", room_revenue_from_dict),
        fnb=block("fnb", fnb_from_dict),
        other_revenue=block("other_revenue", other_revenue_from_dict),
        opex=block("opex", opex_from_dict),
        payroll=block("payroll", payroll_from_dict, rooms),
    )
