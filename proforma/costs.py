"""Cost sub-engines: operating expenses by driver and payroll by department"""
import logging
import re
from typing import Dict, List, Optional

from config.default_params import (
    BASELINE_FTES, COMP_STRATEGY_MULTIPLIERS, DEPARTMENTS, MANAGEMENT_ROLES,
    PAYROLL_SIMPLE_DEFAULTS, ROLE_SALARY_FACTORS, SECTION_RAMP_TOGGLE,
    SERVICE_LEVEL_MULTIPLIERS,
)
from .models import CostRampToggles, OpexItem, PayrollModel, PayrollSimple, Role
from .ramp import MacroSeries
from .series import YEARS, Series, empty_series, year_key
from .units import as_number, clamp_pct, non_negative, safe_div

logger = logging.getLogger(__name__)

PCT_DRIVER_STREAMS = {
    "PCT_ROOMS_REVENUE": "rooms",
    "PCT_FNB_REVENUE": "fnb",
    "PCT_OTHER_REVENUE": "ancillary",   # spa + other operating
    "PCT_TOTAL_REVENUE": "total",
}

def ramp_enabled(item: OpexItem, toggles: CostRampToggles) -> bool:
    """Whether an opex item takes the cost ramp; rent never does"""
    if item.id == "rent":
        return False
    toggle = SECTION_RAMP_TOGGLE.get(item.section)
    if toggle is None:
        logger.warning("Opex item %s has unknown section %r, no cost ramp", item.id, item.section)
        return False
    return getattr(toggles, toggle)

def opex_item_stabilized(item: OpexItem, stabilized: Dict[str, float]) -> float:
    """
    Annual cost of one item against stabilized volumes.

    Args:
        item: Opex line with its driver
        stabilized: rooms/fnb/ancillary/total revenue and rooms_sold for a stabilized year

    Returns:
        Annual cost, 0 for an unknown driver
    """
    value = non_negative(item.value)
    if item.driver in PCT_DRIVER_STREAMS:
        return stabilized.get(PCT_DRIVER_STREAMS[item.driver], 0.0) * clamp_pct(value) / 100.0
    if item.driver == "PER_ROOM_NIGHT_SOLD":
        return value * stabilized.get("rooms_sold", 0.0)
    if item.driver == "FIXED_PER_MONTH":
        return value * 12
    logger.warning("Opex item %s has unknown driver %r, contributing zero", item.id, item.driver)
    return 0.0

def project_opex_item(item: OpexItem, streams: Dict[str, Series], rooms_sold: Series,
                      macro: MacroSeries, toggles: CostRampToggles) -> Series:
    """
    Per-year cost of one opex item.

    % drivers follow their revenue stream with the cost ramp (no inflation);
    currency drivers are scaled by volume, cost ramp and inflation.
    """
    out = empty_series()
    if item.driver not in PCT_DRIVER_STREAMS and item.driver not in ("PER_ROOM_NIGHT_SOLD", "FIXED_PER_MONTH"):
        logger.warning("Opex item %s has unknown driver %r, contributing zero", item.id, item.driver)
        return out

    use_ramp = ramp_enabled(item, toggles)
    value = non_negative(item.value)
    for y in YEARS[1:]:
        k = year_key(y)
        ramp = macro.cost_ramp[k] if use_ramp else 1.0
        if item.driver in PCT_DRIVER_STREAMS:
            stream = streams[PCT_DRIVER_STREAMS[item.driver]]
            out[k] = stream[k] * clamp_pct(value) / 100.0 * ramp
        elif item.driver == "PER_ROOM_NIGHT_SOLD":
            out[k] = value * rooms_sold[k] * ramp * macro.inflation_index[k]
        else:
            out[k] = value * 12 * ramp * macro.inflation_index[k]
    return out

def opex_by_item(items: List[OpexItem], streams: Dict[str, Series], rooms_sold: Series,
                 macro: MacroSeries, toggles: CostRampToggles) -> Dict[str, Series]:
    """Projected cost per opex item id; duplicate ids accumulate"""
    if "ancillary" not in streams:
        streams = dict(streams)
        streams["ancillary"] = {k: streams["spa"][k] + streams["other"][k] for k in streams["spa"]}
    out = {}
    for item in items:
        series = project_opex_item(item, streams, rooms_sold, macro, toggles)
        if item.id in out:
            out[item.id] = {k: out[item.id][k] + series[k] for k in series}
        else:
            out[item.id] = series
    return out

# --- Payroll -----------------------------------------------------------

def role_cost(role: Role) -> float:
    """Fully loaded annual cost: FTEs x salary x (1 + employer cost %)"""
    return non_negative(role.ftes) * non_negative(role.base_salary) * (1 + non_negative(role.employer_cost_pct) / 100.0)

def payroll_summary(model: PayrollModel, total_rooms: int) -> Dict[str, object]:
    """Stabilized payroll totals by department and role"""
    by_dept = {dept: 0.0 for dept in DEPARTMENTS}
    by_role = {}
    total_ftes = 0.0
    for role in model.roles:
        cost = role_cost(role)
        if role.dept not in by_dept:
            logger.warning("Role %s has unknown department %r, excluded", role.title, role.dept)
            continue
        by_dept[role.dept] += cost
        by_role[role.id] = cost
        total_ftes += non_negative(role.ftes)
    total = sum(by_dept.values())
    return {
        "by_dept": by_dept,
        "by_role": by_role,
        "total": total,
        "total_ftes": total_ftes,
        "fte_per_room": safe_div(total_ftes, total_rooms),
        "per_room": safe_div(total, total_rooms),
    }

def project_payroll(model: Optional[PayrollModel], macro: MacroSeries,
                    toggles: CostRampToggles, total_rooms: int = 0) -> Dict[str, Series]:
    """Per-year payroll by department: stabilized x cost ramp x inflation"""
    out = {dept: empty_series() for dept in DEPARTMENTS}
    if model is None:
        return out
    summary = payroll_summary(model, total_rooms)
    for dept, base in summary["by_dept"].items():
        for y in YEARS[1:]:
            k = year_key(y)
            ramp = macro.cost_ramp[k] if toggles.payroll else 1.0
            out[dept][k] = base * ramp * macro.inflation_index[k]
    return out

def role_id(dept: str, title: str) -> str:
    return f"{dept}-" + re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")

def payroll_from_simple(simple: PayrollSimple) -> List[Role]:
    """Expand the simple view into roles from the baseline FTE-per-room table"""
    service_mult = SERVICE_LEVEL_MULTIPLIERS.get(simple.service_level, 1.0)
    comp_mult = COMP_STRATEGY_MULTIPLIERS.get(simple.comp_strategy, 1.0)
    rooms = max(0, int(as_number(simple.rooms_count)))
    roles = []
    for dept, baseline in BASELINE_FTES.items():
        for title, fte_per_room in baseline:
            ftes = round(fte_per_room * rooms * service_mult * 10) / 10
            if title in MANAGEMENT_ROLES and ftes > 1:
                ftes = 1.0
            roles.append(Role(
                id=role_id(dept, title),
                dept=dept,
                title=title,
                ftes=ftes,
                base_salary=round(simple.base_reception_salary * ROLE_SALARY_FACTORS[title] * comp_mult),
                employer_cost_pct=simple.employer_cost_pct,
            ))
    return roles

def payroll_to_simple(roles: List[Role], rooms_count: int) -> PayrollSimple:
    """Project roles back to the simple view (lossy)"""
    if not roles:
        return PayrollSimple(rooms_count=rooms_count)

    total_ftes = sum(r.ftes for r in roles)
    fte_per_room = total_ftes / rooms_count if rooms_count > 0 else PAYROLL_SIMPLE_DEFAULTS['fte_per_room']

    employer_costs = sorted(r.employer_cost_pct for r in roles)
    employer_cost_pct = employer_costs[len(employer_costs) // 2] or PAYROLL_SIMPLE_DEFAULTS['employer_cost_pct']

    receptionist = next((r for r in roles if r.title == "Receptionist"), None)
    if receptionist is not None:
        base_salary = receptionist.base_salary
    else:
        # role whose salary factor is nearest to the receptionist's
        closest = min(roles, key=lambda r: abs(ROLE_SALARY_FACTORS.get(r.title, 1.0) - 1.0))
        base_salary = round(closest.base_salary / ROLE_SALARY_FACTORS.get(closest.title, 1.0))

    baseline_per_room = sum(f for dept in BASELINE_FTES.values() for _, f in dept)
    service_level = min(
        SERVICE_LEVEL_MULTIPLIERS,
        key=lambda level: abs(fte_per_room - baseline_per_room * SERVICE_LEVEL_MULTIPLIERS[level]),
    )
    return PayrollSimple(
        service_level=service_level,
        comp_strategy=PAYROLL_SIMPLE_DEFAULTS['comp_strategy'],
        employer_cost_pct=employer_cost_pct,
        base_reception_salary=base_salary,
        fte_per_room=fte_per_room,
        rooms_count=rooms_count,
    )
