"""Pipeline entry points: pure functions of a Deal and by-id wrappers over a DealReader"""
import logging
from typing import Dict, List, Optional

from config.default_params import MAX_YEAR
from .capital import calculate_capital_structure
from .cashflow import build_cashflow
from .finance import DebtScheduleResult, build_debt_schedule, dscr_by_year
from .metrics import underwriting_metrics
from .models import Deal, ExitSettings
from .ramp import MacroSeries, resolve_macro
from .rooms import RoomsKpis, rooms_kpis
from .statements import PLRow, calculate_pl, cells_by_year, ebitda_by_year, row_by_id
from .store import DealReader
from .valuation import ExitReturns, calculate_exit_returns, reference_ebitda, reference_year

logger = logging.getLogger(__name__)

def exit_returns(deal: Optional[Deal], rows: Optional[List[PLRow]] = None) -> ExitReturns:
    """Exit returns with the reference EBITDA taken from the P&L at the exit year"""
    exit = (deal.exit if deal is not None else None) or ExitSettings()
    if deal is None:
        ebitda = reference_ebitda(None, reference_year(exit))
        return calculate_exit_returns(exit, 0.0, ebitda)
    rows = rows if rows is not None else calculate_pl(deal)
    ebitda = reference_ebitda(cells_by_year(row_by_id(rows, "ebitda")), reference_year(exit))
    return calculate_exit_returns(exit, deal.project_cost, ebitda)

def compute(deal: Optional[Deal], year_count: int = MAX_YEAR) -> Dict[str, object]:
    """Full pro-forma for one deal"""
    macro = resolve_macro(deal)
    rows = calculate_pl(deal, year_count)
    kpis = rooms_kpis(deal, macro)
    if deal is None:
        schedule = DebtScheduleResult()
    else:
        schedule = build_debt_schedule(deal.financing, deal.project_cost)
    cost = deal.project_cost if deal is not None else 0.0
    horizon = min(macro.exit_year, year_count)

    result = {
        "macro": macro,
        "kpis": kpis,
        "pl": rows,
        "debt": schedule,
        "dscr": dscr_by_year(ebitda_by_year(rows), schedule, horizon),
        "exit": exit_returns(deal, rows),
        "cashflow": build_cashflow(deal, rows, schedule, horizon),
        "capital": calculate_capital_structure(
            cost,
            deal.financing if deal is not None else None,
            deal.budget if deal is not None else None,
        ),
        "metrics": underwriting_metrics(rows, cost, horizon),
    }
    logger.debug("Computed deal %s through year %d", deal.id if deal else None, horizon)
    return result

# --- By-id wrappers ----------------------------------------------------

def _load(reader: DealReader, deal_id: str) -> Optional[Deal]:
    deal = reader.get_deal(deal_id)
    if deal is None:
        logger.warning("Deal %s not found, returning zero-valued results", deal_id)
    return deal

def macro_for_deal(reader: DealReader, deal_id: str) -> MacroSeries:
    return resolve_macro(_load(reader, deal_id))

def rooms_kpis_for_deal(reader: DealReader, deal_id: str) -> RoomsKpis:
    return rooms_kpis(_load(reader, deal_id))

def pl_for_deal(reader: DealReader, deal_id: str, year_count: int = MAX_YEAR) -> List[PLRow]:
    return calculate_pl(_load(reader, deal_id), year_count)

def debt_schedule_for_deal(reader: DealReader, deal_id: str) -> DebtScheduleResult:
    deal = _load(reader, deal_id)
    if deal is None:
        return DebtScheduleResult()
    return build_debt_schedule(deal.financing, deal.project_cost)

def exit_returns_for_deal(reader: DealReader, deal_id: str) -> ExitReturns:
    return exit_returns(_load(reader, deal_id))

def compute_for_deal(reader: DealReader, deal_id: str, year_count: int = MAX_YEAR) -> Dict[str, object]:
    return compute(_load(reader, deal_id), year_count)
