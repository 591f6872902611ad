"""Exit valuation: sale proceeds, refinance cash-out and placeholder returns"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from config.default_params import (
    FALLBACK_REFERENCE_EBITDA, HOLD_DEVELOPMENT_PROFIT_PCT, ORIGINAL_LTC,
    PLACEHOLDER_IRR, REFINANCE_CAP_RATE,
)
from .models import ExitSettings, RefinanceTerms, SaleTerms
from .series import Series, year_key
from .units import clamp_pct, non_negative, safe_div

logger = logging.getLogger(__name__)

HOLD_REFERENCE_YEAR = 5

@dataclass
class ExitReturns:
    irr_levered: float          # %
    irr_unlevered: float        # %
    development_profit: float

def reference_ebitda(ebitda: Optional[Series], exit_year: int) -> float:
    """EBITDA at the exit year; the fixed fallback when the year is not available"""
    if not ebitda:
        logger.warning("No EBITDA series, using fallback reference EBITDA")
        return FALLBACK_REFERENCE_EBITDA
    value = ebitda.get(year_key(exit_year))
    if value is None:
        logger.warning("Exit year %s outside the EBITDA series, using fallback", exit_year)
        return FALLBACK_REFERENCE_EBITDA
    return value

def reference_year(exit: ExitSettings) -> int:
    if exit.strategy == "SALE":
        return int(exit.sale.exit_year)
    if exit.strategy == "REFINANCE":
        return int(exit.refinance.refinance_year)
    return HOLD_REFERENCE_YEAR

def sale_summary(sale: SaleTerms, project_cost: float, ebitda: float) -> Dict[str, float]:
    cap = clamp_pct(sale.exit_cap_rate) / 100.0
    price = safe_div(ebitda, cap)
    net = price * (1 - clamp_pct(sale.selling_costs_pct) / 100.0)
    return {
        "reference_ebitda": ebitda,
        "sale_price": price,
        "selling_costs": price - net,
        "net_proceeds": net,
        "development_profit": net - project_cost,
    }

def refinance_summary(refi: RefinanceTerms, project_cost: float, ebitda: float) -> Dict[str, float]:
    value = ebitda / REFINANCE_CAP_RATE
    new_loan = value * clamp_pct(refi.ltv_at_refinance) / 100.0
    original_loan = ORIGINAL_LTC * project_cost
    net_new_loan = new_loan * (1 - clamp_pct(refi.refinance_costs_pct) / 100.0)
    cash_out = net_new_loan - original_loan
    return {
        "reference_ebitda": ebitda,
        "property_value": value,
        "new_loan": new_loan,
        "net_new_loan": net_new_loan,
        "original_loan": original_loan,
        "net_cash_out": cash_out,
    }

def calculate_exit_returns(exit: Optional[ExitSettings], project_cost: float, ebitda: float) -> ExitReturns:
    """
    Returns for the configured exit strategy.

    Args:
        exit: Exit settings (None is treated as the default SALE)
        project_cost: Total capital budget
        ebitda: Reference EBITDA at the exit year

    Returns:
        IRRs (placeholder estimates, %) and development profit
    """
    exit = exit or ExitSettings()
    cost = non_negative(project_cost)

    if exit.strategy == "SALE":
        year = int(exit.sale.exit_year)
        base_lev, base_unlev = PLACEHOLDER_IRR['SALE']
        step_lev, step_unlev = PLACEHOLDER_IRR['SALE_PER_YEAR']
        return ExitReturns(
            irr_levered=base_lev + (year - 5) * step_lev,
            irr_unlevered=base_unlev + (year - 5) * step_unlev,
            development_profit=sale_summary(exit.sale, cost, ebitda)["development_profit"],
        )

    if exit.strategy == "REFINANCE":
        lev, unlev = PLACEHOLDER_IRR['REFINANCE']
        return ExitReturns(lev, unlev, refinance_summary(exit.refinance, cost, ebitda)["net_cash_out"])

    if exit.strategy != "HOLD_FOREVER":
        logger.warning("Unknown exit strategy %r, using hold returns", exit.strategy)
    lev, unlev = PLACEHOLDER_IRR['HOLD_FOREVER']
    return ExitReturns(lev, unlev, cost * HOLD_DEVELOPMENT_PROFIT_PCT)
