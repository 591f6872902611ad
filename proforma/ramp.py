"""Ramp and macro series resolution per deal"""
import logging
from dataclasses import dataclass
from typing import Optional

from config.default_params import MAX_YEAR
from .models import Deal, ExitSettings, RampSettings, MacroOverrides
from .series import Series, build_index, ramp_series, resolve_rates
from .units import as_number

logger = logging.getLogger(__name__)

@dataclass
class MacroSeries:
    revenue_ramp: Series
    cost_ramp: Series
    growth_index: Series
    inflation_index: Series
    exit_year: int

def exit_year_index(exit: Optional[ExitSettings]) -> int:
    """SALE exit year, REFINANCE year, or the full horizon for HOLD_FOREVER; clamped 1..10"""
    if exit is None:
        return MAX_YEAR
    if exit.strategy == "SALE":
        year = exit.sale.exit_year
    elif exit.strategy == "REFINANCE":
        year = exit.refinance.refinance_year
    elif exit.strategy == "HOLD_FOREVER":
        year = MAX_YEAR
    else:
        logger.warning("Unknown exit strategy %r, using full horizon", exit.strategy)
        year = MAX_YEAR
    return int(min(MAX_YEAR, max(1, as_number(year, MAX_YEAR))))

def resolve_series(ramp: RampSettings, macro: Optional[MacroOverrides] = None, exit_year: int = MAX_YEAR) -> MacroSeries:
    macro = macro or MacroOverrides()
    growth_rates = resolve_rates(ramp.topline_growth_pct, macro.topline_growth_rate_by_year)
    inflation_rates = resolve_rates(ramp.inflation_pct, macro.inflation_rate_by_year)
    return MacroSeries(
        revenue_ramp=ramp_series(ramp.revenue_ramp),
        cost_ramp=ramp_series(ramp.cost_ramp),
        growth_index=build_index(growth_rates),
        inflation_index=build_index(inflation_rates),
        exit_year=exit_year,
    )

def resolve_macro(deal: Optional[Deal]) -> MacroSeries:
    """The four per-year series every projection needs, plus the exit year"""
    if deal is None:
        return resolve_series(RampSettings())
    series = resolve_series(deal.ramp, deal.macro, exit_year_index(deal.exit))
    logger.debug("Deal %s: exit year %d, growth index y10 %.4f, inflation index y10 %.4f",
                 deal.id, series.exit_year, series.growth_index["y10"], series.inflation_index["y10"])
    return series
