"""Year-keyed series and compounding index construction"""
import logging
from typing import Dict, List, Optional, Union

from config.default_params import MAX_YEAR, RAMP_YEARS
from .units import as_number

logger = logging.getLogger(__name__)

Series = Dict[str, float]

YEARS = list(range(0, MAX_YEAR + 1))

def year_key(year: int) -> str:
    return f"y{year}"

def year_from_key(key: str) -> Optional[int]:
    """'y7' -> 7; None for anything that is not a year key"""
    if not isinstance(key, str) or not key.startswith("y"):
        return None
    try:
        return int(key[1:])
    except ValueError:
        return None

def empty_series(value: float = 0.0) -> Series:
    return {year_key(y): value for y in YEARS}

def combine(*series: Series) -> Series:
    """Elementwise sum of dense series"""
    return {year_key(y): sum(s.get(year_key(y), 0.0) for s in series) for y in YEARS}

def rates_from_flat(pct: float) -> Series:
    """Flat annual % (e.g. 3 for 3%) expanded to a per-year fraction"""
    rate = as_number(pct) / 100.0
    return {year_key(y): rate for y in YEARS}

def rates_from_override(override: Dict[str, float]) -> Series:
    """Sparse per-year fractions; years absent from the map have rate 0"""
    rates = empty_series(0.0)
    for key, value in override.items():
        year = year_from_key(key)
        if year is None or year not in YEARS:
            logger.warning("Ignoring rate override with key %r", key)
            continue
        rates[year_key(year)] = as_number(value)
    return rates

def resolve_rates(flat_pct: float, override: Optional[Dict[str, float]] = None) -> Series:
    """Explicit overrides win; an absent or empty map falls back to the flat %"""
    if override:
        return rates_from_override(override)
    return rates_from_flat(flat_pct)

def build_index(
    rates: Union[float, Series],
    years: Optional[List[int]] = None,
    floor_year: int = RAMP_YEARS,
) -> Series:
    """
    Compounding multiplier series.

    value(y) = 1 for y <= floor_year, value(y) = value(y-1) * (1 + rate(y)) after.
    A flat rate (fraction) applies to every year.
    """
    years = YEARS if years is None else sorted(years)
    if isinstance(rates, dict):
        rate_of = lambda y: as_number(rates.get(year_key(y), 0.0))
    else:
        flat = as_number(rates)
        rate_of = lambda y: flat

    index = {}
    prev = 1.0
    for y in years:
        if y <= floor_year:
            value = 1.0
        else:
            value = prev * (1.0 + rate_of(y))
        index[year_key(y)] = value
        prev = value
    return index

def ramp_series(curve: List[float]) -> Series:
    """4-point ramp curve -> dense series (year 0 and years past the curve are 1.0)"""
    out = empty_series(1.0)
    for i, factor in enumerate(list(curve)[:RAMP_YEARS]):
        out[year_key(i + 1)] = max(0.0, as_number(factor, 1.0))
    return out
