"""Numeric guards: clamping, percent/fraction handling and safe division"""
import math

def as_number(value, default: float = 0.0) -> float:
    """Coerce to float; None, NaN, inf and unparseable values become default"""
    try:
        v = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(v) or math.isinf(v):
        return default
    return v

def non_negative(value) -> float:
    return max(0.0, as_number(value))

def clamp(value, lo: float, hi: float) -> float:
    return min(hi, max(lo, as_number(value, lo)))

def clamp01(value) -> float:
    return clamp(value, 0.0, 1.0)

def clamp_pct(value, hi: float = 100.0) -> float:
    """Percentage in 0..hi"""
    return clamp(value, 0.0, hi)

def safe_div(num: float, denom: float) -> float:
    """num / denom, or 0 when the denominator is zero or not finite"""
    if not denom or math.isnan(denom) or math.isinf(denom):
        return 0.0
    return num / denom
