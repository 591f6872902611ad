"""Debt schedule: amortization with interest-only period, balloon detection and DSCR"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from config.default_params import MAX_LOAN_YEARS
from .models import FinancingSettings
from .series import YEARS, Series, empty_series, year_key
from .units import as_number, clamp_pct, non_negative

logger = logging.getLogger(__name__)

BALLOON_EPSILON = 0.005

@dataclass
class DebtScheduleResult:
    loan_amount: float = 0.0
    monthly_payment: float = 0.0        # post interest-only
    monthly_io_payment: float = 0.0
    annual_debt_service: float = 0.0
    balloon_payment: float = 0.0
    has_balloon: bool = False
    rows: List[Dict[str, float]] = field(default_factory=list)

def monthly_payment(principal: float, apr: float, amort_months: int) -> float:
    """Level payment that retires principal over amort_months"""
    r = apr / 12.0
    n = max(1, amort_months)
    if r == 0:
        return principal / n
    return principal * (r * (1 + r)**n) / ((1 + r)**n - 1)

def financing_amounts(financing: Optional[FinancingSettings], project_cost: float) -> Dict[str, float]:
    """Loan and equity split of the project cost"""
    cost = non_negative(project_cost)
    if financing is None:
        return {"project_cost": cost, "loan_amount": 0.0, "equity_required": cost}
    loan = cost * clamp_pct(financing.ltc_pct) / 100.0
    return {"project_cost": cost, "loan_amount": loan, "equity_required": cost - loan}

def _years(value, lo: int) -> int:
    return int(min(MAX_LOAN_YEARS, max(lo, as_number(value, lo))))

def build_debt_schedule(financing: Optional[FinancingSettings], project_cost: float) -> DebtScheduleResult:
    """Monthly amortization through loan maturity; any balance left at maturity is the balloon"""
    loan = financing_amounts(financing, project_cost)["loan_amount"]
    if loan <= 0:
        return DebtScheduleResult()

    apr = clamp_pct(financing.interest_rate_pct) / 100.0
    r = apr / 12.0
    term_months = _years(financing.loan_term_years, 1) * 12
    amort_months = _years(financing.amort_years, 1) * 12
    io_months = min(term_months, _years(financing.io_period_years, 0) * 12)

    io_payment = loan * r
    pmt = monthly_payment(loan, apr, amort_months)

    rows = []
    bal = loan
    for m in range(1, term_months + 1):
        interest = bal * r
        if m <= io_months:
            payment = interest
            principal_pay = 0.0
        else:
            payment = min(pmt, bal + interest)
            principal_pay = max(0.0, payment - interest)
            bal = max(0.0, bal - principal_pay)
        rows.append({
            "month": m,
            "payment": payment,
            "interest": interest,
            "principal": principal_pay,
            "balance": bal,
        })

    balloon = bal if bal > BALLOON_EPSILON else 0.0
    result = DebtScheduleResult(
        loan_amount=loan,
        monthly_payment=pmt,
        monthly_io_payment=io_payment,
        annual_debt_service=pmt * 12,
        balloon_payment=balloon,
        has_balloon=balloon > 0,
        rows=rows,
    )
    logger.debug("Debt schedule: loan %.2f, payment %.2f/month, balloon %.2f", loan, pmt, balloon)
    return result

def _by_year(schedule: DebtScheduleResult, field_name: str) -> Series:
    out = empty_series()
    for row in schedule.rows:
        year = (row["month"] - 1) // 12 + 1
        if year in YEARS:
            out[year_key(year)] += row[field_name]
    return out

def debt_service_by_year(schedule: DebtScheduleResult) -> Series:
    return _by_year(schedule, "payment")

def interest_by_year(schedule: DebtScheduleResult) -> Series:
    return _by_year(schedule, "interest")

def principal_by_year(schedule: DebtScheduleResult) -> Series:
    return _by_year(schedule, "principal")

def balance_at_year_end(schedule: DebtScheduleResult, year: int) -> float:
    """Outstanding balance after the last payment of the given year (loan amount at year 0)"""
    if year <= 0 or not schedule.rows:
        return schedule.loan_amount
    month = min(year * 12, len(schedule.rows))
    return schedule.rows[month - 1]["balance"]

def first_year_interest(schedule: DebtScheduleResult) -> float:
    return sum(row["interest"] for row in schedule.rows[:12])

def dscr(ebitda: float, debt_service: float) -> float:
    """Calculate Debt Service Coverage Ratio (0 without debt service)"""
    return (ebitda / debt_service) if debt_service > 1e-9 else 0.0

def dscr_by_year(ebitda: Series, schedule: DebtScheduleResult, horizon: int) -> Series:
    """DSCR per operating year; 0 where there is no debt service"""
    service = debt_service_by_year(schedule)
    out = empty_series()
    for y in range(1, horizon + 1):
        k = year_key(y)
        out[k] = dscr(ebitda.get(k, 0.0), service[k])
    return out
