"""Unlevered and levered cash flows through exit, with IRR"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np
from scipy.optimize import brentq

from .finance import (
    DebtScheduleResult, balance_at_year_end, interest_by_year, principal_by_year,
)
from .models import Deal, ExitSettings
from .statements import PLRow, row_by_id, series_from_row
from .units import clamp_pct, safe_div
from .valuation import refinance_summary, sale_summary
from .series import year_key

logger = logging.getLogger(__name__)

@dataclass
class CashflowResult:
    rows: List[Dict[str, float]] = field(default_factory=list)
    kpis: Dict[str, Optional[float]] = field(default_factory=dict)

def npv(rate: float, cashflows: Sequence[float]) -> float:
    """NPV with the first flow at t=0"""
    cfs = np.asarray(cashflows, dtype=float)
    r = max(rate, -0.999999)
    return float(np.sum(cfs / np.power(1.0 + r, np.arange(len(cfs)))))

def irr(cashflows: Sequence[float], lo: float = -0.9999, hi: float = 5.0) -> Optional[float]:
    """
    Periodic IRR, root of NPV bracketed by [lo, hi].

    Returns None when the flows never change sign or NPV has no root in range.
    """
    cfs = [float(c) for c in cashflows]
    if not cfs or not (any(c > 0 for c in cfs) and any(c < 0 for c in cfs)):
        return None
    if (npv(lo, cfs) > 0) == (npv(hi, cfs) > 0):
        return None
    try:
        return float(brentq(npv, lo, hi, args=(cfs,), xtol=1e-12, maxiter=500))
    except (ValueError, RuntimeError) as exc:
        logger.warning("IRR did not converge: %s", exc)
        return None

def build_cashflow(deal: Optional[Deal], rows: List[PLRow], schedule: DebtScheduleResult,
                   exit_year: int) -> CashflowResult:
    """
    Yearly cash flows y0..exit_year.

    Unlevered: EBITDA - cash taxes - CapEx (y0) + net sale proceeds (SALE, exit year).
    Levered: unlevered with the interest shield in taxes, plus loan draw, less
    debt service. On a SALE the balance is repaid from the proceeds; on a
    REFINANCE it is retired at the refinance year and the new loan, net of
    costs, flows to equity.
    """
    if deal is None:
        return CashflowResult()

    ebitda = series_from_row(row_by_id(rows, "ebitda"))
    revenue = series_from_row(row_by_id(rows, "total-revenue"))
    depreciation = series_from_row(row_by_id(rows, "depreciation"))
    interest = interest_by_year(schedule)
    principal = principal_by_year(schedule)
    tax_rate = clamp_pct(deal.financing.tax_rate_pct) / 100.0 if deal.financing else 0.0
    exit = deal.exit or ExitSettings()
    cost = deal.project_cost

    ref = ebitda[year_key(exit_year)]
    sale_proceeds = 0.0
    refinance_proceeds = 0.0
    repay_at_exit = False
    if exit.strategy == "SALE":
        if ref > 0 and exit.sale.exit_cap_rate > 0:
            sale_proceeds = sale_summary(exit.sale, cost, ref)["net_proceeds"]
            repay_at_exit = True
    elif exit.strategy == "REFINANCE":
        if ref > 0:
            refinance_proceeds = refinance_summary(exit.refinance, cost, ref)["net_new_loan"]
        repay_at_exit = True

    out = []
    for y in range(0, exit_year + 1):
        k = year_key(y)
        capex = cost if y == 0 else 0.0
        unlevered_taxes = max(0.0, (ebitda[k] - depreciation[k]) * tax_rate)
        levered_taxes = max(0.0, (ebitda[k] - depreciation[k] - interest[k]) * tax_rate)
        proceeds = sale_proceeds if y == exit_year else 0.0
        refi = refinance_proceeds if y == exit_year else 0.0
        draw = schedule.loan_amount if y == 0 else 0.0
        payoff = balance_at_year_end(schedule, y) if (y == exit_year and repay_at_exit) else 0.0

        unlevered = ebitda[k] - unlevered_taxes - capex + proceeds
        levered = (ebitda[k] - levered_taxes - capex + proceeds + refi + draw
                   - interest[k] - principal[k] - payoff)
        out.append({
            "year": y,
            "revenue": revenue[k],
            "ebitda": ebitda[k],
            "unlevered_taxes": unlevered_taxes,
            "levered_taxes": levered_taxes,
            "capex": capex,
            "sale_proceeds": proceeds,
            "loan_draw": draw,
            "refinance_proceeds": refi,
            "interest": interest[k],
            "principal": principal[k],
            "loan_payoff": payoff,
            "unlevered_cf": unlevered,
            "levered_cf": levered,
        })

    irr_u = irr([r["unlevered_cf"] for r in out])
    irr_l = irr([r["levered_cf"] for r in out])
    operating = out[1:]
    kpis = {
        "total_revenue": sum(r["revenue"] for r in operating),
        "total_ebitda": sum(r["ebitda"] for r in operating),
        "avg_ebitda_margin": safe_div(sum(r["ebitda"] for r in operating), sum(r["revenue"] for r in operating)),
        "total_unlevered_cf": sum(r["unlevered_cf"] for r in out),
        "total_levered_cf": sum(r["levered_cf"] for r in out),
        "irr_unlevered": irr_u,
        "irr_levered": irr_l,
    }
    if irr_u is None:
        logger.info("Deal %s: unlevered IRR undefined for these flows", deal.id)
    return CashflowResult(rows=out, kpis=kpis)
