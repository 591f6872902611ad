"""Capital budget and sources & uses"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .finance import financing_amounts
from .models import DealBudget, FinancingSettings

logger = logging.getLogger(__name__)

@dataclass
class CapitalStructure:
    """Balanced sources and uses for the development"""
    # Uses
    site_acquisition: float
    construction: float
    ffe: float
    development: float
    other_development: float
    pre_opening: float
    contingency: float
    total_uses: float

    # Sources
    loan_amount: float
    equity_required: float
    total_sources: float

    # Order in which the sources fund the uses
    funding_sequence: List[Tuple[str, float]] = field(default_factory=list)

    # Validation
    balanced: bool = True
    difference: float = 0.0

def calculate_capital_structure(
    project_cost: float,
    financing: Optional[FinancingSettings] = None,
    budget: Optional[DealBudget] = None,
) -> CapitalStructure:
    """
    Split the project cost into loan and equity and lay out the uses

    Args:
        project_cost: Total capital budget (grand total incl. contingency)
        financing: Loan-to-cost and investment order; None means all equity
        budget: Itemized budget; without one the whole cost sits in construction

    Returns:
        Capital structure with the funding sequence
    """
    if budget is None:
        budget = DealBudget(construction=project_cost, contingency_pct=0.0)

    total_uses = budget.grand_total
    if abs(total_uses - project_cost) >= 1.0:
        logger.warning("Budget total %.2f differs from project cost %.2f", total_uses, project_cost)

    amounts = financing_amounts(financing, total_uses)
    loan = amounts["loan_amount"]
    equity = amounts["equity_required"]
    total_sources = loan + equity

    order = financing.investment_order if financing is not None else "EQUITY_FIRST"
    if order == "LOAN_FIRST":
        sequence = [("loan", loan), ("equity", equity)]
    else:
        if order != "EQUITY_FIRST":
            logger.warning("Unknown investment order %r, funding equity first", order)
        sequence = [("equity", equity), ("loan", loan)]

    difference = abs(total_sources - total_uses)
    return CapitalStructure(
        site_acquisition=budget.site_acquisition,
        construction=budget.construction,
        ffe=budget.ffe,
        development=budget.development,
        other_development=budget.other_development,
        pre_opening=budget.pre_opening,
        contingency=budget.contingency,
        total_uses=total_uses,
        loan_amount=loan,
        equity_required=equity,
        total_sources=total_sources,
        funding_sequence=sequence,
        balanced=difference < 1.0,
        difference=difference,
    )
