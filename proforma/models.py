from dataclasses import dataclass, field
from typing import Dict, List, Optional

from config.default_params import (
    REVENUE_RAMP_PRESETS, COST_RAMP_PRESETS, RAMP_DEFAULTS,
    FINANCING_DEFAULTS, EXIT_DEFAULTS, FNB_DEFAULTS, MEAL_KEYS,
    OTHER_REVENUE_DEFAULTS, OPEX_DEFAULTS, PAYROLL_SIMPLE_DEFAULTS,
    BUDGET_DEFAULTS,
)

@dataclass
class RoomType:
    name: str = "Standard"
    count: int = 0
    adr_weight: float = 1.0   # price weight relative to the other types

@dataclass
class CostRampToggles:
    departmental: bool = True    # DIRECT opex
    undistributed: bool = True   # INDIRECT opex
    other_opex: bool = True      # fixed charges (rent is always excluded)
    payroll: bool = True

@dataclass
class RampSettings:
    revenue_ramp: List[float] = field(default_factory=lambda: list(REVENUE_RAMP_PRESETS['standard']))
    cost_ramp: List[float] = field(default_factory=lambda: list(COST_RAMP_PRESETS['standard']))
    topline_growth_pct: float = RAMP_DEFAULTS['topline_growth_pct']   # % p.a. from year 5
    inflation_pct: float = RAMP_DEFAULTS['inflation_pct']             # % p.a. from year 5
    depreciation_pct_of_capex: float = RAMP_DEFAULTS['depreciation_pct_of_capex']
    apply_cost_ramp: Optional[CostRampToggles] = None

    def __post_init__(self):
        if self.apply_cost_ramp is None:
            self.apply_cost_ramp = CostRampToggles()

@dataclass
class MacroOverrides:
    # sparse {"y5": 0.03, ...} maps, fractions
    topline_growth_rate_by_year: Optional[Dict[str, float]] = None
    inflation_rate_by_year: Optional[Dict[str, float]] = None

@dataclass
class FinancingSettings:
    ltc_pct: float = FINANCING_DEFAULTS['ltc_pct']
    investment_order: str = FINANCING_DEFAULTS['investment_order']   # EQUITY_FIRST | LOAN_FIRST
    interest_rate_pct: float = FINANCING_DEFAULTS['interest_rate_pct']
    loan_term_years: int = FINANCING_DEFAULTS['loan_term_years']
    amort_years: int = FINANCING_DEFAULTS['amort_years']
    io_period_years: int = FINANCING_DEFAULTS['io_period_years']
    tax_rate_pct: float = FINANCING_DEFAULTS['tax_rate_pct']

@dataclass
class SaleTerms:
    exit_year: int = EXIT_DEFAULTS['exit_year']
    exit_cap_rate: float = EXIT_DEFAULTS['exit_cap_rate']         # %
    selling_costs_pct: float = EXIT_DEFAULTS['selling_costs_pct']

@dataclass
class RefinanceTerms:
    refinance_year: int = EXIT_DEFAULTS['refinance_year']
    ltv_at_refinance: float = EXIT_DEFAULTS['ltv_at_refinance']   # %
    refinance_costs_pct: float = EXIT_DEFAULTS['refinance_costs_pct']

@dataclass
class ExitSettings:
    strategy: str = EXIT_DEFAULTS['strategy']   # SALE | REFINANCE | HOLD_FOREVER
    sale: Optional[SaleTerms] = None
    refinance: Optional[RefinanceTerms] = None

    def __post_init__(self):
        if self.sale is None:
            self.sale = SaleTerms()
        if self.refinance is None:
            self.refinance = RefinanceTerms()

@dataclass
class MonthRow:
    month: int          # 1-12
    adr: float
    occ_pct: float      # 0-100
    days: int

@dataclass
class RoomRevenueModel:
    months: List[MonthRow] = field(default_factory=list)

@dataclass
class MealPeriod:
    key: str
    guest_capture_pct: float = 0.0       # % of in-house guests
    avg_check_guest: float = 0.0
    external_covers_per_day: float = 0.0
    avg_check_external: float = 0.0

def default_meals() -> Dict[str, MealPeriod]:
    return {
        key: MealPeriod(key, *FNB_DEFAULTS['meals'][key])
        for key in MEAL_KEYS
    }

@dataclass
class FnBModel:
    """Advanced (per meal period) F&B drivers; the simple view is derived"""
    meals: Optional[Dict[str, MealPeriod]] = None
    avg_guests_per_occ_room: float = FNB_DEFAULTS['avg_guests_per_occ_room']
    distribution_weights: Optional[Dict[str, float]] = None

    def __post_init__(self):
        if self.meals is None:
            self.meals = default_meals()
        if self.distribution_weights is None:
            self.distribution_weights = dict(FNB_DEFAULTS['distribution_weights'])

@dataclass
class FnBSimple:
    avg_guests_per_occ_room: float = FNB_DEFAULTS['avg_guests_per_occ_room']
    total_guest_capture_pct: float = 0.0
    avg_check_guest: float = 0.0
    external_covers_per_day: float = 0.0
    avg_check_external: float = 0.0

@dataclass
class SpaSettings:
    treatments_per_day: float = OTHER_REVENUE_DEFAULTS['treatments_per_day']
    avg_price_per_treatment: float = OTHER_REVENUE_DEFAULTS['avg_price_per_treatment']

@dataclass
class OtherSettings:
    mode: str = OTHER_REVENUE_DEFAULTS['mode']    # percentage | fixed
    percentage_of_rooms: float = OTHER_REVENUE_DEFAULTS['percentage_of_rooms']
    monthly_fixed: float = OTHER_REVENUE_DEFAULTS['monthly_fixed']

@dataclass
class OtherRevenueModel:
    spa: Optional[SpaSettings] = None
    other: Optional[OtherSettings] = None

    def __post_init__(self):
        if self.spa is None:
            self.spa = SpaSettings()
        if self.other is None:
            self.other = OtherSettings()

@dataclass
class OpexItem:
    id: str
    label: str
    value: float        # % for PCT_* drivers, currency otherwise
    driver: str
    section: str        # DIRECT | INDIRECT | OTHER

def default_opex_items() -> List[OpexItem]:
    return [OpexItem(*row) for row in OPEX_DEFAULTS]

@dataclass
class OpexModel:
    items: Optional[List[OpexItem]] = None

    def __post_init__(self):
        if self.items is None:
            self.items = default_opex_items()

@dataclass
class Role:
    id: str
    dept: str           # rooms | fnb | wellness | ag | sales | maintenance
    title: str
    ftes: float = 0.0
    base_salary: float = 0.0
    employer_cost_pct: float = PAYROLL_SIMPLE_DEFAULTS['employer_cost_pct']

@dataclass
class PayrollModel:
    roles: List[Role] = field(default_factory=list)

@dataclass
class PayrollSimple:
    service_level: str = PAYROLL_SIMPLE_DEFAULTS['service_level']
    comp_strategy: str = PAYROLL_SIMPLE_DEFAULTS['comp_strategy']
    country_code: str = PAYROLL_SIMPLE_DEFAULTS['country_code']
    employer_cost_pct: float = PAYROLL_SIMPLE_DEFAULTS['employer_cost_pct']
    base_reception_salary: float = PAYROLL_SIMPLE_DEFAULTS['base_reception_salary']
    fte_per_room: float = PAYROLL_SIMPLE_DEFAULTS['fte_per_room']
    rooms_count: int = 0

@dataclass
class DealBudget:
    site_acquisition: float = 0.0
    construction: float = 0.0
    ffe: float = 0.0
    development: float = 0.0
    other_development: float = 0.0
    pre_opening: float = 0.0
    contingency_pct: float = BUDGET_DEFAULTS['contingency_pct']

    @property
    def subtotal(self) -> float:
        return (self.site_acquisition + self.construction + self.ffe +
                self.development + self.other_development + self.pre_opening)

    @property
    def contingency(self) -> float:
        return self.subtotal * self.contingency_pct / 100.0

    @property
    def grand_total(self) -> float:
        return self.subtotal + self.contingency

@dataclass
class Deal:
    id: str
    name: str = ""
    currency: str = "EUR"
    gfa_sqm: float = 0.0
    room_types: List[RoomType] = field(default_factory=list)
    capex_total: float = 0.0
    budget: Optional[DealBudget] = None
    ramp: Optional[RampSettings] = None
    macro: Optional[MacroOverrides] = None
    financing: Optional[FinancingSettings] = None
    exit: Optional[ExitSettings] = None
    room_revenue: Optional[RoomRevenueModel] = None
    fnb: Optional[FnBModel] = None
    other_revenue: Optional[OtherRevenueModel] = None
    opex: Optional[OpexModel] = None
    payroll: Optional[PayrollModel] = None

    def __post_init__(self):
        if self.ramp is None:
            self.ramp = RampSettings()
        if self.macro is None:
            self.macro = MacroOverrides()

    @property
    def total_rooms(self) -> int:
        return sum(max(0, int(rt.count)) for rt in self.room_types)

    @property
    def project_cost(self) -> float:
        if self.budget is not None:
            return self.budget.grand_total
        return self.capex_total
