"""Default parameters and presets for the hotel pro-forma model."""

# Projection horizon: y0 (pre-opening) through y10
MAX_YEAR = 10
RAMP_YEARS = 4              # ramp curves cover years 1-4, growth compounds from year 5
DAYS_PER_YEAR = 365
BASE_CALENDAR_YEAR = 2025   # days-in-month for the default room model

REVENUE_RAMP_PRESETS = {
    'conservative': [0.70, 0.80, 0.90, 1.00],
    'standard': [0.80, 0.90, 1.00, 1.00],
    'ambitious': [0.85, 1.00, 1.00, 1.00],
}

COST_RAMP_PRESETS = {
    'conservative': [1.15, 1.10, 1.00, 1.00],
    'standard': [1.10, 1.05, 1.00, 1.00],
    'ambitious': [1.08, 1.02, 1.00, 1.00],
}

RAMP_DEFAULTS = {
    'topline_growth_pct': 3.0,
    'inflation_pct': 2.0,
    'depreciation_pct_of_capex': 3.0,
}

# Monthly occupancy % by market type
SEASONALITY_PRESETS = {
    'beach':         [50, 55, 60, 70, 80, 88, 92, 90, 78, 65, 55, 50],
    'winterResort':  [70, 75, 85, 75, 60, 45, 35, 35, 45, 60, 75, 85],
    'majorCity':     [62, 64, 72, 78, 82, 80, 78, 76, 82, 84, 76, 70],
    'businessCity':  [68, 70, 78, 82, 80, 70, 65, 66, 80, 84, 78, 72],
}

ROOM_REVENUE_DEFAULTS = {
    'adr': 140.0,
    'seasonality': 'majorCity',
}

FINANCING_DEFAULTS = {
    'ltc_pct': 40.0,
    'investment_order': 'EQUITY_FIRST',
    'interest_rate_pct': 5.5,
    'loan_term_years': 20,
    'amort_years': 25,
    'io_period_years': 0,
    'tax_rate_pct': 25.0,
}

MAX_LOAN_YEARS = 50        # upper bound on term, amortization and interest-only years

EXIT_DEFAULTS = {
    'strategy': 'SALE',
    'exit_year': 5,
    'exit_cap_rate': 6.5,
    'selling_costs_pct': 3.0,
    'refinance_year': 5,
    'ltv_at_refinance': 70.0,
    'refinance_costs_pct': 2.0,
}

# Fixed assumptions behind the placeholder return estimates
REFINANCE_CAP_RATE = 0.065
ORIGINAL_LTC = 0.40
FALLBACK_REFERENCE_EBITDA = 800_000.0
HOLD_DEVELOPMENT_PROFIT_PCT = 0.25
PLACEHOLDER_IRR = {
    'SALE': (15.0, 12.0),            # levered, unlevered at year 5
    'SALE_PER_YEAR': (0.5, 0.3),     # drift per year away from year 5
    'REFINANCE': (18.0, 12.0),
    'HOLD_FOREVER': (13.5, 11.5),
}

MEAL_KEYS = ['breakfast', 'lunch', 'dinner', 'bar']

FNB_DEFAULTS = {
    'avg_guests_per_occ_room': 1.8,
    'distribution_weights': {'breakfast': 30, 'lunch': 25, 'dinner': 35, 'bar': 10},
    'meals': {
        # capture %, guest check, external covers/day, external check
        'breakfast': (80.0, 12.0, 5.0, 15.0),
        'lunch': (40.0, 18.0, 15.0, 22.0),
        'dinner': (60.0, 35.0, 20.0, 45.0),
        'bar': (45.0, 15.0, 25.0, 18.0),
    },
}

OTHER_REVENUE_DEFAULTS = {
    'treatments_per_day': 4.0,
    'avg_price_per_treatment': 70.0,
    'mode': 'percentage',
    'percentage_of_rooms': 5.0,
    'monthly_fixed': 0.0,
}

OPEX_DRIVERS = [
    'PCT_ROOMS_REVENUE',
    'PCT_FNB_REVENUE',
    'PCT_OTHER_REVENUE',
    'PCT_TOTAL_REVENUE',
    'PER_ROOM_NIGHT_SOLD',
    'FIXED_PER_MONTH',
]

# (id, label, value, driver, section)
OPEX_DEFAULTS = [
    ('rooms-commission', 'Rooms Commission', 15.0, 'PCT_ROOMS_REVENUE', 'DIRECT'),
    ('guest-supplies-cleaning', 'Guest Supplies, Cleaning', 8.0, 'PER_ROOM_NIGHT_SOLD', 'DIRECT'),
    ('cost-of-goods-sold', 'Cost of Goods Sold', 30.0, 'PCT_FNB_REVENUE', 'DIRECT'),
    ('me-costs', 'M&E Costs (Meeting & Events)', 2.0, 'PCT_OTHER_REVENUE', 'DIRECT'),
    ('wellness-other-costs', 'Wellness Other Costs', 1500.0, 'FIXED_PER_MONTH', 'DIRECT'),
    ('other-direct-costs', 'Other Direct Costs', 2000.0, 'FIXED_PER_MONTH', 'DIRECT'),
    ('other-ag', 'Other A&G', 2.0, 'PCT_TOTAL_REVENUE', 'INDIRECT'),
    ('tech-subscriptions', 'Tech Subscriptions', 800.0, 'FIXED_PER_MONTH', 'INDIRECT'),
    ('other-sm', 'Other S&M', 3.0, 'PCT_TOTAL_REVENUE', 'INDIRECT'),
    ('maintenance-other', 'Maintenance Other', 2.0, 'PCT_TOTAL_REVENUE', 'INDIRECT'),
    ('utilities', 'Utilities', 3.0, 'PCT_TOTAL_REVENUE', 'INDIRECT'),
    ('management-fees', 'Management Fees', 3.0, 'PCT_TOTAL_REVENUE', 'OTHER'),
    ('property-taxes', 'Property Taxes', 1.0, 'PCT_TOTAL_REVENUE', 'OTHER'),
    ('insurance', 'Insurance', 1.0, 'PCT_TOTAL_REVENUE', 'OTHER'),
    ('rent', 'Rent', 0.0, 'FIXED_PER_MONTH', 'OTHER'),
]

# Opex section -> cost ramp toggle
SECTION_RAMP_TOGGLE = {
    'DIRECT': 'departmental',
    'INDIRECT': 'undistributed',
    'OTHER': 'other_opex',
}

DEPARTMENTS = ['rooms', 'fnb', 'wellness', 'ag', 'sales', 'maintenance']

PAYROLL_SIMPLE_DEFAULTS = {
    'service_level': 'upscale',
    'comp_strategy': 'market',
    'country_code': 'PT',
    'employer_cost_pct': 25.0,
    'base_reception_salary': 20_000.0,
    'fte_per_room': 1.3,
}

SERVICE_LEVEL_MULTIPLIERS = {
    'economy': 0.7,
    'midscale': 0.85,
    'upscale': 1.0,
    'luxury': 1.3,
}

COMP_STRATEGY_MULTIPLIERS = {
    'cost': 0.8,
    'market': 1.0,
    'premium': 1.2,
}

ROLE_SALARY_FACTORS = {
    'Receptionist': 1.0,
    'Front Office Manager': 2.25,
    'Housekeeping': 0.9,
    'Night Shift': 1.3,
    'F&B Manager': 1.6,
    'Executive Chef': 2.4,
    'Cooks': 1.6,
    'Stewarding': 1.1,
    'Waiter': 1.25,
    'Head of Wellness': 1.9,
    'Spa & Wellness attendant': 1.3,
    'Hotel Manager': 3.25,
    'Finance Manager': 2.5,
    'HR Manager': 2.25,
    'Sales & Marketing Manager': 1.6,
    'Content Creator Intern': 0.45,
    'Maintenance Clerk': 1.0,
}

# dept -> [(title, FTE per room)]
BASELINE_FTES = {
    'rooms': [
        ('Front Office Manager', 0.071),
        ('Receptionist', 0.143),
        ('Housekeeping', 0.143),
        ('Night Shift', 0.054),
    ],
    'fnb': [
        ('F&B Manager', 0.036),
        ('Executive Chef', 0.036),
        ('Cooks', 0.214),
        ('Stewarding', 0.143),
        ('Waiter', 0.286),
    ],
    'wellness': [
        ('Head of Wellness', 0.018),
        ('Spa & Wellness attendant', 0.071),
    ],
    'ag': [
        ('Hotel Manager', 0.036),
        ('Finance Manager', 0.018),
        ('HR Manager', 0.018),
    ],
    'sales': [
        ('Sales & Marketing Manager', 0.029),
        ('Content Creator Intern', 0.036),
    ],
    'maintenance': [
        ('Maintenance Clerk', 0.036),
    ],
}

# Capped at 1 FTE when generated from the simple view
MANAGEMENT_ROLES = [
    'Front Office Manager',
    'F&B Manager',
    'Executive Chef',
    'Head of Wellness',
    'Hotel Manager',
    'Finance Manager',
    'HR Manager',
    'Sales & Marketing Manager',
]

BUDGET_DEFAULTS = {
    'contingency_pct': 10.0,
}

# Underwriting thresholds (fractions)
THRESHOLDS = {
    'yield_on_cost': {'good': 0.10, 'ok': 0.07},
    'gop_margin': {'low': 0.20, 'high': 0.55},
    'dept_margin': {'red': 0.0, 'amber': 0.10},
    'rooms_margin': {'low': 0.60},
}
