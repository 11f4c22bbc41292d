"""
Static lookup tables used by the projection engine.

All amounts are 2024 dollars and are not indexed for inflation.
Brackets are (min, max, rate) rows in ascending order; the top row is
open-ended.
"""
import math

FEDERAL_BRACKETS = {
    'single': [
        (0, 11600, 0.10),
        (11600, 47150, 0.12),
        (47150, 100525, 0.22),
        (100525, 191950, 0.24),
        (191950, 243725, 0.32),
        (243725, 609350, 0.35),
        (609350, math.inf, 0.37),
    ],
    'married_joint': [
        (0, 23200, 0.10),
        (23200, 94300, 0.12),
        (94300, 201050, 0.22),
        (201050, 383900, 0.24),
        (383900, 487450, 0.32),
        (487450, 731200, 0.35),
        (731200, math.inf, 0.37),
    ],
}

STANDARD_DEDUCTIONS = {
    'single': 14600,
    'married_joint': 29200,
    'married_separate': 14600,
    'head_of_household': 21900,
}

# Flat approximations of state income tax
STATE_TAX_RATES = {
    'California': 0.093,
    'New York': 0.085,
    'New Jersey': 0.089,
    'Texas': 0.0,
    'Florida': 0.0,
    'Nevada': 0.0,
    'Washington': 0.0,
    'Tennessee': 0.0,
    'Wyoming': 0.0,
    'Alaska': 0.0,
    'South Dakota': 0.0,
    'Illinois': 0.0495,
    'Pennsylvania': 0.0307,
    'Ohio': 0.04,
}
DEFAULT_STATE_TAX_RATE = 0.05

FICA_RATE = 0.0765
FICA_WAGE_BASE = 168600

# RMD Table (Uniform Lifetime)
RMD_START_AGE = 73
RMD_DIVISORS = {
    72: 27.4, 73: 26.5, 74: 25.5, 75: 24.6, 76: 23.7, 77: 22.9,
    78: 22.0, 79: 21.1, 80: 20.2, 81: 19.4, 82: 18.5, 83: 17.7,
    84: 16.8, 85: 16.0, 86: 15.2, 87: 14.4, 88: 13.7, 89: 12.9,
    90: 12.2, 91: 11.5, 92: 10.8, 93: 10.1, 94: 9.5, 95: 8.9,
}
RMD_FINAL_DIVISOR = 8.9

# Social Security claiming adjustment around full retirement age
SS_FULL_RETIREMENT_AGE = 67
SS_DELAYED_CREDIT = 0.08
SS_EARLY_REDUCTION = 0.0667

TAXABLE_YIELD = 0.02
ASSUMED_FLAT_TAX_RATE = 0.22

ESSENTIAL_SHARE = 0.70
HEALTHCARE_SHARE = 0.15
DISCRETIONARY_SHARE = 0.15

FI_EXPENSE_MULTIPLE = 25
