from dataclasses import asdict, dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class SimulationYearOutput:
    # Timeline
    year: int
    user_age: int
    spouse_age: Optional[int]

    # Income sources
    work_income: float
    social_security: float
    pension: float
    rmds: float
    interest_dividends: float
    passive_income: float
    gross_income: float

    # Tax liability
    standard_deduction: float
    taxable_income: float
    federal_tax: float
    state_tax: float
    fica_tax: float
    total_tax: float

    # Outflows
    essential_expenses: float
    healthcare: float
    discretionary: float
    one_time_expense: float
    total_spend: float

    net_surplus_gap: float

    # Portfolio actions
    contributions: float
    employer_match: float
    draw_taxable: float
    draw_deferred: float
    draw_roth: float
    unfunded_gap: float
    roth_conversion: float
    conversion_tax_cost: float
    return_rate: float

    # Ending balances
    taxable_balance: float
    deferred_balance: float
    roth_balance: float
    total_portfolio: float

    # Analytics
    legacy_value: float
    real_wealth: float

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class SimulationResult:
    years: List[SimulationYearOutput] = field(default_factory=list)
    success_probability: float = 100.0
    financial_independence_age: int = 0
    total_legacy: float = 0.0
    shortfall_years: List[int] = field(default_factory=list)
    legacy_goal_met: bool = True

    @property
    def final_year(self):
        return self.years[-1] if self.years else None

    def year_for_age(self, age):
        for row in self.years:
            if row.user_age == age:
                return row
        return None
