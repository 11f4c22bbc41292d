from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Tuple


class FilingStatus(str, Enum):
    SINGLE = 'single'
    MARRIED_JOINT = 'married_joint'
    MARRIED_SEPARATE = 'married_separate'
    HEAD_OF_HOUSEHOLD = 'head_of_household'


class RothStrategy(str, Enum):
    NONE = 'none'
    FILL_BRACKET = 'fill_bracket'
    FIXED_AMOUNT = 'fixed_amount'


@dataclass(frozen=True)
class OneTimeExpense:
    year: int
    amount: float
    description: str = ''


@dataclass(frozen=True)
class SpouseInputs:
    """Spouse profile, only present for joint filers."""
    age: int
    retirement_age: int
    salary: float = 0.0
    taxable_savings: float = 0.0
    tax_deferred_savings: float = 0.0
    tax_free_savings: float = 0.0
    ss_start_age: int = 67
    ss_amount: float = 0.0
    pension_income: float = 0.0


@dataclass(frozen=True)
class SimulationInputs:
    """
    Immutable engine input for a single projection run.

    Rates are percentages (7 means 7%). Monthly amounts: ss_estimated_amount
    and pension_income. Everything else is annual.
    """
    # Identity / timeline
    current_age: int = 35
    retirement_age: int = 65
    life_expectancy: int = 90
    tax_filing_status: FilingStatus = FilingStatus.SINGLE
    state_of_residence: str = 'California'
    start_year: int = field(default_factory=lambda: date.today().year)

    # Income
    current_salary: float = 100000
    salary_growth_rate: float = 2
    taxable_savings: float = 50000
    tax_deferred_savings: float = 200000
    tax_free_savings: float = 50000
    ss_start_age: int = 67
    ss_estimated_amount: float = 2500
    pension_income: float = 0
    pension_cola: bool = False
    passive_income: float = 0

    # Contributions
    contrib_taxable: float = 5000
    contrib_deferred: float = 19500
    contrib_roth: float = 6000
    employer_match: float = 6
    savings_escalator: float = 1
    stop_contribution_age: int = 65

    # Future reality
    current_expenses: float = 75000
    retirement_ratio: float = 80
    medical_inflation: float = 5
    general_inflation: float = 2.5
    pre_retirement_return: float = 7
    post_retirement_return: float = 5
    one_time_expenses: Tuple[OneTimeExpense, ...] = ()

    # Strategy
    roth_strategy: RothStrategy = RothStrategy.NONE
    roth_conversion_amount: float = 0
    rmd_reinvestment: bool = True
    tax_target_bracket: float = 22
    legacy_goal: float = 0

    spouse: Optional[SpouseInputs] = None

    def __post_init__(self):
        # Coerce plain strings so callers can pass 'single' / 'fill_bracket'
        object.__setattr__(self, 'tax_filing_status', FilingStatus(self.tax_filing_status))
        object.__setattr__(self, 'roth_strategy', RothStrategy(self.roth_strategy))
        object.__setattr__(self, 'one_time_expenses', tuple(self.one_time_expenses))

        is_joint = self.tax_filing_status is FilingStatus.MARRIED_JOINT
        if is_joint and self.spouse is None:
            raise ValueError("married_joint filers require a spouse profile")
        if not is_joint and self.spouse is not None:
            raise ValueError(f"{self.tax_filing_status.value} filers cannot carry a spouse profile")

    @property
    def simulation_years(self) -> int:
        return self.life_expectancy - self.current_age
