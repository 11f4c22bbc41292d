from datetime import date
from typing import Annotated, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    model_validator,
)
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and emits the frontend's camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OneTimeExpenseModel(CamelModel):
    year: int = Field(ge=1900, le=2300)
    amount: float = Field(ge=0)
    description: str = ''


class SpouseModel(CamelModel):
    age: int = Field(ge=0, le=120)
    retirement_age: int = Field(ge=0, le=120)
    salary: float = Field(ge=0, default=0)
    taxable_savings: float = Field(ge=0, default=0)
    tax_deferred_savings: float = Field(ge=0, default=0)
    tax_free_savings: float = Field(ge=0, default=0)
    ss_start_age: int = Field(ge=62, le=75, default=67)
    ss_amount: float = Field(ge=0, default=0)
    pension_income: float = Field(ge=0, default=0)


class BaseSimulationParams(CamelModel):
    """Complete simulation parameters with validation"""
    # Phase 1: identity / timeline
    current_age: int = Field(ge=0, le=120, default=35)
    retirement_age: int = Field(ge=0, le=120, default=65)
    life_expectancy: int = Field(ge=0, le=120, default=90)
    state_of_residence: str = 'California'
    start_year: int = Field(ge=1900, le=2300, default_factory=lambda: date.today().year)

    # Phase 2: income
    current_salary: float = Field(ge=0, default=100000)
    salary_growth_rate: float = Field(ge=-50, le=50, default=2)
    taxable_savings: float = Field(ge=0, default=50000)
    tax_deferred_savings: float = Field(ge=0, default=200000)
    tax_free_savings: float = Field(ge=0, default=50000)
    ss_start_age: int = Field(ge=62, le=75, default=67)
    ss_estimated_amount: float = Field(ge=0, default=2500)
    pension_income: float = Field(ge=0, default=0)
    pension_cola: bool = Field(default=False, alias='pensionCOLA')
    passive_income: float = Field(ge=0, default=0)

    # Phase 3: contributions
    contrib_taxable: float = Field(ge=0, default=5000)
    contrib_deferred: float = Field(ge=0, default=19500)
    contrib_roth: float = Field(ge=0, default=6000)
    employer_match: float = Field(ge=0, le=100, default=6)
    savings_escalator: float = Field(ge=0, le=50, default=1)
    stop_contribution_age: int = Field(ge=0, le=120, default=65)

    # Phase 4: future reality
    current_expenses: float = Field(ge=0, default=75000)
    retirement_ratio: float = Field(ge=0, le=300, default=80)
    medical_inflation: float = Field(ge=-10, le=50, default=5)
    general_inflation: float = Field(ge=-10, le=50, default=2.5)
    pre_retirement_return: float = Field(ge=-50, le=50, default=7)
    post_retirement_return: float = Field(ge=-50, le=50, default=5)
    one_time_expenses: List[OneTimeExpenseModel] = Field(default_factory=list)

    # Phase 5: strategy
    roth_strategy: Literal['none', 'fill_bracket', 'fixed_amount'] = 'none'
    roth_conversion_amount: float = Field(ge=0, default=0)
    rmd_reinvestment: bool = True
    tax_target_bracket: float = Field(ge=0, le=100, default=22)
    legacy_goal: float = Field(ge=0, default=0)

    @model_validator(mode='after')
    def ensure_horizon(self):
        if self.life_expectancy <= self.current_age:
            raise ValueError("lifeExpectancy must be greater than currentAge")
        return self


class SingleFilerParams(BaseSimulationParams):
    tax_filing_status: Literal['single', 'married_separate', 'head_of_household'] = 'single'


class JointFilerParams(BaseSimulationParams):
    tax_filing_status: Literal['married_joint']
    spouse: SpouseModel


def _filing_status_tag(value):
    if isinstance(value, dict):
        status = value.get('taxFilingStatus', value.get('tax_filing_status', 'single'))
    else:
        status = getattr(value, 'tax_filing_status', 'single')
    return 'joint' if status == 'married_joint' else 'single'


SimulationParams = Annotated[
    Union[
        Annotated[SingleFilerParams, Tag('single')],
        Annotated[JointFilerParams, Tag('joint')],
    ],
    Discriminator(_filing_status_tag),
]

simulation_params_adapter = TypeAdapter(SimulationParams)


def parse_simulation_params(data):
    """Validate a raw dict into the single- or joint-filer variant."""
    return simulation_params_adapter.validate_python(data)


class ComparisonRequest(CamelModel):
    baseline: SimulationParams
    modified: Optional[SimulationParams] = None
    template_id: Optional[str] = None

    @model_validator(mode='after')
    def ensure_one_variant(self):
        if (self.modified is None) == (self.template_id is None):
            raise ValueError("Provide exactly one of 'modified' or 'templateId'")
        return self


class SavedScenarioRequest(CamelModel):
    name: str = Field(min_length=1, max_length=80)
    params: SimulationParams
