"""
Canned "what if" modifications applied on top of a baseline plan.
"""
from dataclasses import dataclass
from typing import Callable

from services.exceptions import UnknownTemplateError


@dataclass(frozen=True)
class ScenarioTemplate:
    id: str
    name: str
    description: str
    category: str  # retirement_age | spending | savings
    modifier: Callable

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'category': self.category,
        }


SCENARIO_TEMPLATES = [
    # Retirement age
    ScenarioTemplate(
        'retire_2_earlier', 'Retire 2 Years Earlier', 'What if I retire at age',
        'retirement_age', lambda p: {'retirement_age': p.retirement_age - 2},
    ),
    ScenarioTemplate(
        'retire_2_later', 'Work 2 More Years', 'What if I work until age',
        'retirement_age', lambda p: {'retirement_age': p.retirement_age + 2},
    ),
    ScenarioTemplate(
        'retire_at_67', 'Retire at Full SS Age (67)', 'Traditional retirement age',
        'retirement_age', lambda p: {'retirement_age': 67},
    ),

    # Spending
    ScenarioTemplate(
        'reduce_spending_10', 'Cut Spending 10%', 'Live more frugally',
        'spending', lambda p: {'current_expenses': round(p.current_expenses * 0.9)},
    ),
    ScenarioTemplate(
        'reduce_spending_20', 'Cut Spending 20%', 'Major lifestyle reduction',
        'spending', lambda p: {'current_expenses': round(p.current_expenses * 0.8)},
    ),
    ScenarioTemplate(
        'increase_spending_20', 'Spend 20% More', 'Upgrade lifestyle',
        'spending', lambda p: {'current_expenses': round(p.current_expenses * 1.2)},
    ),

    # Savings (contribution caps are annual)
    ScenarioTemplate(
        'save_500_more', 'Save $500/Month More', 'Boost retirement savings now',
        'savings', lambda p: {'contrib_deferred': p.contrib_deferred + 500 * 12},
    ),
    ScenarioTemplate(
        'save_1000_more', 'Save $1,000/Month More', 'Aggressive savings mode',
        'savings', lambda p: {'contrib_deferred': p.contrib_deferred + 1000 * 12},
    ),
]

_TEMPLATES_BY_ID = {t.id: t for t in SCENARIO_TEMPLATES}


def get_template(template_id):
    try:
        return _TEMPLATES_BY_ID[template_id]
    except KeyError:
        raise UnknownTemplateError(template_id) from None


def get_templates_by_category(category=None):
    if category is None:
        return list(SCENARIO_TEMPLATES)
    return [t for t in SCENARIO_TEMPLATES if t.category == category]


def apply_template(template, params):
    """Return a copy of `params` with the template's changes applied."""
    return params.model_copy(update=template.modifier(params))
