from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class SmartDefaults:
    current_salary: float
    tax_deferred_savings: float
    tax_free_savings: float
    taxable_savings: float
    retirement_age: int
    contrib_deferred: float

    def to_dict(self):
        return asdict(self)


# (upper age bound exclusive, label, defaults)
AGE_BRACKETS = [
    (30, '18-29', SmartDefaults(65000, 25000, 10000, 20000, 67, 500)),
    (40, '30-39', SmartDefaults(85000, 150000, 40000, 60000, 67, 1000)),
    (50, '40-49', SmartDefaults(110000, 400000, 100000, 150000, 67, 1500)),
    (60, '50-59', SmartDefaults(125000, 750000, 200000, 300000, 67, 2000)),
]
SENIOR_LABEL = '60+'
SENIOR_DEFAULTS = SmartDefaults(130000, 1200000, 300000, 500000, 67, 2500)
MIN_BRACKET_AGE = 18


def get_smart_defaults(age):
    """
    Typical starting values for someone of this age. Ages outside the
    bracketed 18-59 range get the 60+ values.
    """
    if age < MIN_BRACKET_AGE:
        return SENIOR_DEFAULTS
    for upper, _, defaults in AGE_BRACKETS:
        if age < upper:
            return defaults
    return SENIOR_DEFAULTS


def get_age_bracket_label(age):
    for upper, label, _ in AGE_BRACKETS:
        if age < upper:
            return label
    return SENIOR_LABEL
