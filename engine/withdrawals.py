from abc import ABC, abstractmethod
from dataclasses import dataclass

from engine import tables
from engine.inputs import RothStrategy


@dataclass
class Balances:
    """Mutable per-run account state. Never shared between runs."""
    taxable: float
    deferred: float
    roth: float

    @property
    def total(self):
        return self.taxable + self.deferred + self.roth

    def grow(self, rate):
        self.taxable = max(0, self.taxable * (1 + rate))
        self.deferred = max(0, self.deferred * (1 + rate))
        self.roth = max(0, self.roth * (1 + rate))


@dataclass(frozen=True)
class ContributionCaps:
    deferred: float
    roth: float
    taxable: float

    @property
    def total(self):
        return self.deferred + self.roth + self.taxable


@dataclass(frozen=True)
class Drawdown:
    taxable: float = 0
    deferred: float = 0
    roth: float = 0
    unfunded: float = 0

    @property
    def is_shortfall(self):
        return self.unfunded > 0


def allocate_surplus(surplus, caps, balances):
    """
    Invest a positive surplus: deferred first, then Roth, then taxable.
    Each bucket takes at most its own cap; anything above the combined caps
    is not invested.

    Returns the total contributed.
    """
    contributions = min(surplus, caps.total)

    to_deferred = min(caps.deferred, contributions)
    to_roth = min(caps.roth, max(0, contributions - caps.deferred))
    to_taxable = max(0, contributions - caps.deferred - caps.roth)

    balances.deferred += to_deferred
    balances.roth += to_roth
    balances.taxable += to_taxable
    return contributions


def cover_gap(gap, balances, rmd=0):
    """
    Draw a cash gap from taxable, then deferred, then Roth.

    The deferred draw never dips into the amount reserved for this year's
    RMD. Whatever the Roth balance cannot cover is reported as unfunded.
    """
    draw_taxable = min(gap, balances.taxable)
    balances.taxable -= draw_taxable
    remaining = gap - draw_taxable

    draw_deferred = min(remaining, max(0, balances.deferred - rmd))
    balances.deferred -= draw_deferred
    remaining -= draw_deferred

    roth_available = balances.roth
    draw_roth = min(remaining, roth_available)
    balances.roth -= draw_roth

    unfunded = remaining - roth_available if remaining > roth_available else 0
    return Drawdown(taxable=draw_taxable, deferred=draw_deferred, roth=draw_roth, unfunded=unfunded)


def withdraw_rmd(rmd, balances, reinvest):
    """Take the RMD out of deferred; optionally park the after-tax part in taxable."""
    balances.deferred -= rmd
    if reinvest and rmd > 0:
        balances.taxable += rmd * (1 - tables.ASSUMED_FLAT_TAX_RATE)


@dataclass(frozen=True)
class Conversion:
    amount: float = 0
    tax_cost: float = 0


class RothConversionPolicy(ABC):
    """Abstract base class for Roth conversion strategies"""

    @abstractmethod
    def amount(self, deferred_balance, taxable_income, tax_calc):
        """How much to move from deferred to Roth this year."""

    def execute(self, balances, taxable_income, tax_calc):
        amount = max(0, self.amount(balances.deferred, taxable_income, tax_calc))
        if amount <= 0:
            return Conversion()

        balances.deferred -= amount
        balances.roth += amount
        # Tracked only; not charged against any balance
        return Conversion(amount=amount, tax_cost=amount * tables.ASSUMED_FLAT_TAX_RATE)


class NoConversion(RothConversionPolicy):

    def amount(self, deferred_balance, taxable_income, tax_calc):
        return 0


class FillBracketConversion(RothConversionPolicy):
    """Convert up to the top of the target bracket."""

    def __init__(self, target_rate):
        self.target_rate = target_rate

    def amount(self, deferred_balance, taxable_income, tax_calc):
        if deferred_balance <= 0:
            return 0
        ceiling = tax_calc.bracket_ceiling(self.target_rate)
        if ceiling is None:
            return 0
        headroom = max(0, ceiling - taxable_income)
        return min(headroom, deferred_balance)


class FixedAmountConversion(RothConversionPolicy):

    def __init__(self, conversion_amount):
        self.conversion_amount = conversion_amount

    def amount(self, deferred_balance, taxable_income, tax_calc):
        if not self.conversion_amount:
            return 0
        return min(self.conversion_amount, deferred_balance)


def get_conversion_policy(inputs):
    strategy = RothStrategy(inputs.roth_strategy)
    if strategy is RothStrategy.NONE:
        return NoConversion()
    if strategy is RothStrategy.FILL_BRACKET:
        return FillBracketConversion(inputs.tax_target_bracket / 100)
    if strategy is RothStrategy.FIXED_AMOUNT:
        return FixedAmountConversion(inputs.roth_conversion_amount)
    raise ValueError(f"Unknown Roth strategy: {strategy}")
