from dataclasses import dataclass

from engine import tables
from engine.inputs import FilingStatus


@dataclass(frozen=True)
class TaxBreakdown:
    standard_deduction: float
    taxable_income: float
    federal_tax: float
    state_tax: float
    fica_tax: float

    @property
    def total_tax(self):
        return self.federal_tax + self.state_tax + self.fica_tax


def progressive_tax(taxable_income, brackets):
    """
    Walk a (min, max, rate) bracket table, taxing the slice of income that
    falls inside each bracket.
    """
    tax = 0
    remaining = taxable_income
    for lower, upper, rate in brackets:
        taxable_in_bracket = min(max(remaining - lower, 0), upper - lower)
        tax += taxable_in_bracket * rate
        remaining -= taxable_in_bracket
        if remaining <= 0:
            break
    return tax


class TaxCalculator:
    """
    Handles federal, state and payroll tax using 2024 brackets.
    Married-joint filers get their own bracket table; every other status
    uses the single table.
    """

    def __init__(self, filing_status=FilingStatus.SINGLE, state='California'):
        self.filing_status = FilingStatus(filing_status)
        self.state = state

        if self.filing_status is FilingStatus.MARRIED_JOINT:
            self.brackets = tables.FEDERAL_BRACKETS['married_joint']
        else:
            self.brackets = tables.FEDERAL_BRACKETS['single']

        self.std_deduction = tables.STANDARD_DEDUCTIONS[self.filing_status.value]
        self.state_rate = tables.STATE_TAX_RATES.get(state, tables.DEFAULT_STATE_TAX_RATE)

    def taxable_income(self, gross_income):
        return max(0, gross_income - self.std_deduction)

    def federal_tax(self, taxable_income):
        return progressive_tax(taxable_income, self.brackets)

    def state_tax(self, taxable_income):
        return taxable_income * self.state_rate

    @staticmethod
    def fica_tax(wages):
        """Payroll tax on one earner's wages, capped at the wage base."""
        return min(max(wages, 0), tables.FICA_WAGE_BASE) * tables.FICA_RATE

    def bracket_ceiling(self, rate):
        """Upper bound of the bracket taxed at `rate` (decimal), or None."""
        for _, upper, bracket_rate in self.brackets:
            if abs(bracket_rate - rate) < 1e-9:
                return upper
        return None

    def calculate(self, gross_income, wages=()):
        """
        Full breakdown for one year.

        Args:
            gross_income: all income for the household
            wages: work income per earner still working; FICA applies to each
        """
        taxable = self.taxable_income(gross_income)
        return TaxBreakdown(
            standard_deduction=self.std_deduction,
            taxable_income=taxable,
            federal_tax=self.federal_tax(taxable),
            state_tax=self.state_tax(taxable),
            fica_tax=sum(self.fica_tax(w) for w in wages),
        )
