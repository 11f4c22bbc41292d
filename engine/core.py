import logging

from engine import tables
from engine.results import SimulationResult, SimulationYearOutput
from engine.returns import FixedReturns
from engine.taxes import TaxCalculator
from engine.withdrawals import (
    Balances,
    ContributionCaps,
    allocate_surplus,
    cover_gap,
    get_conversion_policy,
    withdraw_rmd,
)

logger = logging.getLogger(__name__)


def get_rmd_factor(age, rmd_table=tables.RMD_DIVISORS):
    """Get RMD divisor for age. Zero means no RMD is due."""
    if age < tables.RMD_START_AGE:
        return 0
    return rmd_table.get(age, tables.RMD_FINAL_DIVISOR)


def calculate_rmd(age, deferred_balance):
    factor = get_rmd_factor(age)
    if factor <= 0 or deferred_balance <= 0:
        return 0
    return deferred_balance / factor


def social_security_benefit(monthly_amount, start_age, age, inflation_multiplier):
    """
    Annual benefit once claimed. Claiming after full retirement age earns 8%
    per year of delay; claiming early costs 6.67% per year.
    """
    if age < start_age or monthly_amount <= 0:
        return 0
    delay_years = max(0, start_age - tables.SS_FULL_RETIREMENT_AGE)
    early_years = max(0, tables.SS_FULL_RETIREMENT_AGE - start_age)
    adjustment = max(0, 1 + delay_years * tables.SS_DELAYED_CREDIT - early_years * tables.SS_EARLY_REDUCTION)
    return monthly_amount * 12 * adjustment * inflation_multiplier


def pension_benefit(monthly_amount, is_retired, cola, inflation_multiplier):
    if not is_retired or monthly_amount <= 0:
        return 0
    pension = monthly_amount * 12
    if cola:
        pension *= inflation_multiplier
    return pension


def one_time_expenses_for(year, expenses):
    return sum(e.amount for e in expenses if e.year == year)


def project(inputs, returns=None):
    """
    Run the deterministic year-by-year projection.

    Args:
        inputs: SimulationInputs for this run
        returns: optional return-rate source; defaults to the fixed
            pre/post-retirement rates from `inputs`

    Returns:
        SimulationResult with one record per simulated year, from
        current_age through life_expectancy inclusive.
    """
    returns = returns or FixedReturns.from_inputs(inputs)
    tax_calc = TaxCalculator(inputs.tax_filing_status, inputs.state_of_residence)
    conversion_policy = get_conversion_policy(inputs)
    spouse = inputs.spouse

    balances = Balances(
        taxable=inputs.taxable_savings,
        deferred=inputs.tax_deferred_savings,
        roth=inputs.tax_free_savings,
    )
    if spouse:
        balances.taxable += spouse.taxable_savings
        balances.deferred += spouse.tax_deferred_savings
        balances.roth += spouse.tax_free_savings

    salary_growth = 1 + inputs.salary_growth_rate / 100
    # Fixed annual limits; savings_escalator is accepted but not applied
    caps = ContributionCaps(
        deferred=inputs.contrib_deferred,
        roth=inputs.contrib_roth,
        taxable=inputs.contrib_taxable,
    )

    inflation_multiplier = 1.0
    medical_inflation_multiplier = 1.0

    records = []
    shortfall_years = []

    # --- SIMULATION LOOP ---
    for i in range(max(0, inputs.simulation_years + 1)):
        year = inputs.start_year + i
        user_age = inputs.current_age + i
        spouse_age = spouse.age + i if spouse else None
        is_retired = user_age >= inputs.retirement_age
        return_rate = returns.rate_for(i, user_age, is_retired)

        if i > 0:
            inflation_multiplier *= (1 + inputs.general_inflation / 100)
            medical_inflation_multiplier *= (1 + inputs.medical_inflation / 100)

        # --- 1. Income ---
        wages = []
        if not is_retired:
            wages.append(inputs.current_salary * salary_growth ** i)
        if spouse and spouse_age < spouse.retirement_age:
            wages.append(spouse.salary * salary_growth ** i)
        work_income = sum(wages)

        social_security = social_security_benefit(
            inputs.ss_estimated_amount, inputs.ss_start_age, user_age, inflation_multiplier)
        pension = pension_benefit(
            inputs.pension_income, is_retired, inputs.pension_cola, inflation_multiplier)
        if spouse:
            social_security += social_security_benefit(
                spouse.ss_amount, spouse.ss_start_age, spouse_age, inflation_multiplier)
            pension += pension_benefit(
                spouse.pension_income, spouse_age >= spouse.retirement_age,
                inputs.pension_cola, inflation_multiplier)

        rmds = calculate_rmd(user_age, balances.deferred)
        interest_dividends = balances.taxable * tables.TAXABLE_YIELD

        gross_income = (work_income + social_security + pension + rmds
                        + interest_dividends + inputs.passive_income)

        # --- 2. Taxes ---
        taxes = tax_calc.calculate(gross_income, wages)
        total_tax = taxes.total_tax

        # --- 3. Expenses ---
        base_expenses = inputs.current_expenses * (inputs.retirement_ratio / 100 if is_retired else 1)
        essential = base_expenses * tables.ESSENTIAL_SHARE * inflation_multiplier
        healthcare = base_expenses * tables.HEALTHCARE_SHARE * medical_inflation_multiplier
        discretionary = base_expenses * tables.DISCRETIONARY_SHARE * inflation_multiplier
        one_time = one_time_expenses_for(year, inputs.one_time_expenses)
        total_spend = essential + healthcare + discretionary + one_time

        # --- 4. Surplus / gap ---
        net_surplus_gap = (gross_income - total_tax) - total_spend

        contributions = 0
        employer_match = 0
        draws = None
        if net_surplus_gap > 0 and not is_retired and user_age < inputs.stop_contribution_age:
            contributions = allocate_surplus(net_surplus_gap, caps, balances)
            employer_match = work_income * inputs.employer_match / 100
            balances.deferred += employer_match
        elif net_surplus_gap < 0:
            draws = cover_gap(-net_surplus_gap, balances, rmd=rmds)
            if draws.is_shortfall:
                shortfall_years.append(year)

        withdraw_rmd(rmds, balances, inputs.rmd_reinvestment)

        # --- 5. Roth conversion ---
        conversion = conversion_policy.execute(balances, taxes.taxable_income, tax_calc)

        # --- 6. Growth ---
        balances.grow(return_rate)
        total_portfolio = balances.total

        # --- 7. Record ---
        records.append(SimulationYearOutput(
            year=year,
            user_age=user_age,
            spouse_age=spouse_age,
            work_income=work_income,
            social_security=social_security,
            pension=pension,
            rmds=rmds,
            interest_dividends=interest_dividends,
            passive_income=inputs.passive_income,
            gross_income=gross_income,
            standard_deduction=taxes.standard_deduction,
            taxable_income=taxes.taxable_income,
            federal_tax=taxes.federal_tax,
            state_tax=taxes.state_tax,
            fica_tax=taxes.fica_tax,
            total_tax=total_tax,
            essential_expenses=essential,
            healthcare=healthcare,
            discretionary=discretionary,
            one_time_expense=one_time,
            total_spend=total_spend,
            net_surplus_gap=net_surplus_gap,
            contributions=contributions,
            employer_match=employer_match,
            draw_taxable=draws.taxable if draws else 0,
            draw_deferred=draws.deferred if draws else 0,
            draw_roth=draws.roth if draws else 0,
            unfunded_gap=draws.unfunded if draws else 0,
            roth_conversion=conversion.amount,
            conversion_tax_cost=conversion.tax_cost,
            return_rate=return_rate,
            taxable_balance=balances.taxable,
            deferred_balance=balances.deferred,
            roth_balance=balances.roth,
            total_portfolio=total_portfolio,
            legacy_value=total_portfolio if user_age == inputs.life_expectancy else 0,
            real_wealth=total_portfolio / inflation_multiplier,
        ))

    result = summarize(records, shortfall_years, inputs)
    logger.debug(
        "Projected %d years: success=%.1f%% legacy=%.0f shortfalls=%d",
        len(records), result.success_probability, result.total_legacy, len(shortfall_years),
    )
    return result


def summarize(records, shortfall_years, inputs):
    """Derive the run-level metrics from the year records."""
    if shortfall_years:
        success_probability = max(0.0, 100 - len(shortfall_years) / len(records) * 100)
    else:
        success_probability = 100.0

    fi_target = inputs.current_expenses * tables.FI_EXPENSE_MULTIPLE
    financial_independence_age = next(
        (r.user_age for r in records if r.total_portfolio >= fi_target),
        inputs.retirement_age,
    )

    total_legacy = records[-1].total_portfolio if records else 0.0

    return SimulationResult(
        years=records,
        success_probability=success_probability,
        financial_independence_age=financial_independence_age,
        total_legacy=total_legacy,
        shortfall_years=list(shortfall_years),
        legacy_goal_met=total_legacy >= inputs.legacy_goal,
    )
