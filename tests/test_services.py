import os
import sys
import unittest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pandas as pd
from pydantic import ValidationError

from engine.inputs import FilingStatus, SpouseInputs
from schemas.simulation import JointFilerParams, SingleFilerParams, parse_simulation_params
from services.comparison_service import compare_scenarios
from services.csv_config import csv_to_dict, params_to_csv
from services.exceptions import ScenarioLimitError, ScenarioNotFoundError, UnknownTemplateError
from services.scenario_store import InMemoryScenarioStore, SavedScenario
from services.scenario_templates import apply_template, get_template, get_templates_by_category
from services.simulation_service import (
    format_results,
    map_to_engine_inputs,
    result_to_frame,
    run_projection,
)
from services.smart_defaults import get_age_bracket_label, get_smart_defaults

BASELINE = {
    'currentAge': 35, 'retirementAge': 65, 'lifeExpectancy': 90,
    'currentSalary': 100000, 'currentExpenses': 75000,
    'taxableSavings': 50000, 'taxDeferredSavings': 200000, 'taxFreeSavings': 50000,
    'preRetirementReturn': 7, 'postRetirementReturn': 5, 'generalInflation': 2.5,
    'taxFilingStatus': 'single', 'ssStartAge': 67, 'ssEstimatedAmount': 2500,
    'startYear': 2025,
}

SPOUSE = {
    'age': 33, 'retirementAge': 63, 'salary': 60000,
    'taxDeferredSavings': 40000, 'ssAmount': 1500,
}


class TestParamsSchema(unittest.TestCase):
    def test_defaults_are_single_filer(self):
        params = parse_simulation_params({})
        self.assertIsInstance(params, SingleFilerParams)
        self.assertEqual(params.tax_filing_status, 'single')
        self.assertEqual(params.current_age, 35)

    def test_camel_case_keys(self):
        params = parse_simulation_params({'currentAge': 40, 'pensionCOLA': True, 'taxTargetBracket': '24'})
        self.assertEqual(params.current_age, 40)
        self.assertTrue(params.pension_cola)
        self.assertEqual(params.tax_target_bracket, 24)

    def test_joint_requires_spouse(self):
        with self.assertRaises(ValidationError):
            parse_simulation_params({'taxFilingStatus': 'married_joint'})

    def test_other_statuses_use_single_variant(self):
        params = parse_simulation_params({'taxFilingStatus': 'head_of_household'})
        self.assertIsInstance(params, SingleFilerParams)

    def test_joint_variant(self):
        params = parse_simulation_params({**BASELINE, 'taxFilingStatus': 'married_joint', 'spouse': SPOUSE})
        self.assertIsInstance(params, JointFilerParams)
        self.assertEqual(params.spouse.retirement_age, 63)

    def test_horizon_must_be_positive(self):
        with self.assertRaises(ValidationError):
            parse_simulation_params({'currentAge': 70, 'lifeExpectancy': 70})

    def test_unknown_roth_strategy(self):
        with self.assertRaises(ValidationError):
            parse_simulation_params({'rothStrategy': 'everything'})


class TestSimulationService(unittest.TestCase):
    def test_map_to_engine_inputs(self):
        params = parse_simulation_params({
            **BASELINE, 'taxFilingStatus': 'married_joint', 'spouse': SPOUSE,
            'oneTimeExpenses': [{'year': 2030, 'amount': 20000, 'description': 'Wedding'}],
        })
        inputs = map_to_engine_inputs(params)
        self.assertIs(inputs.tax_filing_status, FilingStatus.MARRIED_JOINT)
        self.assertIsInstance(inputs.spouse, SpouseInputs)
        self.assertEqual(inputs.one_time_expenses[0].amount, 20000)

    def test_format_results(self):
        formatted = format_results(run_projection(parse_simulation_params(BASELINE)))
        self.assertEqual(len(formatted['years']), 56)
        first = formatted['years'][0]
        self.assertEqual(first['year'], 2025)
        self.assertEqual(first['userAge'], 35)
        self.assertIsNone(first['spouseAge'])
        self.assertIn('totalPortfolio', formatted['columns'])
        self.assertIsInstance(first['totalPortfolio'], float)
        self.assertEqual(formatted['shortfallYears'], [])
        self.assertLessEqual(formatted['successProbability'], 100)

    def test_result_frame(self):
        df = result_to_frame(run_projection(parse_simulation_params(BASELINE)))
        pd.testing.assert_series_equal(df['year'], pd.Series(range(2025, 2081), name='year'))
        self.assertTrue((df['total_portfolio'] >= 0).all())


class TestComparison(unittest.TestCase):
    def setUp(self):
        self.baseline = parse_simulation_params(BASELINE)

    def test_template_comparison(self):
        response = compare_scenarios(self.baseline, template_id='retire_2_later')
        self.assertEqual(response['modifiedConfig']['retirementAge'], 67)
        self.assertEqual(response['template']['id'], 'retire_2_later')

        comparison = response['comparison']
        self.assertEqual(len(comparison['years']), 56)
        row = comparison['years'][40]
        self.assertAlmostEqual(
            row['totalPortfolioDelta'],
            row['totalPortfolioModified'] - row['totalPortfolioBaseline'],
        )
        summary = comparison['summary']['totalLegacy']
        self.assertAlmostEqual(summary['delta'], summary['modified'] - summary['baseline'])

    def test_identical_plans_have_zero_deltas(self):
        comparison = compare_scenarios(self.baseline, modified_params=self.baseline)['comparison']
        self.assertTrue(all(r['totalPortfolioDelta'] == 0 for r in comparison['years']))
        self.assertEqual(comparison['summary']['successProbability']['delta'], 0)

    def test_different_horizons_pad_with_none(self):
        shorter = parse_simulation_params({**BASELINE, 'lifeExpectancy': 80})
        comparison = compare_scenarios(self.baseline, modified_params=shorter)['comparison']
        self.assertEqual(len(comparison['years']), 56)
        self.assertIsNone(comparison['years'][-1]['totalPortfolioModified'])
        self.assertIsNone(comparison['years'][-1]['totalPortfolioDelta'])

    def test_unknown_template(self):
        with self.assertRaises(UnknownTemplateError):
            compare_scenarios(self.baseline, template_id='retire_tomorrow')


class TestScenarioTemplates(unittest.TestCase):
    def test_categories(self):
        self.assertEqual(len(get_templates_by_category('spending')), 3)
        self.assertEqual(len(get_templates_by_category()), 8)

    def test_monthly_savings_template_is_annualized(self):
        params = parse_simulation_params(BASELINE)
        modified = apply_template(get_template('save_500_more'), params)
        self.assertEqual(modified.contrib_deferred, params.contrib_deferred + 6000)
        self.assertEqual(params.contrib_deferred, 19500)

    def test_spending_cut(self):
        params = parse_simulation_params(BASELINE)
        modified = apply_template(get_template('reduce_spending_20'), params)
        self.assertEqual(modified.current_expenses, 60000)


class TestSmartDefaults(unittest.TestCase):
    def test_brackets(self):
        self.assertEqual(get_smart_defaults(25).current_salary, 65000)
        self.assertEqual(get_smart_defaults(45).tax_deferred_savings, 400000)
        self.assertEqual(get_smart_defaults(70).taxable_savings, 500000)
        self.assertEqual(get_age_bracket_label(25), '18-29')
        self.assertEqual(get_age_bracket_label(59), '50-59')
        self.assertEqual(get_age_bracket_label(60), '60+')

    def test_minors_get_senior_defaults(self):
        self.assertEqual(get_smart_defaults(16).current_salary, 130000)
        self.assertEqual(get_smart_defaults(18).current_salary, 65000)
        self.assertEqual(get_age_bracket_label(16), '18-29')


class TestScenarioStore(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryScenarioStore(max_scenarios=2)

    def _scenario(self, name):
        return SavedScenario(name=name, params={}, result={'successProbability': 100, 'totalLegacy': 0})

    def test_save_get_list_delete(self):
        self.store.save(self._scenario('a'))
        self.assertEqual(self.store.get('a').name, 'a')
        self.assertEqual([s.name for s in self.store.list()], ['a'])
        self.store.delete('a')
        self.assertEqual(self.store.list(), [])

    def test_limit(self):
        self.store.save(self._scenario('a'))
        self.store.save(self._scenario('b'))
        with self.assertRaises(ScenarioLimitError):
            self.store.save(self._scenario('c'))

    def test_overwrite_does_not_count(self):
        self.store.save(self._scenario('a'))
        self.store.save(self._scenario('b'))
        self.store.save(self._scenario('a'))
        self.assertEqual(len(self.store.list()), 2)

    def test_missing(self):
        with self.assertRaises(ScenarioNotFoundError):
            self.store.get('nope')
        with self.assertRaises(ScenarioNotFoundError):
            self.store.delete('nope')


class TestCsvConfig(unittest.TestCase):
    def test_nested_params_survive_csv(self):
        params = parse_simulation_params({
            **BASELINE, 'taxFilingStatus': 'married_joint', 'spouse': SPOUSE, 'pensionCOLA': True,
            'oneTimeExpenses': [{'year': 2030, 'amount': 20000, 'description': 'Wedding'}],
        })
        csv_text = params_to_csv(params.model_dump(by_alias=True))
        self.assertIn('spouse.retirementAge', csv_text)
        self.assertIn('oneTimeExpenses.0.year', csv_text)

        restored = parse_simulation_params(csv_to_dict(csv_text.encode()))
        self.assertEqual(restored, params)

    def test_numeric_text_stays_text(self):
        params = parse_simulation_params({
            **BASELINE,
            'oneTimeExpenses': [{'year': 2030, 'amount': 20000, 'description': '2030'}],
        })
        restored = parse_simulation_params(csv_to_dict(params_to_csv(params.model_dump(by_alias=True)).encode()))
        self.assertEqual(restored.one_time_expenses[0].description, '2030')
        self.assertEqual(restored.one_time_expenses[0].year, 2030)
        self.assertEqual(restored.current_age, 35)

    def test_missing_columns(self):
        with self.assertRaises(ValueError):
            csv_to_dict(b"name,amount\ncurrentAge,40\n")


if __name__ == '__main__':
    unittest.main()
