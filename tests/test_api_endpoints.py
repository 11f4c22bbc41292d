import os
import sys
import unittest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from fastapi.testclient import TestClient

from api.simulations import get_scenario_store
from main import app
from services.scenario_store import InMemoryScenarioStore

PAYLOAD = {
    'currentAge': 35, 'retirementAge': 65, 'lifeExpectancy': 90,
    'currentSalary': 100000, 'currentExpenses': 75000,
    'taxableSavings': 50000, 'taxDeferredSavings': 200000, 'taxFreeSavings': 50000,
    'preRetirementReturn': 7, 'postRetirementReturn': 5, 'generalInflation': 2.5,
    'taxFilingStatus': 'single', 'ssStartAge': 67, 'ssEstimatedAmount': 2500,
    'startYear': 2025,
}

CSV_PLAN = b"""parameter,value
currentAge,50
retirementAge,62
lifeExpectancy,85
currentSalary,120000
taxFilingStatus,married_joint
spouse.age,48
spouse.retirementAge,60
spouse.salary,70000
startYear,2025
"""


class TestAPIEndpoints(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryScenarioStore(max_scenarios=1)
        app.dependency_overrides[get_scenario_store] = lambda: self.store
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_health(self):
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "healthy", "service": "household-projection-api"})

    def test_run_simulation(self):
        resp = self.client.post("/api/run-simulation", json=PAYLOAD)

        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertTrue(data['success'])
        self.assertEqual(data['config']['currentAge'], 35)

        result = data['result']
        self.assertEqual(len(result['years']), 56)
        self.assertGreater(result['years'][0]['totalPortfolio'], 300000)
        self.assertIn('shortfallYears', result)
        self.assertGreaterEqual(result['successProbability'], 0)
        self.assertLessEqual(result['successProbability'], 100)

    def test_invalid_horizon(self):
        resp = self.client.post("/api/run-simulation", json={**PAYLOAD, 'lifeExpectancy': 30})
        self.assertEqual(resp.status_code, 422)
        self.assertFalse(resp.json()['success'])

    def test_no_payload(self):
        resp = self.client.post("/api/run-simulation")
        self.assertEqual(resp.status_code, 400)

    def test_csv_upload(self):
        files = {'file': ('plan.csv', CSV_PLAN, 'text/csv')}
        resp = self.client.post("/api/run-simulation", files=files)

        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertTrue(data['success'])
        first = data['result']['years'][0]
        self.assertEqual(first['year'], 2025)
        self.assertEqual(first['spouseAge'], 48)
        self.assertEqual(len(data['result']['years']), 36)

    def test_rejects_non_csv_upload(self):
        files = {'file': ('plan.txt', b'hello', 'text/plain')}
        resp = self.client.post("/api/run-simulation", files=files)
        self.assertEqual(resp.status_code, 400)

    def test_malformed_csv(self):
        files = {'file': ('plan.csv', b'foo,bar\n1,2\n', 'text/csv')}
        resp = self.client.post("/api/run-simulation", files=files)
        self.assertEqual(resp.status_code, 400)

    def test_compare_with_template(self):
        resp = self.client.post("/api/compare-scenarios", json={'baseline': PAYLOAD, 'templateId': 'retire_2_earlier'})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data['modifiedConfig']['retirementAge'], 63)
        self.assertIn('summary', data['comparison'])

    def test_compare_with_modified_plan(self):
        body = {'baseline': PAYLOAD, 'modified': {**PAYLOAD, 'currentExpenses': 60000}}
        resp = self.client.post("/api/compare-scenarios", json=body)
        self.assertEqual(resp.status_code, 200)
        self.assertGreater(resp.json()['comparison']['summary']['totalLegacy']['delta'], 0)

    def test_compare_unknown_template(self):
        resp = self.client.post("/api/compare-scenarios", json={'baseline': PAYLOAD, 'templateId': 'nope'})
        self.assertEqual(resp.status_code, 404)

    def test_compare_needs_exactly_one_variant(self):
        resp = self.client.post("/api/compare-scenarios", json={'baseline': PAYLOAD})
        self.assertEqual(resp.status_code, 422)

    def test_templates(self):
        resp = self.client.get("/api/scenario-templates", params={'category': 'savings'})
        self.assertEqual(resp.status_code, 200)
        ids = [t['id'] for t in resp.json()['templates']]
        self.assertEqual(ids, ['save_500_more', 'save_1000_more'])

    def test_smart_defaults(self):
        resp = self.client.get("/api/smart-defaults/42")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data['ageBracket'], '40-49')
        self.assertEqual(data['defaults']['current_salary'], 110000)

    def test_sample_config(self):
        resp = self.client.get("/api/sample-config")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['config']['taxFilingStatus'], 'single')

    def test_export_config(self):
        resp = self.client.post("/api/export-config", json=PAYLOAD)
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.headers['content-type'].startswith('text/csv'))
        self.assertIn('currentAge,35', resp.text)
        self.assertIn('currentSalary,', resp.text)

    def test_saved_scenarios(self):
        resp = self.client.post("/api/scenarios", json={'name': 'base', 'params': PAYLOAD})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()['scenario']['name'], 'base')

        listing = self.client.get("/api/scenarios").json()['scenarios']
        self.assertEqual([s['name'] for s in listing], ['base'])

        resp = self.client.get("/api/scenarios/base")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['scenario']['params']['currentAge'], 35)

        # store in this test holds one scenario
        resp = self.client.post("/api/scenarios", json={'name': 'other', 'params': PAYLOAD})
        self.assertEqual(resp.status_code, 409)

        resp = self.client.delete("/api/scenarios/base")
        self.assertEqual(resp.status_code, 200)
        resp = self.client.get("/api/scenarios/base")
        self.assertEqual(resp.status_code, 404)


if __name__ == '__main__':
    unittest.main()
