import logging

import pandas as pd
from pydantic.alias_generators import to_camel

from engine.core import project
from engine.inputs import OneTimeExpense, SimulationInputs, SpouseInputs

logger = logging.getLogger(__name__)


def map_to_engine_inputs(params) -> SimulationInputs:
    """Convert a validated pydantic model to engine inputs"""
    data = params.model_dump()
    data['one_time_expenses'] = tuple(OneTimeExpense(**e) for e in data['one_time_expenses'])
    if data.get('spouse') is not None:
        data['spouse'] = SpouseInputs(**data['spouse'])
    return SimulationInputs(**data)


def result_to_frame(result) -> pd.DataFrame:
    """One row per simulated year, snake_case columns."""
    return pd.DataFrame([row.to_dict() for row in result.years])


def frame_to_records(df: pd.DataFrame) -> list:
    """JSON-safe row dicts: numpy scalars unwrapped, NaN -> None."""
    records = []
    for row in df.to_dict(orient='records'):
        row_dict = {}
        for col, val in row.items():
            if pd.isna(val):
                row_dict[col] = None
            elif hasattr(val, 'item'):
                row_dict[col] = val.item()
            else:
                row_dict[col] = val
        records.append(row_dict)
    return records


def format_results(result) -> dict:
    """Format an engine result for API response"""
    summary = {
        'successProbability': result.success_probability,
        'financialIndependenceAge': result.financial_independence_age,
        'totalLegacy': result.total_legacy,
        'shortfallYears': list(result.shortfall_years),
        'legacyGoalMet': result.legacy_goal_met,
    }
    if not result.years:
        return {'years': [], 'columns': [], **summary}

    df = result_to_frame(result)
    df.columns = [to_camel(c) for c in df.columns]

    return {
        'years': frame_to_records(df),
        'columns': list(df.columns),
        **summary,
    }


def run_projection(params):
    inputs = map_to_engine_inputs(params)
    return project(inputs)


def run_simulation_service(params):
    """
    Service to run the projection and return formatted results.
    """
    result = run_projection(params)
    logger.info(
        "Simulation complete: %d years, success=%.1f%%, shortfall years=%d",
        len(result.years), result.success_probability, len(result.shortfall_years),
    )
    return {
        'success': True,
        'config': params.model_dump(by_alias=True),
        'result': format_results(result),
    }
