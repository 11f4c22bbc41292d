import logging

import pandas as pd
from pydantic.alias_generators import to_camel

from services.scenario_templates import apply_template, get_template
from services.simulation_service import frame_to_records, result_to_frame, run_projection

logger = logging.getLogger(__name__)

COMPARED_COLUMNS = ['total_portfolio', 'real_wealth', 'total_tax', 'total_spend']


def _scalar_delta(baseline, modified):
    return {'baseline': baseline, 'modified': modified, 'delta': modified - baseline}


def diff_results(baseline, modified) -> dict:
    """
    Year-by-year and headline differences between two engine results.
    Years present in only one run get None on the other side.
    """
    summary = {
        'successProbability': _scalar_delta(baseline.success_probability, modified.success_probability),
        'financialIndependenceAge': _scalar_delta(
            baseline.financial_independence_age, modified.financial_independence_age),
        'totalLegacy': _scalar_delta(baseline.total_legacy, modified.total_legacy),
        'shortfallYearCount': _scalar_delta(len(baseline.shortfall_years), len(modified.shortfall_years)),
    }

    if not baseline.years and not modified.years:
        return {'years': [], 'columns': [], 'summary': summary}

    cols = ['year', 'user_age'] + COMPARED_COLUMNS
    base_df = result_to_frame(baseline).reindex(columns=cols).astype({'year': 'int64'})
    mod_df = result_to_frame(modified).reindex(columns=cols).astype({'year': 'int64'})

    merged = pd.merge(
        base_df, mod_df, on='year', how='outer', suffixes=('_baseline', '_modified'),
    ).sort_values('year')
    for col in COMPARED_COLUMNS:
        merged[f'{col}_delta'] = merged[f'{col}_modified'] - merged[f'{col}_baseline']

    merged.columns = [to_camel(c) for c in merged.columns]
    return {
        'years': frame_to_records(merged),
        'columns': list(merged.columns),
        'summary': summary,
    }


def compare_scenarios(baseline_params, modified_params=None, template_id=None) -> dict:
    """
    Run the engine on a baseline and a modified plan and diff them.
    The modified plan is either given directly or derived from a template.
    """
    template = None
    if modified_params is None:
        template = get_template(template_id)
        modified_params = apply_template(template, baseline_params)

    baseline = run_projection(baseline_params)
    modified = run_projection(modified_params)
    logger.info(
        "Compared scenarios%s: success %.1f%% -> %.1f%%",
        f" ({template.id})" if template else '',
        baseline.success_probability, modified.success_probability,
    )

    return {
        'success': True,
        'template': template.to_dict() if template else None,
        'modifiedConfig': modified_params.model_dump(by_alias=True),
        'comparison': diff_results(baseline, modified),
    }
