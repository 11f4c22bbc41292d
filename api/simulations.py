import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from fastapi.responses import StreamingResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

import config
from schemas.simulation import (
    ComparisonRequest,
    SavedScenarioRequest,
    SimulationParams,
    SingleFilerParams,
    parse_simulation_params,
)
from services.comparison_service import compare_scenarios
from services.csv_config import csv_to_dict, params_to_csv
from services.scenario_store import InMemoryScenarioStore, SavedScenario, ScenarioStore
from services.scenario_templates import get_templates_by_category
from services.simulation_service import format_results, run_projection, run_simulation_service
from services.smart_defaults import get_age_bracket_label, get_smart_defaults

logger = logging.getLogger(__name__)

router = APIRouter()

_scenario_store = InMemoryScenarioStore()


def get_scenario_store() -> ScenarioStore:
    return _scenario_store


def allowed_file(filename: str) -> bool:
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in config.ALLOWED_EXTENSIONS


@router.post("/run-simulation")
async def run_simulation_endpoint(
    request: Request,
    file: Optional[UploadFile] = File(None)
):
    """
    Run the household projection. Supports CSV upload or JSON body.
    """
    try:
        # 1. Handle File Upload
        if file and file.filename:
            if not allowed_file(file.filename):
                raise HTTPException(status_code=400, detail="Invalid file format. Please upload a CSV file.")
            content = await file.read()
            if len(content) > config.MAX_CONTENT_LENGTH:
                raise HTTPException(status_code=413, detail="Uploaded file is too large")
            params = parse_simulation_params(csv_to_dict(content))

        # 2. Handle JSON Body
        elif request.headers.get("content-type", "").startswith("application/json"):
            json_body = await request.json()
            params = parse_simulation_params(json_body)

        else:
            raise HTTPException(status_code=400, detail="No file or data provided")

        # Keep the event loop free while the engine runs
        return await run_in_threadpool(run_simulation_service, params)

    except (HTTPException, ValidationError):
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Simulation request failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/compare-scenarios")
def compare_scenarios_endpoint(body: ComparisonRequest):
    """
    Run a baseline and a modified plan (or a template applied to the
    baseline) and return their differences.
    """
    return compare_scenarios(body.baseline, body.modified, body.template_id)


@router.get("/scenario-templates")
def list_scenario_templates(category: Optional[str] = None):
    return {
        'success': True,
        'templates': [t.to_dict() for t in get_templates_by_category(category)],
    }


@router.get("/smart-defaults/{age}")
def smart_defaults_endpoint(age: int):
    if age < 0 or age > 120:
        raise HTTPException(status_code=400, detail="Age must be between 0 and 120")
    return {
        'success': True,
        'ageBracket': get_age_bracket_label(age),
        'defaults': get_smart_defaults(age).to_dict(),
    }


@router.get("/sample-config")
def get_sample_config():
    """Return the default parameter set"""
    return {
        'success': True,
        'config': SingleFilerParams().model_dump(by_alias=True),
    }


@router.post("/export-config")
def export_config(params: SimulationParams):
    """Download parameters as a (parameter, value) CSV"""
    csv_text = params_to_csv(params.model_dump(by_alias=True))
    return StreamingResponse(
        iter([csv_text]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=household_projection_config.csv"}
    )


# ============================================================================
# Saved scenarios
# ============================================================================

@router.get("/scenarios")
def list_scenarios(store: ScenarioStore = Depends(get_scenario_store)):
    scenarios = store.list()
    return {
        'success': True,
        'scenarios': [
            {
                'name': s.name,
                'savedAt': s.saved_at,
                'successProbability': s.result['successProbability'],
                'totalLegacy': s.result['totalLegacy'],
            }
            for s in scenarios
        ],
    }


@router.post("/scenarios", status_code=status.HTTP_201_CREATED)
def save_scenario(body: SavedScenarioRequest, store: ScenarioStore = Depends(get_scenario_store)):
    result = format_results(run_projection(body.params))
    scenario = store.save(SavedScenario(
        name=body.name,
        params=body.params.model_dump(by_alias=True),
        result=result,
    ))
    return {'success': True, 'scenario': scenario.to_dict()}


@router.get("/scenarios/{name}")
def get_scenario(name: str, store: ScenarioStore = Depends(get_scenario_store)):
    return {'success': True, 'scenario': store.get(name).to_dict()}


@router.delete("/scenarios/{name}")
def delete_scenario(name: str, store: ScenarioStore = Depends(get_scenario_store)):
    store.delete(name)
    return {'success': True, 'deleted': name}
