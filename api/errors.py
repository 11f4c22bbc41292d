"""Map domain and validation errors onto JSON HTTP responses."""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from services.exceptions import ScenarioLimitError, ScenarioNotFoundError, UnknownTemplateError


def _error(status_code, detail):
    return JSONResponse(status_code=status_code, content={'success': False, 'detail': detail})


async def _handle_validation_error(request: Request, exc: ValidationError):
    errors = exc.errors(include_url=False, include_context=False, include_input=False)
    return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, errors)


async def _handle_not_found(request: Request, exc: Exception):
    return _error(status.HTTP_404_NOT_FOUND, str(exc))


async def _handle_limit(request: Request, exc: ScenarioLimitError):
    return _error(status.HTTP_409_CONFLICT, str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, _handle_validation_error)
    app.add_exception_handler(ScenarioNotFoundError, _handle_not_found)
    app.add_exception_handler(UnknownTemplateError, _handle_not_found)
    app.add_exception_handler(ScenarioLimitError, _handle_limit)
