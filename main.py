"""
Household Projection API - FastAPI Backend
Features:
- Deterministic year-by-year household projection (taxes, RMDs, Roth conversions)
- Scenario comparison and "what if" templates
- Saved scenarios
- CSV import/export of parameters
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from api.errors import register_exception_handlers
from api.simulations import router as simulations_router

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Household Projection API",
    description="Multi-decade household income, tax and portfolio projection",
    version=config.API_VERSION
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(simulations_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint for deployment"""
    return {"status": "healthy", "service": config.SERVICE_NAME}


logger.info("Household projection API %s ready", config.API_VERSION)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=5050, reload=True)
