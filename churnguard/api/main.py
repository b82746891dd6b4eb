"""
FastAPI Main Application
========================

REST API exposing the churn inference and portfolio synthesis pipelines.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from config import get_api_key, get_config
from churnguard import __version__, display
from churnguard.inference.client import InferenceClient
from churnguard.inference.errors import InferenceError, SchemaViolation
from churnguard.inference.pipeline import build_pipelines
from churnguard.inference.schemas import CustomerRecord, PortfolioAssets
from churnguard.utils import setup_logging_from_config
from .schemas import ErrorResponse, HealthResponse, PredictionResponse

# Pipelines and startup-loaded assets
churn_call = None
portfolio_call = None
portfolio_assets: Optional[PortfolioAssets] = None
portfolio_error: Optional[InferenceError] = None


def build_client(config: dict, api_key: str) -> InferenceClient:
    """Create the inference client shared by both pipelines."""
    return InferenceClient.from_config(config, api_key)


def init_pipelines(config: Optional[dict] = None):
    """
    Build both pipelines from configuration.

    Raises:
        MissingCredentialError: If no credential is configured
    """
    global churn_call, portfolio_call

    config = config if config is not None else get_config()
    api_key = get_api_key(config)
    churn_call, portfolio_call = build_pipelines(config, build_client(config, api_key))
    logger.info(f"Pipelines ready (churn={churn_call.model}, portfolio={portfolio_call.model})")


async def load_portfolio_assets():
    """Fetch portfolio assets once; a failure is kept for /portfolio to report."""
    global portfolio_assets, portfolio_error

    try:
        portfolio_assets = await portfolio_call()
        portfolio_error = None
    except InferenceError as e:
        portfolio_assets = None
        portfolio_error = e
        logger.error(f"Portfolio synthesis failed at startup: {e.kind}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build pipelines and load portfolio assets on startup."""
    config = get_config()
    setup_logging_from_config(config)
    init_pipelines(config)
    await load_portfolio_assets()
    logger.info("ChurnGuard API started")
    yield


# Initialize FastAPI app
app = FastAPI(
    title="ChurnGuard API",
    description="Schema-constrained churn risk inference service",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InferenceError)
async def inference_error_handler(request: Request, exc: InferenceError):
    """Render pipeline failures as 502 responses."""
    body = ErrorResponse(
        error=exc.kind,
        detail=exc.message,
        violations=exc.violations if isinstance(exc, SchemaViolation) else None,
    )
    return JSONResponse(status_code=502, content=body.model_dump(exclude_none=True))


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint."""
    return {
        "message": "ChurnGuard API",
        "version": __version__,
        "docs": "/docs"
    }


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Check API health status."""
    models = {}
    if churn_call is not None:
        models = {"churn": churn_call.model, "portfolio": portfolio_call.model}

    return HealthResponse(
        status="healthy" if churn_call is not None else "starting",
        credential_configured=churn_call is not None,
        portfolio_loaded=portfolio_assets is not None,
        models=models,
        timestamp=datetime.now()
    )


@app.post("/predict", response_model=PredictionResponse, tags=["Predictions"])
async def predict(customer: CustomerRecord):
    """
    Assess churn risk for one customer.

    Args:
        customer: Customer attributes

    Returns:
        Prediction response with soft consistency warnings
    """
    if churn_call is None:
        raise HTTPException(status_code=503, detail="Inference pipeline not initialized")

    assessment = await churn_call(customer)

    return PredictionResponse(
        assessment=assessment,
        warnings=assessment.consistency_warnings(),
        model_used=churn_call.model,
        timestamp=datetime.now()
    )


@app.get("/portfolio", response_model=PortfolioAssets, tags=["Portfolio"])
async def get_portfolio():
    """Return the portfolio assets generated at startup."""
    if portfolio_assets is None:
        detail = "Portfolio assets not loaded"
        if portfolio_error is not None:
            detail = f"Portfolio synthesis failed: {portfolio_error.kind}"
        raise HTTPException(status_code=503, detail=detail)

    return portfolio_assets


@app.get("/metrics/static", tags=["Model"])
async def get_static_metrics():
    """Fixed evaluation figures shown on the dashboard."""
    return display.as_dict()


# Run with: uvicorn churnguard.api.main:app --reload
if __name__ == "__main__":
    import uvicorn

    config = get_config()
    api_config = config.get("api", {})

    uvicorn.run(
        "churnguard.api.main:app",
        host=api_config.get("host", "0.0.0.0"),
        port=api_config.get("port", 8000),
        reload=api_config.get("reload", False)
    )
