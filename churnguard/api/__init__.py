"""FastAPI backend module."""

from .main import app
from .schemas import PredictionResponse, HealthResponse, ErrorResponse

__all__ = ["app", "PredictionResponse", "HealthResponse", "ErrorResponse"]
