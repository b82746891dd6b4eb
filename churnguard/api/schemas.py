"""
API Schemas (Pydantic Models)
=============================

Response models for the HTTP API. Request bodies reuse the inference schemas.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from churnguard.inference.schemas import ChurnAssessment


class PredictionResponse(BaseModel):
    """Schema for a churn prediction response."""

    model_config = ConfigDict(
        populate_by_name=True,
        protected_namespaces=(),
        json_schema_extra={
            "example": {
                "assessment": {
                    "churnProbability": 0.82,
                    "riskLevel": "Critical",
                    "topFactors": [
                        {"factor": "Month-to-month contract", "weight": 0.4},
                        {"factor": "Short tenure", "weight": 0.3}
                    ],
                    "recommendation": "Offer retention bundle",
                    "reasoning": "Tenure groups and contract interaction terms dominate.",
                    "modelComparison": [
                        {"name": "Logistic Regression", "score": 0.78},
                        {"name": "Random Forest", "score": 0.81},
                        {"name": "XGBoost", "score": 0.84}
                    ]
                },
                "warnings": [],
                "modelUsed": "gemini-3-pro-preview",
                "timestamp": "2026-10-18T10:30:00"
            }
        },
    )

    assessment: ChurnAssessment
    warnings: List[str] = Field(default_factory=list, description="Soft consistency warnings")
    model_used: str = Field(..., alias="modelUsed", description="Model identifier")
    timestamp: datetime = Field(default_factory=datetime.now, description="Prediction timestamp")


class HealthResponse(BaseModel):
    """Schema for health check response."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    status: str
    credential_configured: bool = Field(..., alias="credentialConfigured")
    portfolio_loaded: bool = Field(..., alias="portfolioLoaded")
    models: Dict[str, str]
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Schema for inference failures."""

    error: str
    detail: str
    violations: Optional[List[str]] = None
