"""Inference module: prompt building, remote calls, decoding, orchestration."""

from .client import InferenceClient, RetryPolicy
from .decoder import ResponseDecoder
from .errors import (
    AuthenticationFailure,
    EmptyResponse,
    InferenceError,
    MalformedResponse,
    SchemaViolation,
    TransportFailure,
)
from .orchestrator import ConcurrencyPolicy, PipelineOrchestrator, PipelineSnapshot, PipelineState
from .pipeline import SchemaConstrainedInferenceCall, churn_inference_call, portfolio_synthesis_call
from .schemas import ChurnAssessment, CustomerRecord, PortfolioAssets, RiskLevel
from .session import ChurnDashboardSession

__all__ = [
    "InferenceClient",
    "RetryPolicy",
    "ResponseDecoder",
    "InferenceError",
    "TransportFailure",
    "AuthenticationFailure",
    "EmptyResponse",
    "MalformedResponse",
    "SchemaViolation",
    "ConcurrencyPolicy",
    "PipelineOrchestrator",
    "PipelineSnapshot",
    "PipelineState",
    "SchemaConstrainedInferenceCall",
    "churn_inference_call",
    "portfolio_synthesis_call",
    "ChurnAssessment",
    "CustomerRecord",
    "PortfolioAssets",
    "RiskLevel",
    "ChurnDashboardSession",
]
