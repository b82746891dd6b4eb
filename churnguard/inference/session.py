"""
Dashboard Session
=================

Owns one orchestrator per pipeline for a single dashboard view.
"""

from typing import Optional

import httpx
from loguru import logger

from config import get_api_key, get_config
from churnguard.inference.client import InferenceClient
from churnguard.inference.orchestrator import (
    ConcurrencyPolicy,
    PipelineOrchestrator,
    PipelineSnapshot,
    PipelineState,
)
from churnguard.inference.pipeline import SchemaConstrainedInferenceCall, build_pipelines
from churnguard.inference.schemas import ChurnAssessment, CustomerRecord, PortfolioAssets


class ChurnDashboardSession:
    """Prediction and portfolio state for one view of the dashboard."""

    def __init__(
        self,
        churn_call: SchemaConstrainedInferenceCall[CustomerRecord, ChurnAssessment],
        portfolio_call: SchemaConstrainedInferenceCall[None, PortfolioAssets],
        policy: ConcurrencyPolicy = ConcurrencyPolicy.SUPERSEDE,
    ):
        self.prediction: PipelineOrchestrator[CustomerRecord, ChurnAssessment] = PipelineOrchestrator(
            churn_call, policy=policy, name="churn"
        )
        self.portfolio: PipelineOrchestrator[None, PortfolioAssets] = PipelineOrchestrator(
            portfolio_call, policy=ConcurrencyPolicy.REJECT, name="portfolio"
        )

    @classmethod
    def from_config(
        cls,
        config: Optional[dict] = None,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ChurnDashboardSession":
        """
        Build a session from configuration.

        Raises:
            MissingCredentialError: If no credential is configured
        """
        config = config if config is not None else get_config()
        api_key = api_key or get_api_key(config)
        client = InferenceClient.from_config(config, api_key, transport=transport)
        churn_call, portfolio_call = build_pipelines(config, client)
        logger.info(f"Session ready (churn={churn_call.model}, portfolio={portfolio_call.model})")
        return cls(churn_call, portfolio_call)

    async def predict(self, record: CustomerRecord) -> PipelineSnapshot:
        """Run churn inference for one customer."""
        return await self.prediction.invoke(record)

    async def load_portfolio(self) -> PipelineSnapshot:
        """Fetch portfolio assets once; later calls return the held snapshot."""
        if self.portfolio.snapshot.state != PipelineState.IDLE:
            return self.portfolio.snapshot
        return await self.portfolio.invoke(None)

    def close(self):
        self.prediction.close()
        self.portfolio.close()
