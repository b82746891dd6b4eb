"""
Inference Pipelines
===================

One generic schema-constrained call, instantiated for churn inference and
portfolio synthesis.
"""

import time
from typing import Callable, Generic, Optional, Type, TypeVar

from loguru import logger
from pydantic import BaseModel

from churnguard.inference.client import InferenceClient
from churnguard.inference.decoder import ResponseDecoder
from churnguard.inference.errors import InferenceError
from churnguard.inference.prompts import PromptSpec, build_churn_prompt, build_portfolio_prompt
from churnguard.inference.schemas import ChurnAssessment, CustomerRecord, PortfolioAssets

TInput = TypeVar("TInput")
TOutput = TypeVar("TOutput", bound=BaseModel)

DEFAULT_CHURN_MODEL = "gemini-3-pro-preview"
DEFAULT_PORTFOLIO_MODEL = "gemini-3-flash-preview"


class SchemaConstrainedInferenceCall(Generic[TInput, TOutput]):
    """Prompt Builder -> Inference Client -> Response Decoder."""

    def __init__(
        self,
        name: str,
        prompt_builder: Callable[[TInput], PromptSpec],
        output_type: Type[TOutput],
        model: str,
        client: InferenceClient,
    ):
        """
        Initialize the call.

        Args:
            name: Pipeline name used in logs
            prompt_builder: Pure function mapping input to a PromptSpec
            output_type: Pydantic model the response must decode into
            model: Model identifier sent to the service
            client: Inference client
        """
        self.name = name
        self.prompt_builder = prompt_builder
        self.output_type = output_type
        self.model = model
        self.client = client
        self.decoder = ResponseDecoder(output_type)

    def build_prompt(self, payload: Optional[TInput] = None) -> PromptSpec:
        return self.prompt_builder(payload)

    async def __call__(self, payload: Optional[TInput] = None) -> TOutput:
        """
        Run the pipeline once.

        Raises:
            InferenceError: Any transport or decoding failure
        """
        prompt = self.build_prompt(payload)
        start_time = time.time()
        logger.info(f"[{self.name}] calling {self.model}")

        try:
            text = await self.client.generate(prompt.instruction, prompt.response_schema, self.model)
            result = self.decoder.decode(text)
        except InferenceError as e:
            logger.error(f"[{self.name}] {e.kind}: {e.message}")
            raise

        elapsed_ms = (time.time() - start_time) * 1000
        logger.info(f"[{self.name}] decoded {self.output_type.__name__} in {elapsed_ms:.0f} ms")
        return result


def churn_inference_call(
    client: InferenceClient,
    model: str = DEFAULT_CHURN_MODEL,
) -> SchemaConstrainedInferenceCall[CustomerRecord, ChurnAssessment]:
    """Churn Inference Pipeline: CustomerRecord -> ChurnAssessment."""
    return SchemaConstrainedInferenceCall(
        name="churn",
        prompt_builder=build_churn_prompt,
        output_type=ChurnAssessment,
        model=model,
        client=client,
    )


def portfolio_synthesis_call(
    client: InferenceClient,
    model: str = DEFAULT_PORTFOLIO_MODEL,
) -> SchemaConstrainedInferenceCall[None, PortfolioAssets]:
    """Portfolio Synthesis Pipeline: no input -> PortfolioAssets."""
    return SchemaConstrainedInferenceCall(
        name="portfolio",
        prompt_builder=build_portfolio_prompt,
        output_type=PortfolioAssets,
        model=model,
        client=client,
    )


def build_pipelines(config: dict, client: InferenceClient):
    """
    Instantiate both pipelines with the models named in configuration.

    Returns:
        Tuple of (churn call, portfolio call)
    """
    models = config.get("inference", {}).get("models", {})
    return (
        churn_inference_call(client, models.get("churn", DEFAULT_CHURN_MODEL)),
        portfolio_synthesis_call(client, models.get("portfolio", DEFAULT_PORTFOLIO_MODEL)),
    )
