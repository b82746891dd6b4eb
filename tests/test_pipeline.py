import asyncio

import httpx
import pytest

from churnguard.inference.errors import EmptyResponse, SchemaViolation, TransportFailure
from churnguard.inference.pipeline import (
    DEFAULT_CHURN_MODEL,
    DEFAULT_PORTFOLIO_MODEL,
    build_pipelines,
    churn_inference_call,
    portfolio_synthesis_call,
)
from churnguard.inference.schemas import ChurnAssessment, PortfolioAssets

from conftest import VALID_ASSESSMENT_TEXT, VALID_PORTFOLIO_TEXT, FakeGemini, ok


def test_churn_pipeline_end_to_end(customer_record):
    fake = FakeGemini(ok(VALID_ASSESSMENT_TEXT))
    call = churn_inference_call(fake.client())

    result = asyncio.run(call(customer_record))

    assert isinstance(result, ChurnAssessment)
    assert result.churn_probability == 0.82
    assert fake.requests[0].url.path.endswith(f"/models/{DEFAULT_CHURN_MODEL}:generateContent")
    assert "Tenure: 12 months" in fake.body()["contents"][0]["parts"][0]["text"]


def test_portfolio_pipeline_end_to_end():
    fake = FakeGemini(ok(VALID_PORTFOLIO_TEXT))
    call = portfolio_synthesis_call(fake.client())

    result = asyncio.run(call())

    assert isinstance(result, PortfolioAssets)
    assert fake.requests[0].url.path.endswith(f"/models/{DEFAULT_PORTFOLIO_MODEL}:generateContent")


def test_portfolio_request_shape_is_always_the_same():
    fake = FakeGemini(ok(VALID_PORTFOLIO_TEXT))
    call = portfolio_synthesis_call(fake.client())

    asyncio.run(call())
    asyncio.run(call(None))

    assert fake.body(0) == fake.body(1)
    assert fake.requests[0].url == fake.requests[1].url


def test_pipelines_use_configured_models():
    fake = FakeGemini(ok("{}"))
    config = {"inference": {"models": {"churn": "strong-model", "portfolio": "fast-model"}}}

    churn, portfolio = build_pipelines(config, fake.client())

    assert churn.model == "strong-model"
    assert portfolio.model == "fast-model"


def test_churn_and_portfolio_models_differ_by_default():
    churn, portfolio = build_pipelines({}, FakeGemini(ok("{}")).client())
    assert churn.model == DEFAULT_CHURN_MODEL
    assert portfolio.model == DEFAULT_PORTFOLIO_MODEL
    assert churn.model != portfolio.model


def test_schema_violation_propagates(customer_record):
    fake = FakeGemini(ok('{"churnProbability": 1.4}'))
    call = churn_inference_call(fake.client())
    with pytest.raises(SchemaViolation):
        asyncio.run(call(customer_record))


def test_empty_text_propagates(customer_record):
    fake = FakeGemini(ok(""))
    call = churn_inference_call(fake.client())
    with pytest.raises(EmptyResponse):
        asyncio.run(call(customer_record))


def test_transport_failure_propagates(customer_record):
    fake = FakeGemini(httpx.Response(502))
    call = churn_inference_call(fake.client())
    with pytest.raises(TransportFailure):
        asyncio.run(call(customer_record))
