from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable, List, Union

import httpx
import pytest


_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from churnguard.inference.client import InferenceClient
from churnguard.inference.schemas import CustomerRecord


VALID_ASSESSMENT_TEXT = (
    '{"churnProbability":0.82,"riskLevel":"Critical",'
    '"topFactors":[{"factor":"Tenure","weight":0.4}],'
    '"recommendation":"Offer retention bundle","reasoning":"x",'
    '"modelComparison":[{"name":"XGBoost","score":0.84}]}'
)

VALID_PORTFOLIO_TEXT = json.dumps({
    "pythonCode": "import xgboost\nprint('train')\n",
    "readme": "# ChurnGuard-ML\n",
})


def gemini_envelope(text: str) -> dict:
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": text}]},
                "finishReason": "STOP",
            }
        ]
    }


def ok(text: str) -> httpx.Response:
    return httpx.Response(200, json=gemini_envelope(text))


Reply = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeGemini:
    """Scripted stand-in for the generateContent endpoint."""

    def __init__(self, *replies: Reply):
        self.replies: List[Reply] = list(replies)
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if callable(reply):
            return reply(request)
        # fresh copy per request; scripted replies may be served repeatedly
        return httpx.Response(reply.status_code, headers=reply.headers, content=reply.content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self, **kwargs: Any) -> InferenceClient:
        return InferenceClient(api_key="test-key", transport=self.transport, **kwargs)

    def body(self, index: int = 0) -> dict:
        return json.loads(self.requests[index].content)


def connect_error(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


@pytest.fixture
def customer_record() -> CustomerRecord:
    return CustomerRecord(
        tenureMonths=12,
        monthlyCharges=599,
        totalCharges=7188,
        contractType="Month-to-month",
        internetService="Fiber optic",
        techSupport="No",
        paperlessBilling="Yes",
        paymentMethod="UPI",
    )


@pytest.fixture
def api_key_env(monkeypatch):
    monkeypatch.setenv("API_KEY", "test-key")
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    return "test-key"
