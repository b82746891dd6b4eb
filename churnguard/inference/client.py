"""
Inference Client
================

Async client for the Gemini ``generateContent`` REST endpoint under the
structured output contract (``responseMimeType: application/json`` plus a
``responseSchema``).
"""

import asyncio
import random
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
from loguru import logger

from churnguard.inference.errors import (
    AuthenticationFailure,
    EmptyResponse,
    InferenceError,
    TransportFailure,
)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
JSON_MIME_TYPE = "application/json"


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry schedule for transient transport failures.

    ``max_retries`` counts repeats after the first attempt; zero disables
    retrying.
    """

    max_retries: int = 0
    base_delay: float = 0.5
    backoff_factor: float = 2.0

    def delay(self, retry_number: int, error: TransportFailure) -> float:
        # retry_number: 1..max_retries
        delay = self.base_delay * (self.backoff_factor ** (retry_number - 1))
        if error.status_code == 429:
            delay *= 2.5
        jitter = delay * 0.1
        return max(0.0, delay + random.uniform(-jitter, jitter))

    def should_retry(self, error: InferenceError, retries_done: int) -> bool:
        return (
            isinstance(error, TransportFailure)
            and error.is_transient
            and retries_done < self.max_retries
        )

    @classmethod
    def from_config(cls, retry_config: Dict[str, Any]) -> "RetryPolicy":
        return cls(
            max_retries=int(retry_config.get("max_retries", 0)),
            base_delay=float(retry_config.get("base_delay", 0.5)),
            backoff_factor=float(retry_config.get("backoff_factor", 2.0)),
        )


def build_request_body(instruction: str, schema: Dict[str, Any]) -> Dict[str, Any]:
    """Request payload for one structured-output call."""
    return {
        "contents": [{"role": "user", "parts": [{"text": instruction}]}],
        "generationConfig": {
            "responseMimeType": JSON_MIME_TYPE,
            "responseSchema": schema,
        },
    }


def extract_text(payload: Dict[str, Any]) -> str:
    """
    Pull the response text out of a ``generateContent`` envelope.

    Raises:
        EmptyResponse: If the envelope holds no candidate text
        TransportFailure: If the envelope does not have the documented shape
    """
    candidates = payload.get("candidates")
    if not candidates:
        feedback = payload.get("promptFeedback")
        reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        if reason:
            raise EmptyResponse(f"Prompt was blocked by the service ({reason})")
        raise EmptyResponse("Service returned no candidates")
    if not isinstance(candidates, list):
        raise _malformed_envelope("'candidates' is not a list")

    candidate = candidates[0]
    if candidate is None:
        raise EmptyResponse("Service returned an empty candidate")
    if not isinstance(candidate, dict):
        raise _malformed_envelope("candidate is not an object")

    content = candidate.get("content") or {}
    if not isinstance(content, dict):
        raise _malformed_envelope("candidate content is not an object")
    parts = content.get("parts") or []
    if not isinstance(parts, list):
        raise _malformed_envelope("'parts' is not a list")

    texts = []
    for part in parts:
        if not isinstance(part, dict):
            raise _malformed_envelope("content part is not an object")
        text = part.get("text")
        if text is None:
            continue
        if not isinstance(text, str):
            raise _malformed_envelope(f"part text is {type(text).__name__}")
        texts.append(text)
    text = "".join(texts)

    if not text.strip():
        finish = candidate.get("finishReason", "unknown")
        raise EmptyResponse(f"Service returned no text (finishReason={finish})")

    return text


class InferenceClient:
    """Send instruction + schema to the inference service and return raw text."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        retry: Optional[RetryPolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize InferenceClient.

        Args:
            api_key: Service credential, sent as ``x-goog-api-key``
            base_url: API root, without trailing slash
            timeout: Per-attempt timeout in seconds
            retry: Retry policy for transient failures (default: no retries)
            transport: Optional httpx transport, used to stub the service
        """
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry = retry or RetryPolicy()
        self._transport = transport

    @classmethod
    def from_config(cls, config: dict, api_key: str, **kwargs) -> "InferenceClient":
        """Build a client from the ``inference`` configuration section."""
        inference_config = config.get("inference", {})
        return cls(
            api_key=api_key,
            base_url=inference_config.get("base_url", DEFAULT_BASE_URL),
            timeout=float(inference_config.get("timeout", 60.0)),
            retry=RetryPolicy.from_config(inference_config.get("retry", {})),
            **kwargs,
        )

    def endpoint(self, model: str) -> str:
        return f"{self.base_url}/models/{model}:generateContent"

    async def generate(self, instruction: str, schema: Dict[str, Any], model: str) -> str:
        """
        Run one structured-output call, retrying transient failures per policy.

        Args:
            instruction: Natural-language task description
            schema: Output schema declaration
            model: Model identifier

        Returns:
            Raw response text (expected to be a JSON document)

        Raises:
            TransportFailure: Network failure, timeout or non-2xx status
            AuthenticationFailure: Credential rejected (401/403)
            EmptyResponse: No text in the response
        """
        body = build_request_body(instruction, schema)
        retries_done = 0

        # One connection pool per call: callers may run each call in its own event loop
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as http:
            while True:
                try:
                    return await self._send(http, body, model)
                except TransportFailure as e:
                    if not self.retry.should_retry(e, retries_done):
                        raise
                    retries_done += 1
                    delay = self.retry.delay(retries_done, e)
                    logger.warning(
                        f"Transient failure from {model} ({e.message}); "
                        f"retry {retries_done}/{self.retry.max_retries} in {delay:.2f}s"
                    )
                    await asyncio.sleep(delay)

    async def _send(self, http: httpx.AsyncClient, body: Dict[str, Any], model: str) -> str:
        headers = {
            "x-goog-api-key": self._api_key,
            "Content-Type": JSON_MIME_TYPE,
        }

        try:
            response = await http.post(self.endpoint(model), json=body, headers=headers)
        except httpx.TimeoutException as e:
            raise TransportFailure(f"Request to {model} timed out: {e}") from e
        except httpx.HTTPError as e:
            raise TransportFailure(f"Request to {model} failed: {e}") from e

        if response.status_code in (401, 403):
            raise AuthenticationFailure(
                f"Inference service rejected the credential ({response.status_code})",
                status_code=response.status_code,
            )
        if response.is_error:
            raise TransportFailure(
                f"Inference service returned {response.status_code}: {_error_detail(response)}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise TransportFailure(
                "Inference service returned a non-JSON envelope",
                status_code=response.status_code,
            ) from e

        if not isinstance(payload, dict):
            raise TransportFailure(
                "Inference service returned an unexpected envelope",
                status_code=response.status_code,
            )

        return extract_text(payload)


def _malformed_envelope(detail: str) -> TransportFailure:
    # Raised for 2xx envelopes only, so never transient
    return TransportFailure(f"Malformed envelope: {detail}", status_code=200)


def _error_detail(response: httpx.Response) -> str:
    try:
        return response.json().get("error", {}).get("message") or response.reason_phrase
    except (ValueError, AttributeError):
        return response.reason_phrase
