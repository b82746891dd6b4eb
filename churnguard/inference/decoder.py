"""
Response Decoder
================

Parses raw response text into a typed result. The service's own schema
enforcement is not trusted: required fields, enum membership and numeric
ranges are re-validated after parsing.
"""

import json
import re
from typing import Any, Generic, List, Optional, Type, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from churnguard.inference.errors import EmptyResponse, MalformedResponse, SchemaViolation
from churnguard.inference.schemas import ChurnAssessment

TOutput = TypeVar("TOutput", bound=BaseModel)


def _strip_code_fences(s: str) -> str:
    t = s.strip()
    t = re.sub(r"^```(?:json)?\s*", "", t, flags=re.IGNORECASE)
    t = re.sub(r"\s*```$", "", t)
    return t.strip()


def _describe_errors(error: ValidationError) -> List[str]:
    violations = []
    for item in error.errors():
        path = ".".join(str(p) for p in item.get("loc", ())) or "<root>"
        violations.append(f"{path}: {item.get('msg', 'invalid')}")
    return violations


def parse_json(text: Optional[str]) -> Any:
    """
    Parse response text as JSON.

    Raises:
        EmptyResponse: If text is None or blank
        MalformedResponse: If text is not a JSON document
    """
    if text is None or not text.strip():
        raise EmptyResponse("Inference service returned an empty payload")

    try:
        return json.loads(_strip_code_fences(text))
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"Response is not valid JSON: {e.msg} at position {e.pos}") from e


class ResponseDecoder(Generic[TOutput]):
    """Decode raw text into ``output_type`` or fail with a typed error."""

    def __init__(self, output_type: Type[TOutput]):
        self.output_type = output_type

    def decode(self, text: Optional[str]) -> TOutput:
        """
        Decode one response.

        Args:
            text: Raw response text

        Returns:
            Validated instance of ``output_type``

        Raises:
            EmptyResponse: No text
            MalformedResponse: Not JSON
            SchemaViolation: JSON that does not match ``output_type``
        """
        data = parse_json(text)

        if not isinstance(data, dict):
            raise SchemaViolation(
                f"Expected a JSON object for {self.output_type.__name__}, "
                f"got {type(data).__name__}",
                violations=["<root>: not an object"],
            )

        try:
            result = self.output_type.model_validate(data)
        except ValidationError as e:
            violations = _describe_errors(e)
            raise SchemaViolation(
                f"Response does not match {self.output_type.__name__}: {'; '.join(violations)}",
                violations=violations,
            ) from e

        if isinstance(result, ChurnAssessment):
            for warning in result.consistency_warnings():
                logger.warning(f"Inconsistent assessment: {warning}")

        return result
