"""
Prompt Builder
==============

Pure functions that turn typed input into an instruction plus the response
schema the inference service must conform to. Schemas use the OpenAPI subset
accepted by the Gemini ``responseSchema`` field.
"""

from dataclasses import dataclass, field
from textwrap import dedent
from typing import Any, Dict, FrozenSet

from churnguard.inference.schemas import CustomerRecord, RiskLevel
from churnguard.utils.helpers import format_inr_exact

COMPARED_MODELS = ("Logistic Regression", "Random Forest", "XGBoost")

CHURN_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "churnProbability": {"type": "NUMBER", "minimum": 0, "maximum": 1},
        "riskLevel": {
            "type": "STRING",
            "format": "enum",
            "enum": [level.value for level in RiskLevel],
        },
        "topFactors": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "factor": {"type": "STRING"},
                    "weight": {"type": "NUMBER"},
                },
                "required": ["factor", "weight"],
            },
        },
        "recommendation": {"type": "STRING"},
        "reasoning": {"type": "STRING"},
        "modelComparison": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING"},
                    "score": {"type": "NUMBER"},
                },
                "required": ["name", "score"],
            },
        },
    },
    "required": [
        "churnProbability",
        "riskLevel",
        "topFactors",
        "recommendation",
        "reasoning",
        "modelComparison",
    ],
}

PORTFOLIO_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "pythonCode": {"type": "STRING"},
        "readme": {"type": "STRING"},
    },
    "required": ["pythonCode", "readme"],
}

PORTFOLIO_INSTRUCTION = dedent(
    """
    Generate a concise, professional Python script using scikit-learn and XGBoost for Telco Churn prediction.
    Also generate a README.md for a GitHub repository titled 'ChurnGuard-ML'.
    Format as JSON with keys 'pythonCode' and 'readme'.
    """
).strip()


@dataclass(frozen=True)
class PromptSpec:
    """Instruction text plus the declared output schema."""

    instruction: str
    response_schema: Dict[str, Any] = field(default_factory=dict)

    @property
    def required_fields(self) -> FrozenSet[str]:
        return required_fields(self.response_schema)


def required_fields(schema: Dict[str, Any]) -> FrozenSet[str]:
    """Top-level field names a schema marks as required."""
    return frozenset(schema.get("required", []))


def build_churn_prompt(record: CustomerRecord) -> PromptSpec:
    """
    Render the churn analysis request for one customer.

    Args:
        record: Validated customer attributes

    Returns:
        PromptSpec with the instruction and CHURN_RESPONSE_SCHEMA
    """
    levels = "/".join(level.value for level in RiskLevel)
    models = ", ".join(COMPARED_MODELS)

    instruction = dedent(
        f"""
        Act as a Senior ML Engineer. Analyze this customer data for churn:
        - Tenure: {record.tenure_months} months
        - Monthly Charges: {format_inr_exact(record.monthly_charges)}
        - Total Charges: {format_inr_exact(record.total_charges)}
        - Contract: {record.contract_type.value}
        - Internet Service: {record.internet_service.value}
        - Tech Support: {record.tech_support.value}
        - Paperless Billing: {record.paperless_billing.value}
        - Payment Method: {record.payment_method}

        Return a JSON response following this schema:
        - churnProbability (number between 0 and 1)
        - riskLevel ({levels})
        - topFactors (Array of {{factor: string, weight: number}})
        - recommendation (Business strategy)
        - reasoning (ML explanation)
        - modelComparison (Array of {{name: string, score: number}} for {models})

        The reasoning should mention feature engineering like 'tenure groups' or 'interaction terms'.
        """
    ).strip()

    return PromptSpec(instruction=instruction, response_schema=CHURN_RESPONSE_SCHEMA)


def build_portfolio_prompt(_: None = None) -> PromptSpec:
    """Render the constant portfolio synthesis request."""
    return PromptSpec(instruction=PORTFOLIO_INSTRUCTION, response_schema=PORTFOLIO_RESPONSE_SCHEMA)
