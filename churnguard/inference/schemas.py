"""
Inference Schemas (Pydantic Models)
===================================

Typed inputs and outputs of the inference pipelines. Field names are
snake_case in Python and camelCase on the wire.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, field_validator

EXPECTED_MODEL_COUNT = 3


class ContractType(str, Enum):
    MONTH_TO_MONTH = "Month-to-month"
    ONE_YEAR = "One year"
    TWO_YEAR = "Two year"


class InternetService(str, Enum):
    DSL = "DSL"
    FIBER = "Fiber optic"
    NONE = "No"


class YesNo(str, Enum):
    YES = "Yes"
    NO = "No"


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


def expected_risk_level(probability: float) -> RiskLevel:
    """Conventional risk band for a churn probability."""
    if probability >= 0.8:
        return RiskLevel.CRITICAL
    elif probability >= 0.6:
        return RiskLevel.HIGH
    elif probability >= 0.3:
        return RiskLevel.MEDIUM
    else:
        return RiskLevel.LOW


class CustomerRecord(BaseModel):
    """Schema for customer attributes submitted for churn inference."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "tenureMonths": 12,
                "monthlyCharges": 599,
                "totalCharges": 7188,
                "contractType": "Month-to-month",
                "internetService": "Fiber optic",
                "techSupport": "No",
                "paperlessBilling": "Yes",
                "paymentMethod": "UPI",
            }
        },
    )

    tenure_months: int = Field(..., alias="tenureMonths", ge=0, description="Months since customer joined")
    monthly_charges: float = Field(
        ..., alias="monthlyCharges", ge=0, allow_inf_nan=False, description="Current monthly bill"
    )
    total_charges: float = Field(
        ..., alias="totalCharges", ge=0, allow_inf_nan=False, description="Lifetime billed amount"
    )
    contract_type: ContractType = Field(..., alias="contractType")
    internet_service: InternetService = Field(..., alias="internetService")
    tech_support: YesNo = Field(..., alias="techSupport")
    paperless_billing: YesNo = Field(..., alias="paperlessBilling")
    payment_method: str = Field(..., alias="paymentMethod", min_length=1, description="Payment channel")

    @field_validator("payment_method")
    @classmethod
    def strip_payment_method(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("paymentMethod must not be blank")
        return v


class RiskFactor(BaseModel):
    """One entry of the local explanation."""

    model_config = ConfigDict(populate_by_name=True)

    factor: str
    weight: StrictFloat = Field(..., allow_inf_nan=False)


class ModelScore(BaseModel):
    """Score reported for one candidate model."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    name: str
    score: StrictFloat = Field(..., allow_inf_nan=False)


class ChurnAssessment(BaseModel):
    """Structured risk assessment returned by the churn inference pipeline."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    # JSON numbers only; strings and booleans are rejected
    churn_probability: StrictFloat = Field(..., alias="churnProbability", ge=0, le=1, allow_inf_nan=False)
    risk_level: RiskLevel = Field(..., alias="riskLevel")
    top_factors: List[RiskFactor] = Field(..., alias="topFactors")
    recommendation: str
    reasoning: str
    model_comparison: List[ModelScore] = Field(..., alias="modelComparison")

    def consistency_warnings(self) -> List[str]:
        """
        Soft checks the service does not enforce.

        Returns:
            Human-readable warnings; empty when the assessment is consistent
        """
        warnings = []

        expected = expected_risk_level(self.churn_probability)
        if expected != self.risk_level:
            warnings.append(
                f"riskLevel {self.risk_level.value} does not match churnProbability "
                f"{self.churn_probability:.2f} (expected {expected.value})"
            )

        if len(self.model_comparison) != EXPECTED_MODEL_COUNT:
            warnings.append(
                f"modelComparison has {len(self.model_comparison)} entries, "
                f"expected {EXPECTED_MODEL_COUNT}"
            )

        return warnings


class PortfolioAssets(BaseModel):
    """Generated training script and README."""

    model_config = ConfigDict(populate_by_name=True)

    source_code: str = Field(..., alias="pythonCode")
    documentation: str = Field(..., alias="readme")
