import json

import pytest

from churnguard.inference.decoder import ResponseDecoder
from churnguard.inference.errors import EmptyResponse, MalformedResponse, SchemaViolation
from churnguard.inference.schemas import ChurnAssessment, PortfolioAssets, RiskLevel

from conftest import VALID_ASSESSMENT_TEXT, VALID_PORTFOLIO_TEXT


def churn_payload(**overrides) -> str:
    data = json.loads(VALID_ASSESSMENT_TEXT)
    data.update(overrides)
    return json.dumps(data)


@pytest.fixture
def decoder():
    return ResponseDecoder(ChurnAssessment)


def test_decodes_valid_assessment(decoder):
    result = decoder.decode(VALID_ASSESSMENT_TEXT)
    assert isinstance(result, ChurnAssessment)
    assert result.churn_probability == 0.82
    assert result.risk_level == RiskLevel.CRITICAL
    assert result.risk_level.value == "Critical"
    assert result.top_factors[0].factor == "Tenure"
    assert result.model_comparison[0].score == 0.84


def test_probability_out_of_range_is_schema_violation(decoder):
    with pytest.raises(SchemaViolation) as exc_info:
        decoder.decode(churn_payload(churnProbability=1.4))
    assert any(v.startswith("churnProbability") for v in exc_info.value.violations)


def test_negative_probability_is_schema_violation(decoder):
    with pytest.raises(SchemaViolation):
        decoder.decode(churn_payload(churnProbability=-0.1))


@pytest.mark.parametrize("text", ["", "   \n", None])
def test_empty_payload_is_empty_response(decoder, text):
    with pytest.raises(EmptyResponse):
        decoder.decode(text)


def test_empty_object_is_not_accepted(decoder):
    with pytest.raises(SchemaViolation) as exc_info:
        decoder.decode("{}")
    assert len(exc_info.value.violations) == 6


def test_invalid_json_is_malformed(decoder):
    with pytest.raises(MalformedResponse):
        decoder.decode('{"churnProbability": 0.5,')


def test_unknown_risk_level_is_schema_violation(decoder):
    with pytest.raises(SchemaViolation) as exc_info:
        decoder.decode(churn_payload(riskLevel="Severe"))
    assert any(v.startswith("riskLevel") for v in exc_info.value.violations)


def test_missing_field_is_schema_violation(decoder):
    data = json.loads(VALID_ASSESSMENT_TEXT)
    del data["recommendation"]
    with pytest.raises(SchemaViolation) as exc_info:
        decoder.decode(json.dumps(data))
    assert exc_info.value.violations == ["recommendation: Field required"]


def test_non_object_json_is_schema_violation(decoder):
    with pytest.raises(SchemaViolation):
        decoder.decode("[1, 2, 3]")


def test_empty_factor_list_is_accepted(decoder):
    result = decoder.decode(churn_payload(topFactors=[]))
    assert result.top_factors == []


def test_code_fenced_json_is_accepted(decoder):
    result = decoder.decode(f"```json\n{VALID_ASSESSMENT_TEXT}\n```")
    assert result.churn_probability == 0.82


def test_inconsistent_risk_level_is_soft_warning(decoder):
    result = decoder.decode(churn_payload(churnProbability=0.1))
    warnings = result.consistency_warnings()
    assert result.risk_level == RiskLevel.CRITICAL
    assert any("expected Low" in w for w in warnings)


def test_consistent_assessment_only_flags_model_count(decoder):
    result = decoder.decode(VALID_ASSESSMENT_TEXT)
    assert result.consistency_warnings() == ["modelComparison has 1 entries, expected 3"]


def test_portfolio_assets_decode():
    result = ResponseDecoder(PortfolioAssets).decode(VALID_PORTFOLIO_TEXT)
    assert result.source_code.startswith("import xgboost")
    assert result.documentation == "# ChurnGuard-ML\n"


def test_portfolio_missing_readme_is_schema_violation():
    with pytest.raises(SchemaViolation):
        ResponseDecoder(PortfolioAssets).decode('{"pythonCode": "print(1)"}')


@pytest.mark.parametrize("value", ["0.82", True, None])
def test_non_numeric_probability_is_schema_violation(decoder, value):
    with pytest.raises(SchemaViolation) as exc_info:
        decoder.decode(churn_payload(churnProbability=value))
    assert any(v.startswith("churnProbability") for v in exc_info.value.violations)


def test_integer_probability_is_accepted(decoder):
    result = decoder.decode(churn_payload(churnProbability=1, riskLevel="Critical"))
    assert result.churn_probability == 1.0


def test_string_factor_weight_is_schema_violation(decoder):
    with pytest.raises(SchemaViolation) as exc_info:
        decoder.decode(churn_payload(topFactors=[{"factor": "Tenure", "weight": "0.4"}]))
    assert len(exc_info.value.violations) == 1
    assert exc_info.value.violations[0].startswith("topFactors.0.weight")


def test_boolean_model_score_is_schema_violation(decoder):
    with pytest.raises(SchemaViolation) as exc_info:
        decoder.decode(churn_payload(modelComparison=[{"name": "XGBoost", "score": False}]))
    assert any(v.startswith("modelComparison.0.score") for v in exc_info.value.violations)
