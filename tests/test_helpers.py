import pytest

from churnguard import display
from churnguard.utils import format_inr, format_inr_exact, format_percentage


@pytest.mark.parametrize("amount,expected", [
    (0, "₹0"),
    (599, "₹599"),
    (7188, "₹7,188"),
    (712345, "₹7,12,345"),
    (10000000, "₹1,00,00,000"),
    (1234.6, "₹1,235"),
    (-7188, "-₹7,188"),
])
def test_format_inr(amount, expected):
    assert format_inr(amount) == expected


def test_format_percentage():
    assert format_percentage(0.82) == "82.00%"
    assert format_percentage(0.8234, precision=1) == "82.3%"


def test_feature_importance_is_sorted_descending():
    weights = [r["importance"] for r in display.GLOBAL_FEATURE_IMPORTANCE]
    assert weights == sorted(weights, reverse=True)


def test_risk_segments_cover_the_whole_base():
    assert sum(s["value"] for s in display.RISK_SEGMENTS) == 100


def test_roc_curve_is_monotonic_and_anchored():
    fpr = [p["fpr"] for p in display.ROC_CURVE]
    tpr = [p["tpr"] for p in display.ROC_CURVE]
    assert fpr == sorted(fpr) and tpr == sorted(tpr)
    assert display.ROC_CURVE[0] == {"fpr": 0.0, "tpr": 0.0}
    assert display.ROC_CURVE[-1] == {"fpr": 1.0, "tpr": 1.0}


@pytest.mark.parametrize("amount,decimals,expected", [
    (1250.4, 2, "₹1,250.40"),
    (70.35, 2, "₹70.35"),
    (712345.5, 2, "₹7,12,345.50"),
    (-0.4, 2, "-₹0.40"),
])
def test_format_inr_with_paise(amount, decimals, expected):
    assert format_inr(amount, decimals=decimals) == expected


@pytest.mark.parametrize("amount,expected", [
    (599, "₹599"),
    (599.0, "₹599"),
    (0.4, "₹0.40"),
    (7188.25, "₹7,188.25"),
])
def test_format_inr_exact(amount, expected):
    assert format_inr_exact(amount) == expected
