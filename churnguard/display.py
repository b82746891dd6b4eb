"""
Display Constants
=================

Fixed evaluation figures shown by the dashboard. Nothing here is computed.
"""

from typing import Dict, List, Union

Record = Dict[str, Union[str, float, int]]

AUC = 0.92

ROC_CURVE: List[Record] = [
    {"fpr": 0.0, "tpr": 0.0},
    {"fpr": 0.1, "tpr": 0.4},
    {"fpr": 0.2, "tpr": 0.65},
    {"fpr": 0.3, "tpr": 0.8},
    {"fpr": 0.5, "tpr": 0.92},
    {"fpr": 0.8, "tpr": 0.98},
    {"fpr": 1.0, "tpr": 1.0},
]

RISK_SEGMENTS: List[Record] = [
    {"name": "Low Risk", "value": 65, "color": "#10b981"},
    {"name": "Medium Risk", "value": 20, "color": "#f59e0b"},
    {"name": "High Risk", "value": 10, "color": "#f97316"},
    {"name": "Critical", "value": 5, "color": "#ef4444"},
]

GLOBAL_FEATURE_IMPORTANCE: List[Record] = sorted(
    [
        {"name": "Tenure", "importance": 0.35},
        {"name": "Contract Type", "importance": 0.28},
        {"name": "Monthly Charges", "importance": 0.15},
        {"name": "Tech Support", "importance": 0.10},
        {"name": "Internet Service", "importance": 0.08},
        {"name": "Payment Method", "importance": 0.04},
    ],
    key=lambda r: r["importance"],
    reverse=True,
)

MODEL_EVAL_STATS: List[Record] = [
    {"metric": "Precision", "score": 0.82},
    {"metric": "Recall", "score": 0.79},
    {"metric": "F1-Score", "score": 0.84},
    {"metric": "ROC-AUC", "score": AUC},
]

CONFUSION_MATRIX: Dict[str, int] = {"tn": 4120, "fp": 182, "fn": 143, "tp": 895}

HEADLINE_METRICS: List[Record] = [
    {"label": "F1-Score (XGBoost)", "value": "0.84", "trend": 2.1, "icon": "cpu"},
    {"label": "ROC-AUC", "value": "0.92", "trend": 0.5, "icon": "graph-up"},
    {"label": "Avg. Retention ROI", "value": "₹12,400", "trend": 15.2, "icon": "currency-rupee"},
    {"label": "Identified High-Risk", "value": "1,240", "trend": -4.3, "icon": "person-exclamation"},
]


def as_dict() -> Dict[str, object]:
    """All constants keyed for the JSON API."""
    return {
        "auc": AUC,
        "rocCurve": ROC_CURVE,
        "riskSegments": RISK_SEGMENTS,
        "globalFeatureImportance": GLOBAL_FEATURE_IMPORTANCE,
        "modelEvalStats": MODEL_EVAL_STATS,
        "confusionMatrix": CONFUSION_MATRIX,
        "headlineMetrics": HEADLINE_METRICS,
    }
