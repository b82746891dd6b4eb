"""
ChurnGuard
==========

Analyst-facing churn risk dashboard backed by schema-constrained calls to a
generative inference service.

Modules:
    - inference: Prompt building, inference client, response decoding, orchestration
    - api: FastAPI backend
    - dashboard: Streamlit frontend
    - display: Static evaluation data shown by the dashboard
    - utils: Utility functions
"""

__version__ = "1.0.0"
