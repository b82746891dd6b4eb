"""
Streamlit Dashboard Application
===============================

Interactive dashboard for churn risk inference and model showcase.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

import asyncio

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st
from pydantic import ValidationError
from streamlit_option_menu import option_menu

from config import MissingCredentialError, get_config
from churnguard import display
from churnguard.dashboard.forms import DEFAULT_FORM, record_from_form
from churnguard.inference import ChurnDashboardSession, PipelineSnapshot, RiskLevel
from churnguard.inference.schemas import ContractType, InternetService, YesNo
from churnguard.utils import format_inr_exact, format_percentage, setup_logging_from_config

# Page config
st.set_page_config(
    page_title="ChurnGuard Pro",
    page_icon="🧠",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS
st.markdown("""
<style>
    .main-header {
        font-size: 2.2rem;
        font-weight: bold;
        color: #818cf8;
        padding: 0.5rem 0;
    }
    .risk-critical { color: #ef4444; }
    .risk-high { color: #f97316; }
    .risk-medium { color: #f59e0b; }
    .risk-low { color: #10b981; }
</style>
""", unsafe_allow_html=True)

RISK_COLORS = {
    RiskLevel.LOW: "#10b981",
    RiskLevel.MEDIUM: "#f59e0b",
    RiskLevel.HIGH: "#f97316",
    RiskLevel.CRITICAL: "#ef4444",
}


def get_session() -> ChurnDashboardSession:
    """One session per browser tab; fails fast when the credential is missing."""
    if "churn_session" not in st.session_state:
        config = get_config()
        setup_logging_from_config(config)
        st.session_state.churn_session = ChurnDashboardSession.from_config(config)
    return st.session_state.churn_session


def render_failure(snapshot: PipelineSnapshot, what: str):
    """Visible failure indicator, distinct from the empty state."""
    st.error(f"{what} failed ({snapshot.error_kind}): {snapshot.error_message}")


def render_assessment(snapshot: PipelineSnapshot):
    """Prediction panel: result, failure, or the empty state."""
    if snapshot.has_failed:
        render_failure(snapshot, "Prediction")
        return

    assessment = snapshot.result
    if assessment is None:
        st.info("No prediction yet. Submit a customer profile to run inference.")
        return

    col1, col2 = st.columns(2)
    with col1:
        color = RISK_COLORS.get(assessment.risk_level, "gray")
        st.caption("RISK CLASSIFICATION")
        st.markdown(
            f"<h2 style='color:{color}'>{assessment.risk_level.value}</h2>",
            unsafe_allow_html=True
        )
    with col2:
        st.caption("INFERENCE PROB.")
        st.markdown(f"## {format_percentage(assessment.churn_probability)}")

    for warning in assessment.consistency_warnings():
        st.warning(warning)

    st.markdown("---")
    st.markdown("**Feature Importance (Local LIME Explanation)**")
    if assessment.top_factors:
        for factor in assessment.top_factors:
            st.markdown(f"{factor.factor} - Impact: {factor.weight * 100:.0f}%")
            st.progress(min(max(abs(factor.weight), 0.0), 1.0))
    else:
        st.caption("The service reported no contributing factors.")

    st.markdown("**Retention Strategy**")
    st.success(assessment.recommendation)

    if assessment.model_comparison:
        st.markdown("**Model Comparison**")
        comparison = pd.DataFrame([m.model_dump() for m in assessment.model_comparison])
        fig = px.bar(comparison, x="name", y="score", range_y=[0, 1], color="name")
        fig.update_layout(height=250, showlegend=False)
        st.plotly_chart(fig, use_container_width=True)


# Sidebar Navigation
with st.sidebar:
    st.markdown("## ChurnGuard Pro")

    selected = option_menu(
        menu_title=None,
        options=["Dashboard", "Lab", "Export"],
        icons=["speedometer2", "graph-up", "download"],
        menu_icon="cast",
        default_index=0,
    )

    st.markdown("---")
    st.markdown("### About")
    st.markdown("""
    **ChurnGuard Pro**

    Churn risk assessment backed by
    schema-constrained LLM inference.

    Built with:
    - Streamlit
    - FastAPI
    - Gemini
    """)

try:
    session = get_session()
except MissingCredentialError as e:
    st.error(str(e))
    st.stop()


# Dashboard Page
if selected == "Dashboard":
    st.markdown('<h1 class="main-header">Predictive Hub</h1>', unsafe_allow_html=True)
    st.markdown("Classifying customer churn risk using XGBoost & Random Forest models.")

    cols = st.columns(len(display.HEADLINE_METRICS))
    for col, metric in zip(cols, display.HEADLINE_METRICS):
        with col:
            st.metric(label=metric["label"], value=metric["value"], delta=f"{metric['trend']}%")

    st.markdown("---")
    col1, col2 = st.columns(2)

    with col1:
        with st.form("prediction_form"):
            st.subheader("New Customer Analysis")
            c1, c2 = st.columns(2)
            with c1:
                tenure = st.text_input("Tenure (Months)", value=str(DEFAULT_FORM["tenureMonths"]))
                monthly = st.text_input("Monthly Charges (₹)", value=str(DEFAULT_FORM["monthlyCharges"]))
                total = st.text_input("Total Charges (₹)", value=str(DEFAULT_FORM["totalCharges"]))
                payment = st.selectbox("Payment Method", ["UPI", "Credit Card", "Debit Card", "Net Banking"])
            with c2:
                contract = st.selectbox("Contract", [c.value for c in ContractType])
                internet = st.selectbox("Internet Service", [s.value for s in InternetService], index=1)
                tech_support = st.selectbox("Tech Support", [v.value for v in YesNo], index=1)
                paperless = st.selectbox("Paperless Billing", [v.value for v in YesNo])

            submitted = st.form_submit_button(
                "Run Inference",
                use_container_width=True,
                disabled=session.prediction.snapshot.is_loading
            )

        if submitted:
            fields = {
                "tenureMonths": tenure,
                "monthlyCharges": monthly,
                "totalCharges": total,
                "contractType": contract,
                "internetService": internet,
                "techSupport": tech_support,
                "paperlessBilling": paperless,
                "paymentMethod": payment,
            }
            try:
                record = record_from_form(fields)
            except ValidationError as e:
                st.error(f"Invalid customer profile: {e.error_count()} field(s) rejected")
                record = None

            if record is not None:
                st.caption(
                    f"Monthly {format_inr_exact(record.monthly_charges)} · Total {format_inr_exact(record.total_charges)}"
                )
                with st.spinner("Running inference..."):
                    asyncio.run(session.predict(record))

    with col2:
        render_assessment(session.prediction.snapshot)


# Lab Page
elif selected == "Lab":
    st.markdown('<h1 class="main-header">Model Lab</h1>', unsafe_allow_html=True)

    col1, col2 = st.columns(2)

    with col1:
        st.subheader(f"ROC Curve (AUC = {display.AUC})")
        roc = pd.DataFrame(display.ROC_CURVE)
        fig = go.Figure()
        fig.add_trace(go.Scatter(x=roc["fpr"], y=roc["tpr"], fill="tozeroy", name="Model"))
        fig.add_trace(go.Scatter(x=[0, 1], y=[0, 1], line={"dash": "dash"}, name="Random"))
        fig.update_layout(xaxis_title="False Positive Rate", yaxis_title="True Positive Rate", height=350)
        st.plotly_chart(fig, use_container_width=True)

    with col2:
        st.subheader("Global Feature Importance (XGBoost)")
        importance = pd.DataFrame(display.GLOBAL_FEATURE_IMPORTANCE)
        fig = px.bar(importance, x="importance", y="name", orientation="h")
        fig.update_layout(yaxis={"autorange": "reversed"}, height=350)
        st.plotly_chart(fig, use_container_width=True)

    col1, col2 = st.columns(2)

    with col1:
        st.subheader("Confusion Matrix Analysis")
        cm = display.CONFUSION_MATRIX
        fig = px.imshow(
            [[cm["tn"], cm["fp"]], [cm["fn"], cm["tp"]]],
            text_auto=True,
            aspect="auto",
            labels=dict(x="Predicted", y="Actual"),
            x=["No Churn", "Churn"],
            y=["No Churn", "Churn"]
        )
        st.plotly_chart(fig, use_container_width=True)

    with col2:
        st.subheader("Risk Segments")
        segments = pd.DataFrame(display.RISK_SEGMENTS)
        fig = px.pie(
            segments,
            names="name",
            values="value",
            color="name",
            color_discrete_map={s["name"]: s["color"] for s in display.RISK_SEGMENTS}
        )
        st.plotly_chart(fig, use_container_width=True)

    st.subheader("Evaluation Scores")
    st.dataframe(pd.DataFrame(display.MODEL_EVAL_STATS), use_container_width=True)


# Export Page
elif selected == "Export":
    st.markdown('<h1 class="main-header">Portfolio Export</h1>', unsafe_allow_html=True)

    with st.spinner("Synthesizing portfolio assets..."):
        snapshot = asyncio.run(session.load_portfolio())

    if snapshot.has_failed:
        render_failure(snapshot, "Portfolio synthesis")
    elif snapshot.result is None:
        st.info("Portfolio assets are not available yet.")
    else:
        assets = snapshot.result
        tab1, tab2 = st.tabs(["churn_model.py", "README.md"])
        with tab1:
            st.code(assets.source_code, language="python")
            st.download_button(
                label="Download script",
                data=assets.source_code,
                file_name="churn_model.py",
                mime="text/x-python"
            )
        with tab2:
            st.markdown(assets.documentation)
            st.download_button(
                label="Download README",
                data=assets.documentation,
                file_name="README.md",
                mime="text/markdown"
            )


# Run with: streamlit run churnguard/dashboard/app.py
