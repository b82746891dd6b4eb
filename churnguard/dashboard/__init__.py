"""Streamlit frontend module."""
