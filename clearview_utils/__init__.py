"""Streamlit-facing helpers for ClearView AI."""
