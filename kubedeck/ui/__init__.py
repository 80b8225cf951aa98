"""Streamlit rendering helpers for the workspace page."""
