"""Streamlit and plotly rendering."""
