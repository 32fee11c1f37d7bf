"""
Core package for the missing persons cross-filtering dashboard.

Submodules provide data loading, projection, geography joins, the shared
filter store, and the Streamlit views orchestrated by the top-level `app.py`.
"""
