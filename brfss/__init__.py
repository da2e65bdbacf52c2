"""Core (UI-agnostic) dashboard logic.

This package contains:
- data loading (partitioned CSV -> pandas record store)
- cross-filter state and normalization
- chart queries (JSON-serializable projections)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
