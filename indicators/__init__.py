"""Core (UI-agnostic) ESG indicator dashboard logic.

This package contains:
- dataset loading (primary/fallback JSON -> indicator records)
- filter normalization and filtering
- department grouping for the kanban board
- summary / detail / CSV projections (JSON-serializable payloads)
- the view controller and CSV export
- chart helpers (Altair -> Vega-Lite spec dict)
"""
