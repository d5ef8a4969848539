"""Core (UI-agnostic) latency dashboard logic.

This package contains:
- settings (defaults + environment -> DashboardSettings)
- data loading (CSV -> pandas)
- time normalization (mixed-unit strings -> milliseconds)
- per-model aggregation
- chart helpers (Altair -> Vega-Lite spec dict)
"""
