"""Procedure Routers — application procedures grouped by namespace.

Invariants:
    - Every router is mounted in root.py (no auto-discovery)
"""
