"""Core Layer — procedures, context, validation and error shapes.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - No IO, no async: the shell awaits, the core decides

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
