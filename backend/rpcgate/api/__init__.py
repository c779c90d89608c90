"""API Layer — FastAPI transport adapter and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every response body is a result or error envelope

Design Decisions:
    - Thin routes delegate to RpcRouter.dispatch (ADR: impureim sandwich)
"""
