"""rpcgate — typed procedure dispatch behind a FastAPI shell.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
