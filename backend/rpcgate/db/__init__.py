"""Database Infrastructure — SQLAlchemy Base shared by every ORM model.

Invariants:
    - All sessions are async (AsyncSession)
"""
