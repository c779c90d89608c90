"""ORM Models — the tables the session resolver reads.

Invariants:
    - All models inherit from Base (db/base.py)
    - Schema covers session lookup only; sign-in flows live in the auth provider

Design Decisions:
    - All models imported here so Base.metadata is complete before create_all/autogenerate
"""

from rpcgate.models.user import User  # noqa: F401
from rpcgate.models.auth_session import AuthSession  # noqa: F401
