"""AuthSession ORM — opaque session token issued by the auth provider.

Invariants:
    - session_token is unique and indexed (looked up on every call)
    - Deleting a user deletes their sessions (ON DELETE CASCADE)
    - expires is compared in UTC; rows past expiry are treated as absent
"""

import uuid
from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from rpcgate.db.base import Base


class AuthSession(Base):
    """One row per signed-in browser/device."""
    __tablename__ = "auth_sessions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    session_token: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    expires: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
