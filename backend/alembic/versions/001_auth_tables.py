"""Create users and auth_sessions tables.

Revision ID: 001_auth_tables
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '001_auth_tables'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=True, unique=True),
        sa.Column('email_verified', sa.DateTime(timezone=True), nullable=True),
        sa.Column('image', sa.Text(), nullable=True),
        sa.Column(
            'created_at', sa.DateTime(timezone=True), nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_table(
        'auth_sessions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('session_token', sa.String(255), nullable=False),
        sa.Column(
            'user_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('expires', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        'ix_auth_sessions_session_token', 'auth_sessions',
        ['session_token'], unique=True,
    )


def downgrade() -> None:
    op.drop_index('ix_auth_sessions_session_token', table_name='auth_sessions')
    op.drop_table('auth_sessions')
    op.drop_table('users')
