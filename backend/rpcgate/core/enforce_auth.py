"""Authorization Guard — narrows a context to AuthenticatedContext or stops the call.

Invariants:
    - PURE: no IO, no async
    - Missing session OR session without user → ShortCircuit(UNAUTHORIZED)
    - On success the returned context carries an AuthenticatedSession whose user
      is the resolver's user, unchanged
    - An already-authenticated context passes through as-is
"""

from rpcgate.core.chain_types import Continue, ChainOutcome, ShortCircuit, guard
from rpcgate.core.context import (
    AnonymousContext, AuthenticatedContext, AuthenticatedSession, Context,
)
from rpcgate.core.errors import UnauthorizedError


def narrow_to_authenticated(ctx: AnonymousContext) -> AuthenticatedContext | None:
    """Return the narrowed context, or None when there is no signed-in user."""
    session = ctx.session
    if session is None or session.user is None:
        return None
    return AuthenticatedContext(
        session=AuthenticatedSession(user=session.user, expires=session.expires),
        db=ctx.db,
        request_id=ctx.request_id,
    )


@guard
def enforce_user_is_authed(ctx: Context) -> ChainOutcome:
    if isinstance(ctx, AuthenticatedContext):
        return Continue(ctx)
    narrowed = narrow_to_authenticated(ctx)
    if narrowed is None:
        return ShortCircuit(UnauthorizedError())
    return Continue(narrowed)
