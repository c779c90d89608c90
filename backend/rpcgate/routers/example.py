"""Example Router — greeting query plus two protected queries.

Invariants:
    - hello accepts any string, including empty; output is {"greeting": "Hello " + text}
    - get_secret_message and whoami only run for a signed-in user
"""

from rpcgate.core.context import AnonymousContext, AuthenticatedContext
from rpcgate.core.procedure import protected_procedure, public_procedure
from rpcgate.core.registry import create_router
from rpcgate.core.validation import InputSchema


class HelloInput(InputSchema):
    text: str


async def hello(ctx: AnonymousContext, input: HelloInput) -> dict:
    return {"greeting": f"Hello {input.text}"}


async def get_secret_message(ctx: AuthenticatedContext, input: None) -> str:
    return "you can now see this secret message!"


async def whoami(ctx: AuthenticatedContext, input: None) -> dict:
    user = ctx.session.user
    return {"id": user.id, "name": user.name, "email": user.email, "image": user.image}


example_router = create_router({
    "hello": public_procedure.input(HelloInput).query(hello),
    "get_secret_message": protected_procedure.query(get_secret_message),
    "whoami": protected_procedure.query(whoami),
})
