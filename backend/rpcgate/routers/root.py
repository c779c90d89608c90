"""Root Router — mounts every procedure router under its namespace.

Invariants:
    - Adding a router requires editing app_router (explicit registration)
    - build_registry() returns a frozen registry
"""

from rpcgate.core.registry import ProcedureRegistry, create_router
from rpcgate.routers.example import example_router

app_router = create_router({
    "example": example_router,
})


def build_registry() -> ProcedureRegistry:
    registry = ProcedureRegistry()
    registry.include(app_router)
    registry.freeze()
    return registry
