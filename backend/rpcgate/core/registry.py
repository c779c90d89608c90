"""Procedure Registry — name → Procedure map, written at startup, read-only afterwards.

Invariants:
    - register() is startup-only and single-writer; freeze() ends the write phase
    - Duplicate names and post-freeze registration raise ConfigurationError subclasses
    - resolve() never mutates; unknown names raise ProcedureNotFoundError
    - Router keys are non-empty and contain no "."; nesting produces dotted names

Design Decisions:
    - Explicit dict over decorators/auto-discovery: every name visible in one place
      (ADR: no convention-over-config)
    - MappingProxyType view: concurrent readers share one dict without locks
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Union

from rpcgate.core.errors import (
    ConfigurationError, DuplicateProcedureError,
    ProcedureNotFoundError, RegistryFrozenError,
)
from rpcgate.core.procedure import Procedure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcedureRouter:
    """Named group of procedures and sub-routers."""
    routes: Mapping[str, Union[Procedure, "ProcedureRouter"]]

    def flatten(self, prefix: str = "") -> dict[str, Procedure]:
        flat: dict[str, Procedure] = {}
        for key, route in self.routes.items():
            name = f"{prefix}.{key}" if prefix else key
            if isinstance(route, ProcedureRouter):
                flat.update(route.flatten(name))
            else:
                flat[name] = route
        return flat


def create_router(
    routes: Mapping[str, Union[Procedure, ProcedureRouter]],
) -> ProcedureRouter:
    """Group procedures under keys. Raises ConfigurationError on bad keys or values."""
    for key, route in routes.items():
        if not key or "." in key:
            raise ConfigurationError(f"Invalid route key: {key!r}")
        if not isinstance(route, (Procedure, ProcedureRouter)):
            raise ConfigurationError(
                f"Route '{key}' must be a Procedure or ProcedureRouter, "
                f"got {type(route).__name__}",
            )
    return ProcedureRouter(routes=MappingProxyType(dict(routes)))


class ProcedureRegistry:
    """Process-wide procedure table. Construct once, include routers, freeze."""

    def __init__(self):
        self._procedures: dict[str, Procedure] = {}
        self._view: Mapping[str, Procedure] = MappingProxyType(self._procedures)
        self._frozen = False

    def register(self, name: str, procedure: Procedure) -> None:
        if self._frozen:
            raise RegistryFrozenError(name)
        if name in self._procedures:
            raise DuplicateProcedureError(name)
        self._procedures[name] = procedure

    def include(self, router: ProcedureRouter, prefix: str = "") -> None:
        for name, procedure in router.flatten(prefix).items():
            self.register(name, procedure)

    def freeze(self) -> None:
        if not self._frozen:
            self._frozen = True
            logger.info(f"Procedure registry frozen with {len(self._view)} procedures")

    @property
    def frozen(self) -> bool:
        return self._frozen

    def resolve(self, name: str) -> Procedure:
        procedure = self._view.get(name)
        if procedure is None:
            raise ProcedureNotFoundError(name)
        return procedure

    def names(self) -> list[str]:
        return sorted(self._view)

    def __contains__(self, name: object) -> bool:
        return name in self._view

    def __len__(self) -> int:
        return len(self._view)
