"""Input Validation — pure schema check run before any middleware or handler.

Invariants:
    - validate() is pure and synchronous: no IO, no context access
    - Strictness is declared on the schema (model_config), never chosen per call
    - InputSchema drops unknown fields and does not coerce types
    - Failures raise BadInputError with flattened diagnostics:
      {"formErrors": [...], "fieldErrors": {"dotted.path": [...]}}
    - A procedure without a schema accepts only absent input (None)

Design Decisions:
    - Pydantic v2 models as schemas: the handler receives a typed, frozen model
    - Dotted paths over nested dicts: one key per failing location, list indices
      included ("items.0")
"""

from typing import Any, Iterable, Mapping

from pydantic import BaseModel, ConfigDict, ValidationError

from rpcgate.core.domain_types import FlattenedErrors
from rpcgate.core.errors import BadInputError


class InputSchema(BaseModel):
    """Base class for procedure inputs: strict, immutable, unknown keys dropped.

    Subclasses may override model_config to opt into coercion or to reject
    extra fields; whatever they declare is the policy for that procedure.
    """
    model_config = ConfigDict(extra="ignore", strict=True, frozen=True)


def flatten_errors(errors: Iterable[Mapping[str, Any]]) -> FlattenedErrors:
    """Group pydantic error dicts by dotted location. Location-less errors are form errors."""
    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = {}
    for err in errors:
        path = ".".join(str(part) for part in err["loc"])
        if path:
            field_errors.setdefault(path, []).append(err["msg"])
        else:
            form_errors.append(err["msg"])
    return {"formErrors": form_errors, "fieldErrors": field_errors}


def flatten_validation_error(exc: ValidationError) -> FlattenedErrors:
    return flatten_errors(exc.errors())


def validate(schema: type[BaseModel] | None, raw_input: object) -> BaseModel | None:
    """Validate raw_input against schema. Raises BadInputError on violation."""
    if schema is None:
        if raw_input is not None:
            raise BadInputError.form_error("Procedure takes no input")
        return None
    try:
        return schema.model_validate(raw_input)
    except ValidationError as exc:
        raise BadInputError(flatten_validation_error(exc)) from exc
