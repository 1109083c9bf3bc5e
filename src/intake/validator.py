"""Step payload validation.

``validate`` runs the closed pydantic shape for the requested step and turns
every pydantic error into a :class:`FieldError`, so callers can show all
problems at once instead of the first one.
"""

from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, ValidationError

from shared.schemas.steps import STEP_MODELS

from .errors import FieldError, StepValidationError
from .steps import STEP_BY_NUMBER


def _field_path(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "__root__"


def _reason(err: dict) -> str:
    msg = err.get("msg", "invalid value")
    # pydantic prefixes custom ValueError messages
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    return msg


def field_errors(exc: ValidationError) -> List[FieldError]:
    return [FieldError(_field_path(err["loc"]), _reason(err)) for err in exc.errors()]


def validate(step: int, raw: Any, *, skip: bool = False) -> BaseModel:
    """Validate ``raw`` for ``step`` and return the typed payload.

    ``skip=True`` is the explicit skip path for skippable steps (3 and 7): the
    body is ignored and the empty default payload is returned.

    Raises
    ------
    StepValidationError
        Listing every violated constraint.
    """
    definition = STEP_BY_NUMBER.get(step)
    if definition is None:
        raise StepValidationError([FieldError("step", f"step must be between 1 and {len(STEP_MODELS)}, got {step}")])

    model = STEP_MODELS[step]
    if skip:
        if not definition.skippable:
            raise StepValidationError([FieldError("step", f"step {step} cannot be skipped")])
        return model()

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise StepValidationError([FieldError("__root__", "payload must be a JSON object")])

    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise StepValidationError(field_errors(e)) from None
