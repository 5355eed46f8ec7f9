# =============================================================================
# core/validation.py - Form Validation
# =============================================================================
# Runs a submitted form group through its schema before anything touches
# the store. Failures become ValidationFailedError naming every offending
# field.
#
# Usage:
#   data = validate_input(CampgroundInput, {"title": "", ...})
# =============================================================================

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from app.exceptions import ValidationFailedError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _field_name(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) if loc else "body"


def validate_input(schema: type[ModelT], data: dict[str, Any]) -> ModelT:
    """
    Validate raw form data against a schema.

    Args:
        schema: Pydantic model class (CampgroundInput, ReviewInput, ...)
        data: Field -> raw value mapping taken from the request

    Returns:
        The validated model instance

    Raises:
        ValidationFailedError: With the offending field names and a
            message like "title: String should have at least 1 character"
    """
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        errors = e.errors()
        fields = []
        for err in errors:
            name = _field_name(err.get("loc", ()))
            if name not in fields:
                fields.append(name)
        message = "; ".join(f"{_field_name(err.get('loc', ()))}: {err['msg']}" for err in errors)
        logger.debug(f"{schema.__name__} rejected fields {fields}")
        raise ValidationFailedError(fields=fields, message=message)
