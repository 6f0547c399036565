from __future__ import annotations

from typing import Any
from uuid import UUID

from review_dispatch.kernel.errors import ValidationError


def parse_uuid(value: Any, *, field: str) -> UUID:
    """Parse a caller-supplied identifier, rejecting blanks and malformed values.

    Raises `ValidationError` so malformed ids never reach the database.
    """
    if isinstance(value, UUID):
        return value
    if value is None or not str(value).strip():
        raise ValidationError(
            code=f"request.missing_{field}",
            message=f"Missing required field: {field}.",
        )
    try:
        return UUID(str(value).strip())
    except ValueError as exc:
        raise ValidationError(
            code=f"request.invalid_{field}",
            message=f"Invalid value for {field}: {value!r} is not a UUID.",
        ) from exc
