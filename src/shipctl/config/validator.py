"""Validation utilities for shipctl settings."""

from pydantic import ValidationError as PydanticValidationError

# Error types whose offending input is worth echoing back to the operator
_ECHO_INPUT_TYPES = frozenset(
    {"value_error", "greater_than", "float_parsing", "string_type", "extra_forbidden"}
)


def flatten_pydantic_errors(exc: PydanticValidationError) -> list[str]:
    """Flatten a Pydantic ValidationError into one message per field.

    Args:
        exc: Pydantic ValidationError raised while validating settings

    Returns:
        Human-readable messages such as
        ``"Field 'poll_interval': Input should be greater than 0 (received: -1)"``
    """
    errors: list[str] = []

    for error in exc.errors():
        loc = error.get("loc", ())
        field_path = ".".join(str(item) for item in loc) if loc else "settings"
        msg = error.get("msg", "Unknown error")

        if error.get("type", "") in _ECHO_INPUT_TYPES:
            errors.append(
                f"Field '{field_path}': {msg} (received: {error.get('input')!r})"
            )
        else:
            errors.append(f"Field '{field_path}': {msg}")

    return errors or ["Settings validation failed with unknown error"]
