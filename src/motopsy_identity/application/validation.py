"""Small input checks shared by the application services."""

from motopsy_identity.exceptions import ValidationError


def parse_id(value: object, field: str = "id") -> int:
    """Coerce an externally supplied identifier to a positive int."""
    if isinstance(value, bool):
        msg = f"{field} must be an integer"
        raise ValidationError(msg)
    try:
        parsed = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError) as e:
        msg = f"{field} must be an integer"
        raise ValidationError(msg) from e
    if parsed <= 0:
        msg = f"{field} must be positive"
        raise ValidationError(msg)
    return parsed
