"""Payload checks shared by the resource services."""

from typing import Any, Dict, Iterable

from keep_api.exceptions import ValidationError


def check_updatable_columns(changes: Dict[str, Any], allowed: Iterable[str]) -> None:
    """
    Reject empty partial-update payloads and any key outside `allowed`.

    Column names reach SQL only after passing this allow-list.
    """
    allowed = frozenset(allowed)
    if not changes:
        raise ValidationError(message="No fields to update were supplied")
    unknown = sorted(set(changes) - allowed)
    if unknown:
        raise ValidationError(
            message=f"Field '{unknown[0]}' cannot be updated",
            field=unknown[0],
            context={"allowed_fields": sorted(allowed)},
        )


# Primary keys are 32-bit signed INTEGER columns
MIN_ROW_ID = -(2**31)
MAX_ROW_ID = 2**31 - 1


def is_storable_id(value: int) -> bool:
    """False for ids no INTEGER primary key can hold; such rows cannot exist."""
    return MIN_ROW_ID <= value <= MAX_ROW_ID
