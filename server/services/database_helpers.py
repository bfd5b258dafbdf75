# server/services/database_helpers.py
"""Mapping helpers between stored rows and record schemas"""
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError as SchemaError
from pydantic_core import to_jsonable_python

from utils.exceptions import ValidationError
from core.logger import get_logger

logger = get_logger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def to_record(schema: Type[RecordT], row: Any, resource: str) -> RecordT:
    """
    Validate a stored row against its record schema.

    Malformed documents fail here instead of leaking partial data to the
    dashboards.

    Raises:
        ValidationError: If the stored row does not match the schema
    """
    try:
        return schema.model_validate(row)
    except SchemaError as e:
        row_id = getattr(row, "id", None)
        logger.error(f"Malformed {resource} document {row_id}: {e}")
        raise ValidationError(
            f"Malformed {resource} document: {row_id}",
            {"errors": e.errors(include_url=False, include_input=False)}
        )


def to_json(value: Any) -> Any:
    """
    Pydantic models, dicts and lists to JSON-ready data for JSON columns.
    Scalars (including datetimes for DateTime columns) pass through.
    """
    if isinstance(value, (BaseModel, dict, list, tuple)):
        return to_jsonable_python(value, exclude_none=True)
    return value


def dedupe(items: list) -> list:
    """Order-preserving de-duplication (set union semantics for id lists)."""
    return list(dict.fromkeys(items))


def apply_updates(row: Any, updates: dict, allowed: Optional[set] = None) -> list[str]:
    """
    Copy the given fields onto a row, returning the names that changed.
    JSON-valued fields are converted with to_json.
    """
    changed = []
    for field, value in updates.items():
        if allowed is not None and field not in allowed:
            continue
        setattr(row, field, to_json(value))
        changed.append(field)
    return changed
