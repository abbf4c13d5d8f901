"""
Resource unwrapping and delete confirmations.

CRUD endpoints nest their payload under a resource key inside the
envelope data, e.g. ``{"physical": {...}}`` or ``{"sublocation": {...}}``.
"""

from typing import Any

from pydantic import ValidationError

from storage_sync.application.storage.dtos import DeleteResult
from storage_sync.domain.storage.errors import ProtocolViolation
from storage_sync.interfaces.storage.schemas import RawDeleteConfirmation


def unwrap_resource(data: Any, key: str) -> Any:
    """Return ``data[key]`` when present, otherwise ``data`` unchanged."""
    if isinstance(data, dict) and key in data:
        return data[key]
    return data


def adapt_delete_result(data: Any, key: str) -> DeleteResult:
    """Adapt ``{key: {deletedCount, locationIds | sublocationIds}}``.

    Raises:
        ProtocolViolation: If the confirmation is malformed.
    """
    record = unwrap_resource(data, key)
    try:
        raw = RawDeleteConfirmation.model_validate(record)
    except ValidationError as exc:
        raise ProtocolViolation(
            f"invalid delete confirmation ({exc.error_count()} errors)"
        ) from exc
    return DeleteResult(deleted_count=raw.deleted_count, deleted_ids=tuple(raw.ids))
