"""
Data-quality reporting shared by the adapters.

Adapters never raise on vendor data. Unknown tags, invalid records and
orphaned sublocations are recovered locally and reported here, to the log
and to the optional observability sink. Reporting never changes what an
adapter returns.
"""

import logging
from enum import Enum
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from storage_sync.domain.storage.errors import UnknownTagFallback
from storage_sync.domain.storage.ports import ObservabilitySink

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

DATA_CATEGORY = "data"


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _breadcrumb(
    sink: Optional[ObservabilitySink], message: str, data: dict[str, Any]
) -> None:
    if sink is None:
        return
    try:
        sink.record_breadcrumb(message, category=DATA_CATEGORY, data=data)
    except Exception as exc:
        logger.warning("Observability sink record_breadcrumb failed: %s", exc)


def report_fallback(
    sink: Optional[ObservabilitySink], event: Optional[UnknownTagFallback]
) -> None:
    """Report a tag substitution. ``None`` means no substitution happened."""
    if event is None:
        return
    logger.warning("Unknown tag fallback: %s", event.message)
    _breadcrumb(
        sink,
        "unknown tag fallback",
        {
            "field": event.field,
            "raw_value": _plain(event.raw_value),
            "fallback": _plain(event.fallback),
        },
    )


def report_dropped(
    sink: Optional[ObservabilitySink],
    kind: str,
    record_id: Any,
    reason: str,
) -> None:
    """Report a record left out of the adapted result."""
    logger.warning("Dropped %s %s: %s", kind, record_id, reason)
    _breadcrumb(
        sink,
        f"dropped {kind}",
        {"kind": kind, "id": record_id, "reason": reason},
    )


def _record_id(record: Any) -> Any:
    if isinstance(record, dict):
        for key in ("id", "physicalLocationId", "sublocationId"):
            if key in record:
                return record[key]
    return None


def validate_records(
    schema: type[M],
    records: Any,
    *,
    kind: str,
    sink: Optional[ObservabilitySink] = None,
) -> list[M]:
    """Validate raw records one by one, skipping and reporting invalid ones.

    Args:
        schema: Pydantic schema for a single record.
        records: The raw list. None yields an empty list.
        kind: Record kind used in reports, e.g. ``"sublocation"``.
        sink: Optional observability sink.

    Returns:
        Validated records in input order.
    """
    if records is None:
        return []
    if not isinstance(records, list):
        report_dropped(sink, kind, None, "expected a list of records")
        return []

    valid: list[M] = []
    for record in records:
        try:
            valid.append(schema.model_validate(record))
        except ValidationError as exc:
            report_dropped(
                sink,
                kind,
                _record_id(record),
                f"invalid record ({exc.error_count()} errors)",
            )
    return valid
