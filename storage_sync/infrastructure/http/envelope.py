"""
Response envelope validation.

Every backend response is wrapped as ``{success, data?, error?}``.
Validation runs on the wire-cased body before any key conversion, and a
violation is always raised, never returned as data.
"""

from typing import Any

from storage_sync.domain.storage.errors import ProtocolViolation, RemoteReportedFailure


def unwrap_envelope(payload: Any, status_code: int | None = None) -> dict | list:
    """Validate an envelope and return its ``data`` member.

    Checks run in order: the payload is an object, ``success`` is a boolean,
    a failed envelope carries its error, a successful one carries data.

    Args:
        payload: Decoded JSON body.
        status_code: HTTP status, attached to raised errors.

    Returns:
        The ``data`` member (a dict or a list).

    Raises:
        ProtocolViolation: If the envelope shape is wrong.
        RemoteReportedFailure: If the server reports ``success: false``.
    """
    if not isinstance(payload, dict):
        raise ProtocolViolation("envelope is not an object", status_code)

    success = payload.get("success")
    if not isinstance(success, bool):
        raise ProtocolViolation("missing success flag", status_code)

    if success is False:
        error = payload.get("error")
        if not isinstance(error, str):
            raise ProtocolViolation("missing error", status_code)
        raise RemoteReportedFailure(error, status_code)

    data = payload.get("data")
    if not isinstance(data, (dict, list)):
        raise ProtocolViolation("missing data", status_code)
    return data


def envelope_error(payload: Any) -> str | None:
    """Return the ``error`` string of a failed envelope, or None."""
    if isinstance(payload, dict) and payload.get("success") is False:
        error = payload.get("error")
        if isinstance(error, str):
            return error
    return None
