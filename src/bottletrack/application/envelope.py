"""Response envelope: transport-neutral success/failure bodies.

Whatever sits in front of the use cases (the CLI today, an HTTP layer
tomorrow) gets a body in the ``{"success": ...}`` shape plus a status
code it can map onto its own transport.  This is also the boundary where
unexpected exceptions stop: they are logged in full and reported with a
generic message only.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from bottletrack.application.apply_progress import ApplyProgressHandler
from bottletrack.application.dto import (
    ProgressRequest,
    ProgressResult,
    format_timestamp,
    order_record,
    summary_record,
)
from bottletrack.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Bottle progress updated successfully"
INTERNAL_ERROR_MESSAGE = "Internal server error"


class ErrorCategory(Enum):
    BAD_REQUEST = 400
    NOT_FOUND = 404
    INTERNAL = 500

    @property
    def status_code(self) -> int:
        return self.value


def categorize(exc: Exception) -> ErrorCategory:
    if isinstance(exc, ValidationError):
        return ErrorCategory.BAD_REQUEST
    if isinstance(exc, EntityNotFoundError):
        return ErrorCategory.NOT_FOUND
    return ErrorCategory.INTERNAL


@dataclass(frozen=True)
class Envelope:
    status_code: int
    body: dict

    @property
    def success(self) -> bool:
        return bool(self.body.get("success"))


def success_envelope(result: ProgressResult) -> Envelope:
    return Envelope(
        status_code=200,
        body={
            "success": True,
            "message": SUCCESS_MESSAGE,
            "order": order_record(result.order),
            "updates": [summary_record(s) for s in result.updates],
            "timestamp": format_timestamp(result.timestamp),
        },
    )


def failure_envelope(exc: Exception) -> Envelope:
    category = categorize(exc)
    if not isinstance(exc, DomainException):
        return Envelope(
            status_code=category.status_code,
            body={"success": False, "message": INTERNAL_ERROR_MESSAGE},
        )

    body: dict = {"success": False, "message": str(exc)}
    detail = exc.detail()
    if detail is not None:
        body["error"] = detail
    return Envelope(status_code=category.status_code, body=body)


def apply_progress_payload(
    handler: ApplyProgressHandler, payload: Mapping | object
) -> Envelope:
    """Parse a request body, run the batch and wrap the outcome."""
    try:
        request = ProgressRequest.from_payload(payload)
        result = handler.handle(request.order_number, request.item_id, request.updates)
    except DomainException as exc:
        return failure_envelope(exc)
    except Exception as exc:
        logger.exception("Error updating bottle progress")
        return failure_envelope(exc)
    return success_envelope(result)
