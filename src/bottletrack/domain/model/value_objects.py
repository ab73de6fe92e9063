"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

from bottletrack.domain.exceptions import ValidationError

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def is_identifier(raw: object) -> bool:
    """Order numbers, item ids and deco codes are non-empty strings or ints.

    They are matched as given, so a stored number only matches a number.
    """
    if isinstance(raw, bool):
        return False
    if isinstance(raw, int):
        return True
    return isinstance(raw, str) and raw != ""


def coerce_count(raw: object) -> int:
    """Read an integer-like value the tolerant way.

    Ints pass through, finite floats truncate toward zero and strings
    yield their leading run of digits (``"12abc"`` -> 12).  Anything that
    does not start with a number counts as zero instead of being rejected.
    """
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else 0
    if isinstance(raw, str):
        match = _LEADING_INT.match(raw)
        return int(match.group(1)) if match else 0
    return 0


@dataclass(frozen=True)
class ProgressUpdate:
    """One bottle's share of a progress batch.

    ``total_completed`` is the caller's authoritative cumulative total;
    ``quantity_produced`` and ``stock_used`` are the deltas of this update.
    """

    deco_no: str
    quantity_produced: int = 0
    stock_used: int = 0
    total_completed: int = 0
    notes: str = ""

    def __post_init__(self) -> None:
        if not is_identifier(self.deco_no):
            raise ValidationError("Each update requires a deco_no (string or integer)")
        for name in ("quantity_produced", "stock_used", "total_completed"):
            if getattr(self, name) < 0:
                raise ValidationError(
                    f"{name} cannot be negative for deco_no {self.deco_no}"
                )

    def expected_total(self, previous_completed: int) -> int:
        """Total implied by the previous total plus this update's deltas."""
        return previous_completed + self.quantity_produced + self.stock_used

    @property
    def has_activity(self) -> bool:
        return self.quantity_produced > 0 or self.stock_used > 0

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(
        deco_no: object,
        quantity_produced: object = None,
        stock_used: object = None,
        total_completed: object = None,
        notes: object = None,
    ) -> ProgressUpdate:
        """Build an update from loosely typed input, coercing the counts."""
        return ProgressUpdate(
            deco_no=deco_no,  # type: ignore[arg-type]
            quantity_produced=coerce_count(quantity_produced),
            stock_used=coerce_count(stock_used),
            total_completed=coerce_count(total_completed),
            notes=str(notes) if notes else "",
        )
