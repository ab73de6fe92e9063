"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI and the response envelope can catch them uniformly.  Each error
knows which record it refers to via ``detail()``.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""

    def detail(self) -> dict | None:
        """Identifying fields of the offending record, if any."""
        return None


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class OrderNotFoundError(EntityNotFoundError):

    def __init__(self, order_number: str) -> None:
        super().__init__("Order not found")
        self.order_number = order_number

    def detail(self) -> dict:
        return {"order_number": self.order_number}


class ItemNotFoundError(EntityNotFoundError):

    def __init__(self, order_number: str, item_id: str) -> None:
        super().__init__("Item not found in order")
        self.order_number = order_number
        self.item_id = item_id

    def detail(self) -> dict:
        return {"order_number": self.order_number, "item_id": self.item_id}


class SubItemNotFoundError(EntityNotFoundError):

    def __init__(self, deco_no: str) -> None:
        super().__init__(f"Bottle with deco_no {deco_no} not found")
        self.deco_no = deco_no

    def detail(self) -> dict:
        return {"deco_no": self.deco_no}


class QuantityExceededError(ValidationError):
    """A cumulative completed total larger than the ordered quantity."""

    def __init__(
        self, deco_no: str, bottle_name: str, total_completed: int, quantity: int
    ) -> None:
        super().__init__(
            f"Total completed quantity ({total_completed}) cannot exceed "
            f"order quantity ({quantity}) for {bottle_name}"
        )
        self.deco_no = deco_no
        self.total_completed = total_completed
        self.quantity = quantity

    def detail(self) -> dict:
        return {
            "deco_no": self.deco_no,
            "total_completed": self.total_completed,
            "quantity": self.quantity,
        }


class PersistenceError(DomainException):
    """The dataset could not be written after validation succeeded."""


class DatasetUnreadableError(PersistenceError):
    """The persisted dataset exists but could not be read.

    Raised instead of mutating so a corrupt file is never overwritten with
    a near-empty dataset.
    """
