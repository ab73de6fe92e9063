"""JSON-file-backed implementation of DatasetRepository."""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
import threading
from collections.abc import Iterator
from datetime import datetime, timezone
from pathlib import Path

try:  # pragma: no cover - Windows fallback
    import fcntl
except ImportError:  # pragma: no cover
    fcntl = None

from bottletrack.application.dto import order_record
from bottletrack.domain.model.dataset import Dataset
from bottletrack.domain.model.order import (
    Bottle,
    Item,
    Order,
    ProductionStatus,
    TrackingEntry,
)
from bottletrack.domain.model.value_objects import coerce_count
from bottletrack.domain.repository.dataset_repository import (
    DatasetRepository,
    LoadOutcome,
    LoadResult,
)

logger = logging.getLogger(__name__)

_ORDER_FIELDS = {"order_number", "order_status", "items"}
_ITEM_FIELDS = {"_id", "bottle"}
_BOTTLE_FIELDS = {
    "deco_no",
    "bottle_name",
    "quantity",
    "completed_qty",
    "inventory_used",
    "available_stock",
    "status",
    "tracking_status",
}
_ENTRY_FIELDS = {
    "date",
    "quantity_produced",
    "stock_used",
    "total_completed",
    "notes",
    "updated_by",
    "previous_completed",
}

# One writer lock per dataset file, shared by every repository instance.
_writer_locks: dict[str, threading.Lock] = {}
_writer_locks_guard = threading.Lock()


def _writer_lock_for(file_path: Path) -> threading.Lock:
    key = str(file_path.resolve())
    with _writer_locks_guard:
        return _writer_locks.setdefault(key, threading.Lock())


@contextlib.contextmanager
def _file_lock(lock_path: Path) -> Iterator[None]:
    """Cross-process advisory lock; a no-op where ``fcntl`` is missing."""
    if fcntl is None:
        yield
        return

    lock_path.parent.mkdir(parents=True, exist_ok=True)
    with lock_path.open("a") as lock_file:
        fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)


class JsonDatasetRepository(DatasetRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = Path(file_path)
        self._lock_path = self._file_path.with_suffix(self._file_path.suffix + ".lock")

    # --- DatasetRepository interface ------------------------------------------

    def load(self) -> LoadResult:
        try:
            text = self._file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("No dataset at %s yet; starting empty", self._file_path)
            return LoadResult(LoadOutcome.EMPTY)
        except (OSError, UnicodeDecodeError) as exc:
            return self._unreadable(exc)

        try:
            dataset = self._to_domain(json.loads(text))
        except (ValueError, TypeError, KeyError, AttributeError) as exc:
            return self._unreadable(exc)
        return LoadResult(LoadOutcome.LOADED, dataset)

    def save(self, dataset: Dataset) -> bool:
        try:
            text = json.dumps(self._to_raw(dataset), indent=2, ensure_ascii=False)
            self._write_atomic(text + "\n")
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Error writing dataset %s: %s", self._file_path, exc)
            return False
        return True

    @contextlib.contextmanager
    def lock(self) -> Iterator[None]:
        with _writer_lock_for(self._file_path), _file_lock(self._lock_path):
            yield

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(dataset: Dataset) -> dict:
        raw = {"orders": [order_record(order) for order in dataset.orders]}
        raw.update(dataset.extra)
        return raw

    @classmethod
    def _to_domain(cls, raw: dict) -> Dataset:
        orders = raw["orders"]
        if not isinstance(orders, list):
            raise TypeError("'orders' must be a list")
        return Dataset(
            orders=[cls._order_to_domain(o) for o in orders],
            extra=_extra(raw, {"orders"}),
        )

    @classmethod
    def _order_to_domain(cls, raw: dict) -> Order:
        return Order(
            order_number=raw["order_number"],
            items=[cls._item_to_domain(i) for i in raw.get("items") or []],
            order_status=ProductionStatus.parse(raw.get("order_status")),
            extra=_extra(raw, _ORDER_FIELDS),
        )

    @classmethod
    def _item_to_domain(cls, raw: dict) -> Item:
        return Item(
            id=raw["_id"],
            bottles=[cls._bottle_to_domain(b) for b in raw.get("bottle") or []],
            extra=_extra(raw, _ITEM_FIELDS),
        )

    @classmethod
    def _bottle_to_domain(cls, raw: dict) -> Bottle:
        return Bottle(
            deco_no=raw["deco_no"],
            bottle_name=raw.get("bottle_name", ""),
            quantity=coerce_count(raw.get("quantity")),
            completed_qty=coerce_count(raw.get("completed_qty")),
            inventory_used=coerce_count(raw.get("inventory_used")),
            available_stock=coerce_count(raw.get("available_stock")),
            tracking_status=[
                cls._entry_to_domain(e) for e in raw.get("tracking_status") or []
            ],
            extra=_extra(raw, _BOTTLE_FIELDS),
        )

    @staticmethod
    def _entry_to_domain(raw: dict) -> TrackingEntry:
        # A date that does not parse stays in extra and is written back as-is.
        date = _parse_timestamp(raw.get("date"))
        known = _ENTRY_FIELDS if date is not None else _ENTRY_FIELDS - {"date"}
        return TrackingEntry(
            date=date,
            quantity_produced=coerce_count(raw.get("quantity_produced")),
            stock_used=coerce_count(raw.get("stock_used")),
            total_completed=coerce_count(raw.get("total_completed")),
            notes=raw.get("notes") or "",
            updated_by=raw.get("updated_by") or "",
            previous_completed=coerce_count(raw.get("previous_completed")),
            extra=_extra(raw, known),
        )

    # --- File helpers ---------------------------------------------------------

    def _unreadable(self, exc: Exception) -> LoadResult:
        logger.error("Error reading dataset %s: %s", self._file_path, exc)
        return LoadResult(LoadOutcome.UNREADABLE, error=str(exc))

    def _write_atomic(self, text: str) -> None:
        """Write to a temp file next to the target, then rename over it."""
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=str(self._file_path.parent),
            prefix=f".{self._file_path.name}.",
            suffix=".tmp",
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(text)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_path, self._file_path)
        finally:
            if tmp_path.exists():
                with contextlib.suppress(FileNotFoundError):
                    tmp_path.unlink()


def _extra(raw: dict, known: set[str]) -> dict:
    return {key: value for key, value in raw.items() if key not in known}


def _parse_timestamp(raw: object) -> datetime | None:
    if not isinstance(raw, str):
        return None
    try:
        moment = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment
