"""Abstract repository for the order Dataset.

Defined in the domain layer so the domain never depends on
infrastructure.  The dataset is always loaded and stored as a whole.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from enum import Enum

from bottletrack.domain.model.dataset import Dataset


class LoadOutcome(Enum):
    LOADED = "LOADED"
    EMPTY = "EMPTY"  # nothing persisted yet
    UNREADABLE = "UNREADABLE"  # persisted data exists but cannot be used


@dataclass(frozen=True)
class LoadResult:
    outcome: LoadOutcome
    dataset: Dataset = field(default_factory=Dataset)
    error: str | None = None

    @property
    def is_readable(self) -> bool:
        return self.outcome is not LoadOutcome.UNREADABLE


class DatasetRepository(ABC):

    @abstractmethod
    def load(self) -> LoadResult:
        """Load the whole dataset.  Never raises; failures are tagged."""

    @abstractmethod
    def save(self, dataset: Dataset) -> bool:
        """Overwrite the persisted dataset.  Returns False on failure."""

    @abstractmethod
    def lock(self) -> AbstractContextManager[None]:
        """Exclusive ownership of the dataset for a load-mutate-save cycle."""
