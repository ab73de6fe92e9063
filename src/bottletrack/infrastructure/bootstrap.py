"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from bottletrack.application.apply_progress import ApplyProgressHandler
from bottletrack.infrastructure import settings
from bottletrack.infrastructure.persistence.json_dataset_repository import (
    JsonDatasetRepository,
)


def dataset_repository() -> JsonDatasetRepository:
    return JsonDatasetRepository(settings.data_file())


def apply_progress_handler() -> ApplyProgressHandler:
    return ApplyProgressHandler(
        dataset_repo=dataset_repository(),
        updated_by=settings.updated_by(),
    )
