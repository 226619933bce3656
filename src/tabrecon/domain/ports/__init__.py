"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import BatchRowRepository, UploadRepository
from .unit_of_work import (
    BatchStoreRepositories,
    BatchStoreUnitOfWork,
    BatchStoreUnitOfWorkFactory,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "BatchRowRepository",
    "BatchStoreRepositories",
    "BatchStoreUnitOfWork",
    "BatchStoreUnitOfWorkFactory",
    "RepositoryCollection",
    "UnitOfWork",
    "UploadRepository",
]
