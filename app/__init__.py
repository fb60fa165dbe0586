"""
App package - Application configuration and core utilities.
Contains settings, exceptions, and foundational application code.
"""

from app.config import settings
from app.exceptions import (
    CatalogError,
    AlreadyExistsError,
    NotFoundError,
    NoUpdatesProvidedError,
    IncompleteSizeDetailsError,
    RatingAlreadyExistsError,
    RatingNotFoundError,
    SizeNotFoundError,
    ServiceValidationError,
    ReconciliationError,
)

__all__ = [
    "settings",
    "CatalogError",
    "AlreadyExistsError",
    "NotFoundError",
    "NoUpdatesProvidedError",
    "IncompleteSizeDetailsError",
    "RatingAlreadyExistsError",
    "RatingNotFoundError",
    "SizeNotFoundError",
    "ServiceValidationError",
    "ReconciliationError",
]
