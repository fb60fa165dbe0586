from typing import Any, Mapping, Optional


class CatalogError(Exception):
    """Base class for every failure raised by the catalog repositories and services.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (ids, species, field names)
        code: machine-readable error code
        http_status: suggested HTTP status code for handlers. All catalog
            errors share 400; callers distinguish them by type or ``code``.
    """

    http_status = 400
    default_message = "Catalog operation failed"
    default_code = "CATALOG_ERROR"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Mapping[str, Any]] = None,
        code: Optional[str] = None,
    ):
        self.message = message or self.default_message
        super().__init__(self.message)
        self.details = details
        self.code = code or self.default_code

    def __str__(self) -> str:
        return self.message


class AlreadyExistsError(CatalogError):
    """Raised when a write would duplicate a natural key (ingredient name, product tuple)."""

    default_message = "Already exists"
    default_code = "ALREADY_EXISTS"


class NotFoundError(CatalogError):
    """Raised when an ingredient or product id does not resolve."""

    default_message = "Not found"
    default_code = "NOT_FOUND"


class NoUpdatesProvidedError(CatalogError):
    """Raised when an update payload is empty once unset fields are dropped."""

    default_message = "No updates provided"
    default_code = "NO_UPDATES_PROVIDED"


class IncompleteSizeDetailsError(CatalogError):
    """Raised when a size sub-record is missing packaging, price, count or unit."""

    default_message = "Incomplete size details"
    default_code = "INCOMPLETE_SIZE_DETAILS"


class RatingAlreadyExistsError(CatalogError):
    """Raised when an ingredient already has a rating for the given species."""

    default_message = "Rating already exists"
    default_code = "RATING_ALREADY_EXISTS"


class RatingNotFoundError(CatalogError):
    """Raised when an ingredient has no rating for the given species."""

    default_message = "Rating not found"
    default_code = "RATING_NOT_FOUND"


class SizeNotFoundError(CatalogError):
    """Raised when a product has no size sub-record with the given id."""

    default_message = "Size not found"
    default_code = "SIZE_NOT_FOUND"


class ServiceValidationError(CatalogError):
    """Raised when input data is invalid or a precondition for a service call is not met."""

    default_message = "Invalid input"
    default_code = "SERVICE_VALIDATION_ERROR"


class ReconciliationError(CatalogError):
    """Raised when ingredient reconciliation fails and strict reconciliation is enabled."""

    default_message = "Ingredient reconciliation failed"
    default_code = "RECONCILIATION_FAILED"
