# cakestore/domain/errors.py
from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    AUTH = "auth"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"
    DATASTORE = "datastore"


class StoreError(Exception):
    """
    Base for every error the services raise on purpose.
    Routers and exception handlers switch on `kind`/`code`, never on message text.
    """

    kind: ErrorKind = ErrorKind.DATASTORE
    status_code: int = 500
    default_code: str = "Error"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class ValidationError(StoreError):
    kind = ErrorKind.VALIDATION
    status_code = 400
    default_code = "ValidationError"


class NotFoundError(StoreError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404
    default_code = "NotFound"


class AuthError(StoreError):
    kind = ErrorKind.AUTH
    status_code = 401
    default_code = "AuthError"


class ForbiddenError(StoreError):
    kind = ErrorKind.FORBIDDEN
    status_code = 403
    default_code = "Forbidden"


class ConflictError(StoreError):
    # duplicates are reported as 400 to clients
    kind = ErrorKind.CONFLICT
    status_code = 400
    default_code = "Conflict"


class DatastoreError(StoreError):
    kind = ErrorKind.DATASTORE
    status_code = 500
    default_code = "DatastoreError"


#codes used by the order and review workflows
PRODUCT_NOT_FOUND = "ProductNotFound"
INSUFFICIENT_STOCK = "InsufficientStock"
NOT_PURCHASED = "NotPurchased"
DUPLICATE_REVIEW = "DuplicateReview"
