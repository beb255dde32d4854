"""Error taxonomy shared by services and the API layer.

Store failures are mapped to ``TransientStoreError`` with a closed
``StoreErrorKind`` at the persistence boundary, so callers never inspect
driver-specific exception types or messages.
"""
import enum
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import exc as sa_exc


class StoreErrorKind(str, enum.Enum):
    UNAVAILABLE = "unavailable"
    PERMISSION_DENIED = "permission_denied"
    FAILED_PRECONDITION = "failed_precondition"
    CONFLICT = "conflict"
    UNKNOWN = "unknown"


class AppError(Exception):
    """Base class for errors surfaced to the caller."""

    kind = "error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(AppError):
    kind = "validation"


class NotFoundError(AppError):
    kind = "not_found"


class TransientStoreError(AppError):
    def __init__(self, detail: str, kind: StoreErrorKind = StoreErrorKind.UNKNOWN):
        super().__init__(detail)
        self.store_kind = kind

    @property
    def kind(self) -> str:  # type: ignore[override]
        return self.store_kind.value


# pgcode prefixes (SQLSTATE classes) that carry a precise meaning for us
_PG_PERMISSION = "42501"
_PG_UNDEFINED_OBJECT_CLASS = "42"


def map_store_error(error: Exception) -> TransientStoreError:
    """Translate a SQLAlchemy/driver exception into a ``TransientStoreError``."""
    if isinstance(error, TransientStoreError):
        return error
    orig = getattr(error, "orig", None)
    pgcode = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if pgcode == _PG_PERMISSION:
        kind = StoreErrorKind.PERMISSION_DENIED
    elif isinstance(error, sa_exc.IntegrityError):
        kind = StoreErrorKind.CONFLICT
    elif isinstance(error, sa_exc.ProgrammingError) and (pgcode or "").startswith(_PG_UNDEFINED_OBJECT_CLASS):
        kind = StoreErrorKind.FAILED_PRECONDITION
    elif isinstance(error, (sa_exc.OperationalError, sa_exc.InterfaceError, sa_exc.TimeoutError, OSError)):
        kind = StoreErrorKind.UNAVAILABLE
    else:
        kind = StoreErrorKind.UNKNOWN
    return TransientStoreError(f"Store operation failed: {error.__class__.__name__}", kind)


@contextmanager
def store_errors() -> Iterator[None]:
    """Re-raise store exceptions as ``TransientStoreError``."""
    try:
        yield
    except (sa_exc.SQLAlchemyError, OSError) as e:
        raise map_store_error(e) from e
