"""Map store failures onto the few outcomes the like flow cares about."""
import enum

from sqlalchemy.exc import DBAPIError, NoResultFound

# Message fragments emitted by sqlite, postgres and mysql on unique violations
UNIQUE_VIOLATION_MARKERS = (
    "UNIQUE constraint",
    "duplicate key",
    "violates unique constraint",
    "Duplicate entry",
)

PG_UNIQUE_VIOLATION = "23505"
MYSQL_DUP_ENTRY = 1062
SQLITE_UNIQUE_ERRORS = ("SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY")


class StoreOutcome(enum.Enum):
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    OTHER = "other"


def _driver_error(exc: BaseException) -> BaseException:
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return exc.orig
    return exc


def _structured_outcome(error: BaseException) -> StoreOutcome | None:
    sqlstate = getattr(error, "sqlstate", None) or getattr(error, "pgcode", None)
    if sqlstate:
        return StoreOutcome.CONFLICT if sqlstate == PG_UNIQUE_VIOLATION else StoreOutcome.OTHER

    errorname = getattr(error, "sqlite_errorname", None)
    if errorname:
        return StoreOutcome.CONFLICT if errorname in SQLITE_UNIQUE_ERRORS else StoreOutcome.OTHER

    args = getattr(error, "args", ())
    if args and isinstance(args[0], int) and error.__class__.__module__.startswith(("pymysql", "aiomysql", "MySQLdb")):
        return StoreOutcome.CONFLICT if args[0] == MYSQL_DUP_ENTRY else StoreOutcome.OTHER

    return None


def classify_store_error(exc: BaseException) -> StoreOutcome:
    """Prefer the driver's structured code, fall back to message inspection."""
    if isinstance(exc, NoResultFound):
        return StoreOutcome.NOT_FOUND

    error = _driver_error(exc)
    outcome = _structured_outcome(error)
    if outcome is not None:
        return outcome

    message = str(exc)
    if any(marker in message for marker in UNIQUE_VIOLATION_MARKERS):
        return StoreOutcome.CONFLICT
    return StoreOutcome.OTHER
