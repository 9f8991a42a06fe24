import sqlite3

import pytest
from sqlalchemy.exc import IntegrityError, NoResultFound, OperationalError

from likeable.services.like import StoreOutcome, classify_store_error


class FakePgError(Exception):
    def __init__(self, sqlstate, message="error"):
        super().__init__(message)
        self.sqlstate = sqlstate


class FakeSqliteError(Exception):
    def __init__(self, errorname, message="error"):
        super().__init__(message)
        self.sqlite_errorname = errorname


# Driver errors are recognized by module, as pymysql exposes no typed errno attribute
FakeMySQLError = type("IntegrityError", (Exception,), {"__module__": "pymysql.err"})


def wrap(orig, cls=IntegrityError):
    return cls("INSERT INTO likes ...", {}, orig)


class TestStructuredCodes:
    """Driver codes win over the message text."""

    def test_postgres_unique_violation(self):
        assert classify_store_error(wrap(FakePgError("23505"))) == StoreOutcome.CONFLICT

    def test_postgres_other_violation(self):
        error = wrap(FakePgError("23502", "duplicate key in the message does not matter"))

        assert classify_store_error(error) == StoreOutcome.OTHER

    @pytest.mark.parametrize("errorname", ["SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY"])
    def test_sqlite_unique_violation(self, errorname):
        assert classify_store_error(wrap(FakeSqliteError(errorname))) == StoreOutcome.CONFLICT

    def test_sqlite_not_null_violation(self):
        error = wrap(FakeSqliteError("SQLITE_CONSTRAINT_NOTNULL", "NOT NULL constraint failed"))

        assert classify_store_error(error) == StoreOutcome.OTHER

    def test_mysql_duplicate_entry(self):
        orig = FakeMySQLError(1062, "Duplicate entry '1.2.3.4-curl' for key 'unique_anonymous_like'")

        assert classify_store_error(wrap(orig)) == StoreOutcome.CONFLICT

    def test_mysql_other_error(self):
        orig = FakeMySQLError(1048, "Column 'likeable' cannot be null")

        assert classify_store_error(wrap(orig)) == StoreOutcome.OTHER

    def test_real_sqlite_error(self):
        connection = sqlite3.connect(":memory:")
        connection.execute("CREATE TABLE t (a TEXT UNIQUE)")
        connection.execute("INSERT INTO t VALUES ('x')")
        with pytest.raises(sqlite3.IntegrityError) as exc_info:
            connection.execute("INSERT INTO t VALUES ('x')")
        connection.close()

        assert classify_store_error(wrap(exc_info.value)) == StoreOutcome.CONFLICT


class TestMessageFallback:
    """Without a structured code the message decides."""

    @pytest.mark.parametrize("message", [
        "UNIQUE constraint failed: likes.liker_id, likes.likeable, likes.likeable_id",
        'duplicate key value violates unique constraint "unique_authenticated_like"',
        "violates unique constraint",
        "Duplicate entry 'user-1-post-post-1' for key 'unique_authenticated_like'",
    ])
    def test_conflict_messages(self, message):
        assert classify_store_error(wrap(Exception(message))) == StoreOutcome.CONFLICT

    def test_unrelated_message(self):
        error = wrap(Exception("database is locked"), OperationalError)

        assert classify_store_error(error) == StoreOutcome.OTHER

    def test_plain_exception(self):
        assert classify_store_error(RuntimeError("connection reset")) == StoreOutcome.OTHER


def test_no_result_is_not_found():
    assert classify_store_error(NoResultFound()) == StoreOutcome.NOT_FOUND
