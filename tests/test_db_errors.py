import pytest
from sqlalchemy.exc import (
    DataError,
    IntegrityError,
    InterfaceError,
    NoResultFound,
    OperationalError,
    SQLAlchemyError,
    StatementError,
)

from dictionary_backend.app.models import Category
from dictionary_backend.app.utils.db_errors import classify_db_error


class PgError(Exception):
    def __init__(self, message, pgcode):
        super().__init__(message)
        self.pgcode = pgcode


@pytest.mark.parametrize("exc, status, code", [
    (IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: categories.name")), 409, "UNIQUE_CONSTRAINT_VIOLATION"),
    (IntegrityError("INSERT", {}, PgError("duplicate key value", "23505")), 409, "UNIQUE_CONSTRAINT_VIOLATION"),
    (IntegrityError("INSERT", {}, Exception("FOREIGN KEY constraint failed")), 400, "FOREIGN_KEY_VIOLATION"),
    (IntegrityError("INSERT", {}, PgError("violates constraint", "23503")), 400, "FOREIGN_KEY_VIOLATION"),
    (IntegrityError("INSERT", {}, Exception("NOT NULL constraint failed")), 400, "VALIDATION_ERROR"),
    (NoResultFound(), 404, "NOT_FOUND"),
    (OperationalError("SELECT 1", {}, Exception("connection refused")), 503, "DATABASE_CONNECTION_ERROR"),
    (InterfaceError("SELECT 1", {}, Exception("closed")), 503, "DATABASE_CONNECTION_ERROR"),
    (DataError("INSERT", {}, Exception("value too long")), 400, "VALIDATION_ERROR"),
    (StatementError("bad statement", "SELECT", {}, Exception("x")), 400, "VALIDATION_ERROR"),
    (SQLAlchemyError("something else"), 500, "DATABASE_ERROR"),
])
def test_classify(exc, status, code):
    info = classify_db_error(exc)
    assert info.status == status
    assert info.code == code
    assert info.message


def test_real_unique_violation_is_classified(db_session):
    db_session.add(Category(name="Food"))
    db_session.commit()
    db_session.add(Category(name="Food"))
    with pytest.raises(IntegrityError) as caught:
        db_session.commit()
    db_session.rollback()
    assert classify_db_error(caught.value).status == 409
