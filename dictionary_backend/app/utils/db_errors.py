# dictionary_backend/app/utils/db_errors.py
"""
把 SQLAlchemy 抛出的异常归类成 HTTP 状态码 + 机器可读的 code。

    unique 冲突         -> 409 UNIQUE_CONSTRAINT_VIOLATION
    外键不存在          -> 400 FOREIGN_KEY_VIOLATION
    NoResultFound       -> 404 NOT_FOUND
    数据/语句不合法     -> 400 VALIDATION_ERROR
    连接失败            -> 503 DATABASE_CONNECTION_ERROR
    其它                -> 500 DATABASE_ERROR
"""
import logging
from dataclasses import dataclass

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import (
    DataError,
    IntegrityError,
    InterfaceError,
    NoResultFound,
    OperationalError,
    SQLAlchemyError,
    StatementError,
)

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE
PG_UNIQUE_VIOLATION = "23505"
PG_FOREIGN_KEY_VIOLATION = "23503"


@dataclass
class DatabaseErrorInfo:
    status: int
    code: str
    message: str


def _integrity_kind(exc: IntegrityError) -> str:
    pgcode = getattr(exc.orig, "pgcode", None)
    if pgcode == PG_UNIQUE_VIOLATION:
        return "unique"
    if pgcode == PG_FOREIGN_KEY_VIOLATION:
        return "foreign_key"

    text = str(exc.orig).lower()
    if "unique" in text or "duplicate" in text:
        return "unique"
    if "foreign key" in text:
        return "foreign_key"
    return "other"


def classify_db_error(exc: SQLAlchemyError) -> DatabaseErrorInfo:
    # IntegrityError / OperationalError 都是 StatementError 的子类，顺序不能换
    if isinstance(exc, IntegrityError):
        kind = _integrity_kind(exc)
        if kind == "unique":
            return DatabaseErrorInfo(409, "UNIQUE_CONSTRAINT_VIOLATION", "A record with this value already exists.")
        if kind == "foreign_key":
            return DatabaseErrorInfo(400, "FOREIGN_KEY_VIOLATION", "Referenced record does not exist.")
        return DatabaseErrorInfo(400, "VALIDATION_ERROR", "Invalid data provided.")

    if isinstance(exc, NoResultFound):
        return DatabaseErrorInfo(404, "NOT_FOUND", "Record not found.")

    if isinstance(exc, (OperationalError, InterfaceError)):
        return DatabaseErrorInfo(503, "DATABASE_CONNECTION_ERROR", "Database is unavailable.")

    if isinstance(exc, (DataError, StatementError)):
        return DatabaseErrorInfo(400, "VALIDATION_ERROR", "Invalid data provided.")

    return DatabaseErrorInfo(500, "DATABASE_ERROR", "An unexpected database error occurred.")


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
    info = classify_db_error(exc)
    if info.status >= 500:
        logger.error("Database error on %s: %s", request.url.path, exc, exc_info=True)
    else:
        logger.warning("Database error on %s -> %s: %s", request.url.path, info.code, exc)
    return JSONResponse(
        status_code=info.status,
        content={"message": info.message, "code": info.code, "status": info.status},
    )


def register_db_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
