import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from models import Base

logger = logging.getLogger(__name__)

# An empty URL lets libpq fall back to PGHOST, PGUSER, PGDATABASE and friends
DEFAULT_URL = "postgresql+psycopg2://"


@dataclass(frozen=True)
class Rows:
    rows: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class Err:
    error: Exception


QueryResult = Union[Rows, Err]


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(url: Optional[str] = None) -> Engine:
    """Build an engine that opens a fresh connection for every call"""
    url = url or DEFAULT_URL
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]

    engine = create_engine(url, poolclass=NullPool)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def init_db(engine: Engine):
    Base.metadata.create_all(bind=engine)


def execute_query(
    engine: Engine, statement: str, params: Optional[Mapping[str, Any]] = None
) -> QueryResult:
    """
    Run one parameterised statement and report its rows or its error.

    The connection is always released before returning. Release failures
    are logged and dropped so the caller still gets the statement's result.
    """
    try:
        connection = engine.connect()
    except SQLAlchemyError as exc:
        logger.error("Unable to connect to the database: %s", exc)
        return Err(exc)

    try:
        result = connection.execute(text(statement), dict(params or {}))
        rows = [dict(row) for row in result.mappings()] if result.returns_rows else []
        connection.commit()
        return Rows(rows)
    except SQLAlchemyError as exc:
        logger.error("Query failed: %s", exc)
        return Err(exc)
    finally:
        try:
            connection.close()
        except SQLAlchemyError:
            logger.exception("Unable to release database connection")
