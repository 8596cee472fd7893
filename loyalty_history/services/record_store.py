"""
Record store handle for the history tables.

Wraps a pooled SQLAlchemy engine behind two calls:

    store.query(sql, params)    -> list of row dicts
    store.execute(sql, params)  -> affected row count

Every value travels as a bound parameter. One RecordStore is built per
application in create_app() and handed to request handlers; nothing else
holds the engine.
"""
import logging
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import TextClause

from ..utils.exceptions import StoreError

logger = logging.getLogger(__name__)

Statement = Union[str, TextClause]


def _as_clause(statement: Statement) -> TextClause:
    if isinstance(statement, TextClause):
        return statement
    return text(statement)


class RecordStore:
    """Parameterized SQL access to the history tables."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def quote_identifier(self, name: str) -> str:
        """Quote a table name for this engine's dialect (histPoints is mixed case)."""
        return self.engine.dialect.identifier_preparer.quote(name)

    def query(self, statement: Statement, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Run a SELECT and return its rows as plain dicts.

        Raises:
            StoreError: If the database rejects or fails the statement
        """
        try:
            with self.engine.connect() as conn:
                result = conn.execute(_as_clause(statement), params or {})
                return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            logger.exception("Record store query failed")
            raise StoreError("Record store query failed", original_error=e) from e

    def execute(self, statement: Statement, params: Optional[Dict[str, Any]] = None) -> int:
        """
        Run an INSERT/UPDATE/DELETE in its own transaction.

        Returns:
            Number of rows affected

        Raises:
            StoreError: If the database rejects or fails the statement
        """
        try:
            with self.engine.begin() as conn:
                result = conn.execute(_as_clause(statement), params or {})
                return result.rowcount
        except SQLAlchemyError as e:
            logger.exception("Record store write failed")
            raise StoreError("Record store write failed", original_error=e) from e

    def __repr__(self):
        return f'<RecordStore {self.engine.url.render_as_string(hide_password=True)}>'
