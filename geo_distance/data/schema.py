"""
Schema and connection introspection used when binding a table.

Only two questions are asked of the database layer: which columns does a
table have, and which SQL dialect does the connection speak.
"""
from abc import ABC, abstractmethod
from typing import Iterable, Optional, Set

from sqlalchemy import inspect
from sqlalchemy.exc import NoSuchTableError

from geo_distance.core.expressions import Dialect
from geo_distance.utils.exceptions import ConfigurationError
from geo_distance.utils.logging_config import get_logger

logger = get_logger(__name__)


class SchemaIntrospector(ABC):
    """Abstract base class for schema/connection introspection."""

    @abstractmethod
    def get_column_names(self, table: str) -> Set[str]:
        """Column names of a table."""
        pass

    @abstractmethod
    def get_dialect(self) -> Dialect:
        """SQL dialect of the underlying connection."""
        pass


class SQLAlchemyIntrospector(SchemaIntrospector):
    """Introspector backed by a SQLAlchemy engine or connection."""

    def __init__(self, connectable, schema: Optional[str] = None):
        """
        Args:
            connectable: SQLAlchemy Engine or Connection
            schema: Optional database schema holding the tables
        """
        self.connectable = connectable
        self.schema = schema

    def get_column_names(self, table: str) -> Set[str]:
        try:
            columns = inspect(self.connectable).get_columns(table, schema=self.schema)
        except NoSuchTableError:
            raise ConfigurationError("Table not found", table=table)
        if not columns:
            raise ConfigurationError("Table not found", table=table)
        return {column["name"] for column in columns}

    def get_dialect(self) -> Dialect:
        dialect = Dialect.from_name(self.connectable.dialect.name)
        logger.debug("dialect_detected", name=self.connectable.dialect.name, dialect=dialect.value)
        return dialect


class StaticIntrospector(SchemaIntrospector):
    """
    Introspector over a fixed description of a table.

    Useful when the schema is already known, e.g. from migrations.

    Example:
        >>> StaticIntrospector({"foo": ["id", "lat", "lng"]}, Dialect.POSTGRES)
    """

    def __init__(self, tables: dict, dialect: Dialect):
        self.tables = {name: set(columns) for name, columns in tables.items()}
        self.dialect = dialect

    def get_column_names(self, table: str) -> Set[str]:
        if table not in self.tables:
            raise ConfigurationError("Table not found", table=table)
        return self.tables[table]

    def get_dialect(self) -> Dialect:
        return self.dialect


def missing_columns(available: Iterable[str], required: Iterable[str]) -> Set[str]:
    """Required column names not present in available."""
    return set(required) - set(available)
