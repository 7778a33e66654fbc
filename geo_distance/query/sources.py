"""
Queryable source abstraction.

A QueryableSource is the narrow surface the distance filter talks to:
add a computed column, add a filter predicate, add an order key, bind a
typed parameter. SQLAlchemyQuery implements it on top of SQLAlchemy Core
text statements and returns results as pandas DataFrames.
"""
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd
from sqlalchemy import Boolean, Float, Integer, String, bindparam, text
from sqlalchemy.sql.elements import TextClause

from geo_distance.query.builder import DistanceQuerySpec
from geo_distance.utils.exceptions import QueryBuildError
from geo_distance.utils.logging_config import get_logger

logger = get_logger(__name__)

_COLUMN_REF = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$')

SQL_TYPES = {
    "float": Float,
    "integer": Integer,
    "string": String,
    "boolean": Boolean,
}

Conditions = Union[Mapping[str, Any], str, Iterable[str]]


def infer_type(value: Any) -> str:
    """Name of the bound parameter type for a Python value."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    return "string"


class QueryableSource(ABC):
    """Abstract base class for anything a distance filter can be applied to."""

    @abstractmethod
    def add_computed_column(self, alias: str, expression: str) -> None:
        """Select expression under the given alias."""
        pass

    @abstractmethod
    def add_filter(self, condition: str) -> None:
        """AND a predicate onto the existing ones."""
        pass

    @abstractmethod
    def add_order(self, clause: str) -> None:
        """Append an ORDER BY key."""
        pass

    @abstractmethod
    def bind(self, name: str, value: Any, type_: str = "float") -> None:
        """Bind a typed parameter referenced as :name."""
        pass

    def check_binding(self, name: str, value: Any, type_: str = "float") -> None:
        """
        Raise QueryBuildError if bind(name, value, type_) would fail.

        Sources that reject rebinding override this; bind must not fail
        for a binding that passes the check.
        """
        pass

    def add_conditions(self, conditions: Optional[Conditions]) -> None:
        """
        Add caller conditions without interpreting them.

        A mapping is read as column = value equality tests with bound
        values; strings are added as raw predicates. Either every
        condition is added or, on QueryBuildError, none is.
        """
        self.apply_conditions(self.plan_conditions(conditions))

    def plan_conditions(self, conditions: Optional[Conditions]) -> List[tuple]:
        """Check conditions and pair each predicate with its binding, if any."""
        if not conditions:
            return []
        if isinstance(conditions, str):
            return [(conditions, None)]
        if not isinstance(conditions, Mapping):
            return [(condition, None) for condition in conditions]

        for column in conditions:
            if not isinstance(column, str) or not _COLUMN_REF.match(column):
                raise QueryBuildError(f"Invalid column in conditions: {column!r}")

        count = getattr(self, "_condition_count", 0)
        plan = []
        for offset, (column, value) in enumerate(conditions.items()):
            name = f"condition_{count + offset}"
            binding = (name, value, infer_type(value))
            self.check_binding(*binding)
            plan.append((f"{column} = :{name}", binding))
        return plan

    def apply_conditions(self, plan: List[tuple]) -> None:
        """Add the predicates and bindings of a plan from plan_conditions."""
        for condition, binding in plan:
            self.add_filter(condition)
            if binding is not None:
                self.bind(*binding)
                self._condition_count = getattr(self, "_condition_count", 0) + 1


class SQLAlchemyQuery(QueryableSource):
    """
    SELECT statement over a single table, rendered as a SQLAlchemy text clause.

    Example:
        >>> query = SQLAlchemyQuery("foo", alias="Foo").select("name", "lat", "lng")
        >>> apply_distance_filter(query, spec, conditions={"active": True})
        >>> df = query.fetch(engine)
    """

    def __init__(self, table: str, alias: Optional[str] = None, columns: Optional[List[str]] = None):
        self.table = table
        self.alias = alias or table
        self._columns: List[str] = list(columns) if columns else []
        self._computed: List[str] = []
        self._filters: List[str] = []
        self._order: List[str] = []
        self._params: Dict[str, tuple] = {}

    def select(self, *columns: str) -> "SQLAlchemyQuery":
        """Restrict the plain columns returned (default: all columns)."""
        self._columns.extend(columns)
        return self

    def add_computed_column(self, alias: str, expression: str) -> None:
        self._computed.append(f"{expression} AS {alias}")

    def add_filter(self, condition: str) -> None:
        self._filters.append(condition)

    def add_order(self, clause: str) -> None:
        self._order.append(clause)

    def check_binding(self, name: str, value: Any, type_: str = "float") -> None:
        if type_ not in SQL_TYPES:
            raise QueryBuildError(f"Unknown parameter type: {type_}")
        if name in self._params and self._params[name][0] != value:
            raise QueryBuildError(
                f"Parameter :{name} already bound to {self._params[name][0]!r}, got {value!r}"
            )

    def bind(self, name: str, value: Any, type_: str = "float") -> None:
        self.check_binding(name, value, type_)
        self._params[name] = (value, type_)

    @property
    def parameters(self) -> Dict[str, Any]:
        return {name: value for name, (value, _) in self._params.items()}

    def sql(self) -> str:
        """Render the statement text with :name placeholders."""
        columns = self._columns or [f"{self.alias}.*"]
        sql = f"SELECT {', '.join(columns + self._computed)} FROM {self.table}"
        if self.alias != self.table:
            sql += f" AS {self.alias}"
        if self._filters:
            sql += " WHERE " + " AND ".join(f"({c})" for c in self._filters)
        if self._order:
            sql += " ORDER BY " + ", ".join(self._order)
        return sql

    def statement(self) -> TextClause:
        """The statement as a text clause with typed bound parameters."""
        params = [
            bindparam(name, value, type_=SQL_TYPES[type_]())
            for name, (value, type_) in self._params.items()
        ]
        return text(self.sql()).bindparams(*params)

    def fetch(self, connectable) -> pd.DataFrame:
        """
        Execute the statement.

        Args:
            connectable: SQLAlchemy Engine or Connection

        Returns:
            DataFrame with one row per matching record
        """
        df = pd.read_sql(self.statement(), connectable)
        logger.info("distance_query_fetched", table=self.table, rows=len(df))
        return df


def apply_distance_filter(
    source: QueryableSource,
    spec: DistanceQuerySpec,
    conditions: Optional[Conditions] = None
) -> QueryableSource:
    """
    Apply a distance filter to a queryable source.

    Caller conditions are added first and the distance condition is ANDed
    after them; existing filters on the source are kept. Conditions and
    parameters are checked before anything is added, so a QueryBuildError
    leaves the source as it was.

    Args:
        source: Query to modify
        spec: Output of build_distance_filter
        conditions: Extra predicates, see QueryableSource.add_conditions

    Returns:
        The same source, for chaining
    """
    plan = source.plan_conditions(conditions)
    for param in spec.bound_parameters:
        source.check_binding(param.name, param.value, param.type)

    source.apply_conditions(plan)
    source.add_computed_column(spec.alias, spec.distance_expression)
    source.add_filter(spec.filter_condition)
    source.add_order(spec.order_clause)
    for param in spec.bound_parameters:
        source.bind(param.name, param.value, param.type)
    return source
