"""
SQL rendering of the spherical law of cosines.

The database evaluates the same formula as
geo_distance.core.geometry.spherical_distance. Only the rounding wrapper
differs between dialects: PostgreSQL needs a numeric cast before ROUND
accepts a precision, MySQL does not.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, NamedTuple

from geo_distance.core.geometry import GeoPoint, UnitLike, DISTANCE_PRECISION, earth_radius
from geo_distance.utils.exceptions import ConfigurationError


class Dialect(Enum):
    """SQL dialects the distance expression can be rendered for."""
    MYSQL = "mysql"
    POSTGRES = "postgres"
    OTHER = "other"

    @classmethod
    def from_name(cls, name: str) -> "Dialect":
        """
        Map a driver or SQLAlchemy dialect name to a Dialect.

        Example:
            >>> Dialect.from_name("postgresql")
            <Dialect.POSTGRES: 'postgres'>
        """
        normalized = (name or "").lower()
        if normalized in ("mysql", "mariadb"):
            return cls.MYSQL
        if normalized in ("postgresql", "postgres"):
            return cls.POSTGRES
        return cls.OTHER

    @property
    def supported(self) -> bool:
        return self is not Dialect.OTHER


@dataclass(frozen=True)
class BoundParameter:
    """A value passed to the executor separately from the query text."""
    name: str
    value: Any
    type: str = "float"


class DistanceExpression(NamedTuple):
    """Dialect-specific SQL and the parameters it references."""
    sql: str
    parameters: List[BoundParameter]


_SPHERICAL_COSINE_SQL = (
    "(:earth_radius * ACOS(LEAST(GREATEST("
    "COS(RADIANS(:latitude)) * COS(RADIANS({lat})) * "
    "COS(RADIANS({lng}) - RADIANS(:longitude)) + "
    "SIN(RADIANS(:latitude)) * SIN(RADIANS({lat}))"
    ", -1), 1)))"
)


def compute_distance_expression(
    point: GeoPoint,
    lat_column: str,
    lng_column: str,
    units: UnitLike,
    dialect: Dialect
) -> DistanceExpression:
    """
    Build the SQL expression computing distance from point to each row.

    Column names are inserted verbatim and must come from validated
    configuration; the point and earth radius are bound parameters.

    Args:
        point: Reference point
        lat_column: (Qualified) latitude column
        lng_column: (Qualified) longitude column
        units: Distance unit
        dialect: Target SQL dialect

    Returns:
        DistanceExpression with the SQL text and its bound parameters

    Raises:
        ConfigurationError: If the dialect is not MySQL or Postgres

    Example:
        >>> expr = compute_distance_expression(GeoPoint(0, 0), "foo.lat", "foo.lng", "km", Dialect.MYSQL)
        >>> expr.sql.startswith("ROUND((:earth_radius * ACOS(")
        True
    """
    inner = _SPHERICAL_COSINE_SQL.format(lat=lat_column, lng=lng_column)

    if dialect is Dialect.MYSQL:
        sql = f"ROUND({inner}, {DISTANCE_PRECISION})"
    elif dialect is Dialect.POSTGRES:
        sql = f"ROUND(CAST({inner} AS numeric), {DISTANCE_PRECISION})"
    else:
        raise ConfigurationError(
            "Only MySQL and Postgres are supported",
            details={"dialect": getattr(dialect, "value", dialect)}
        )

    parameters = [
        BoundParameter("earth_radius", earth_radius(units), "float"),
        BoundParameter("latitude", point.latitude, "float"),
        BoundParameter("longitude", point.longitude, "float"),
    ]
    return DistanceExpression(sql, parameters)
