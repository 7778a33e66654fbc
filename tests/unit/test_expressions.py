"""
Tests for SQL distance expressions.
"""
import pytest

from geo_distance.core.expressions import (
    Dialect,
    BoundParameter,
    compute_distance_expression,
)
from geo_distance.core.geometry import DistanceUnit, GeoPoint
from geo_distance.utils.exceptions import ConfigurationError


POINT = GeoPoint(52.47980068128972, -1.8967723846435545)


@pytest.mark.parametrize("name,dialect", [
    ("mysql", Dialect.MYSQL),
    ("mariadb", Dialect.MYSQL),
    ("MySQL", Dialect.MYSQL),
    ("postgresql", Dialect.POSTGRES),
    ("postgres", Dialect.POSTGRES),
    ("sqlite", Dialect.OTHER),
    ("mssql", Dialect.OTHER),
    ("", Dialect.OTHER),
    (None, Dialect.OTHER),
])
def test_dialect_from_name(name, dialect):
    assert Dialect.from_name(name) is dialect


def test_dialect_supported():
    assert Dialect.MYSQL.supported
    assert Dialect.POSTGRES.supported
    assert not Dialect.OTHER.supported


def test_mysql_expression():
    """MySQL rounds the raw expression."""
    expr = compute_distance_expression(POINT, "Foo.lat", "Foo.lng", "km", Dialect.MYSQL)

    assert expr.sql.startswith("ROUND((:earth_radius * ACOS(")
    assert expr.sql.endswith(", 3)")
    assert "CAST" not in expr.sql


def test_postgres_expression():
    """PostgreSQL casts to numeric before rounding."""
    expr = compute_distance_expression(POINT, "Foo.lat", "Foo.lng", "km", Dialect.POSTGRES)

    assert expr.sql.startswith("ROUND(CAST((:earth_radius * ACOS(")
    assert expr.sql.endswith(" AS numeric), 3)")


def test_same_formula_for_both_dialects():
    mysql = compute_distance_expression(POINT, "Foo.lat", "Foo.lng", "mi", Dialect.MYSQL)
    postgres = compute_distance_expression(POINT, "Foo.lat", "Foo.lng", "mi", Dialect.POSTGRES)

    inner = mysql.sql[len("ROUND("):-len(", 3)")]
    assert inner in postgres.sql
    assert mysql.parameters == postgres.parameters


def test_argument_is_clamped():
    expr = compute_distance_expression(POINT, "Foo.lat", "Foo.lng", "mi", Dialect.MYSQL)
    assert "ACOS(LEAST(GREATEST(" in expr.sql
    assert ", -1), 1)" in expr.sql


def test_columns_are_referenced():
    expr = compute_distance_expression(POINT, "Foo.lat", "Foo.lng", "mi", Dialect.MYSQL)

    assert expr.sql.count("RADIANS(Foo.lat)") == 2
    assert expr.sql.count("RADIANS(Foo.lng)") == 1


def test_values_are_bound_not_interpolated():
    """User supplied coordinates never appear in the SQL text."""
    expr = compute_distance_expression(POINT, "Foo.lat", "Foo.lng", "km", Dialect.MYSQL)

    assert str(POINT.latitude) not in expr.sql
    assert str(POINT.longitude) not in expr.sql
    assert "6371" not in expr.sql
    for name in ("earth_radius", "latitude", "longitude"):
        assert f":{name}" in expr.sql


def test_bound_parameters():
    expr = compute_distance_expression(POINT, "Foo.lat", "Foo.lng", DistanceUnit.KILOMETRES, Dialect.MYSQL)

    assert expr.parameters == [
        BoundParameter("earth_radius", 6371.0, "float"),
        BoundParameter("latitude", POINT.latitude, "float"),
        BoundParameter("longitude", POINT.longitude, "float"),
    ]


def test_miles_radius():
    expr = compute_distance_expression(POINT, "Foo.lat", "Foo.lng", "miles", Dialect.MYSQL)
    assert expr.parameters[0].value == 3958.756


def test_unsupported_dialect():
    with pytest.raises(ConfigurationError, match="Only MySQL and Postgres are supported"):
        compute_distance_expression(POINT, "Foo.lat", "Foo.lng", "km", Dialect.OTHER)
