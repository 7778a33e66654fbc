"""
Tests for the queryable source interface and SQLAlchemyQuery.
"""
import pytest
from sqlalchemy.sql.elements import TextClause

from geo_distance.query.builder import build_distance_filter
from geo_distance.query.sources import QueryableSource, SQLAlchemyQuery, apply_distance_filter, infer_type
from geo_distance.utils.config import BehaviorConfig
from geo_distance.utils.exceptions import QueryBuildError


class RecordingSource(QueryableSource):
    """Source that records every call."""

    def __init__(self):
        self.calls = []

    def add_computed_column(self, alias, expression):
        self.calls.append(("column", alias, expression))

    def add_filter(self, condition):
        self.calls.append(("filter", condition))

    def add_order(self, clause):
        self.calls.append(("order", clause))

    def bind(self, name, value, type_="float"):
        self.calls.append(("bind", name, value, type_))


@pytest.fixture
def spec():
    config = BehaviorConfig(latitude_column="Foo.lat", longitude_column="Foo.lng")
    return build_distance_filter(config, {'latitude': 52.4798, 'longitude': -1.8968, 'radius': 1})


def test_apply_distance_filter_calls(spec):
    source = RecordingSource()

    result = apply_distance_filter(source, spec)

    assert result is source
    assert source.calls[0] == ("column", "distance", spec.distance_expression)
    assert source.calls[1] == ("filter", spec.filter_condition)
    assert source.calls[2] == ("order", "distance ASC")
    assert [c[1] for c in source.calls[3:]] == ["earth_radius", "latitude", "longitude", "radius"]


def test_caller_conditions_come_first(spec):
    source = RecordingSource()

    apply_distance_filter(source, spec, conditions="Foo.active = 1")

    filters = [c[1] for c in source.calls if c[0] == "filter"]
    assert filters == ["Foo.active = 1", spec.filter_condition]


def test_sql_rendering(spec):
    query = SQLAlchemyQuery("foo", alias="Foo").select("name", "lat", "lng")
    apply_distance_filter(query, spec)

    sql = query.sql()

    assert sql.startswith(f"SELECT name, lat, lng, {spec.distance_expression} AS distance FROM foo AS Foo")
    assert f"WHERE ({spec.filter_condition})" in sql
    assert sql.endswith("ORDER BY distance ASC")


def test_default_columns():
    query = SQLAlchemyQuery("foo")
    assert query.sql() == "SELECT foo.* FROM foo"


def test_existing_filters_are_kept(spec):
    query = SQLAlchemyQuery("foo", alias="Foo")
    query.add_filter("Foo.id > 3")

    apply_distance_filter(query, spec, conditions={"Foo.active": True})

    sql = query.sql()
    assert "WHERE (Foo.id > 3) AND (Foo.active = :condition_0) AND (" in sql


def test_mapping_conditions_are_bound(spec):
    query = SQLAlchemyQuery("foo")
    apply_distance_filter(query, spec, conditions={"active": True, "name": "x"})

    assert query.parameters["condition_0"] is True
    assert query.parameters["condition_1"] == "x"
    assert ":condition_1" in query.sql()
    assert "'x'" not in query.sql()


def test_list_of_conditions(spec):
    source = RecordingSource()
    apply_distance_filter(source, spec, conditions=["a = 1", "b = 2"])

    filters = [c[1] for c in source.calls if c[0] == "filter"]
    assert filters[:2] == ["a = 1", "b = 2"]


def test_invalid_condition_column():
    query = SQLAlchemyQuery("foo")
    with pytest.raises(QueryBuildError, match="Invalid column"):
        query.add_conditions({"active = 1 OR 1": True})


def test_invalid_condition_column_adds_nothing():
    query = SQLAlchemyQuery("foo")

    with pytest.raises(QueryBuildError, match="bad col"):
        query.add_conditions({"active": True, "bad col": 1})

    assert query.sql() == "SELECT foo.* FROM foo"
    assert query.parameters == {}

    query.add_conditions({"active": True})
    assert query.sql() == "SELECT foo.* FROM foo WHERE (active = :condition_0)"


def test_conflicting_parameter_leaves_query_unchanged(spec):
    query = SQLAlchemyQuery("foo", alias="Foo")
    query.bind("radius", 5.0)

    with pytest.raises(QueryBuildError, match="already bound"):
        apply_distance_filter(query, spec, conditions={"Foo.active": True})

    assert query.sql() == "SELECT Foo.* FROM foo AS Foo"
    assert query.parameters == {"radius": 5.0}


def test_invalid_conditions_leave_recording_source_untouched(spec):
    source = RecordingSource()

    with pytest.raises(QueryBuildError):
        apply_distance_filter(source, spec, conditions={"active": True, "1=1; --": 1})

    assert source.calls == []


def test_conflicting_binding():
    query = SQLAlchemyQuery("foo")
    query.bind("radius", 1.0)
    query.bind("radius", 1.0)

    with pytest.raises(QueryBuildError, match="already bound"):
        query.bind("radius", 2.0)


def test_unknown_parameter_type():
    with pytest.raises(QueryBuildError, match="Unknown parameter type"):
        SQLAlchemyQuery("foo").bind("x", 1, "decimal")


def test_statement_binds_parameters(spec):
    query = SQLAlchemyQuery("foo", alias="Foo")
    apply_distance_filter(query, spec)

    statement = query.statement()

    assert isinstance(statement, TextClause)
    params = statement.compile().params
    assert params["radius"] == 1.0
    assert params["earth_radius"] == 3958.756
    assert params["latitude"] == 52.4798


@pytest.mark.parametrize("value,type_", [
    (True, "boolean"),
    (3, "integer"),
    (1.5, "float"),
    ("x", "string"),
])
def test_infer_type(value, type_):
    assert infer_type(value) == type_
