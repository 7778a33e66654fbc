"""
Shared fixtures: a table of ten reference points.

Poles, the same point on both sides of the antimeridian, a cluster of
points in central Birmingham (UK), one a little further out, and
Birmingham, Alabama.
"""
import math

import pandas as pd
import pytest
from sqlalchemy import Boolean, Column, Float, Integer, MetaData, String, Table, create_engine, event


FOO_RECORDS = [
    {'id': 1, 'name': 'south pole', 'lat': -90, 'lng': 0, 'active': False},
    {'id': 2, 'name': 'north pole', 'lat': 90, 'lng': 0, 'active': False},
    {'id': 3, 'name': 'same 1', 'lat': 0, 'lng': -180, 'active': False},
    {'id': 4, 'name': 'same 2', 'lat': 0, 'lng': 180, 'active': False},
    {'id': 5, 'name': 'birmingham centre', 'lat': 52.47980068128972, 'lng': -1.8967723846435545, 'active': True},
    {'id': 6, 'name': 'birmingham close 1', 'lat': 52.4858640956247, 'lng': -1.8966865539550781, 'active': True},
    {'id': 7, 'name': 'birmingham close 2', 'lat': 52.47985295567416, 'lng': -1.904325485229492, 'active': True},
    {'id': 8, 'name': 'birmingham close 3', 'lat': 52.47718688287627, 'lng': -1.8944549560546875, 'active': False},
    {'id': 9, 'name': 'birmingham far', 'lat': 52.50514646853436, 'lng': -1.8513679504394531, 'active': True},
    {'id': 10, 'name': 'wrong birmingham', 'lat': 33.519644153199245, 'lng': -86.8033218383789, 'active': True},
]

BIRMINGHAM_CENTRE = (52.47980068128972, -1.8967723846435545)


def _register_math_functions(dbapi_connection, connection_record):
    """Give SQLite the MySQL math functions the distance expression uses."""
    dbapi_connection.create_function("RADIANS", 1, math.radians, deterministic=True)
    dbapi_connection.create_function("COS", 1, math.cos, deterministic=True)
    dbapi_connection.create_function("SIN", 1, math.sin, deterministic=True)
    dbapi_connection.create_function("ACOS", 1, math.acos, deterministic=True)
    dbapi_connection.create_function("LEAST", 2, min, deterministic=True)
    dbapi_connection.create_function("GREATEST", 2, max, deterministic=True)


@pytest.fixture
def foo_df():
    """Reference points as a DataFrame."""
    return pd.DataFrame(FOO_RECORDS)


@pytest.fixture
def sqlite_engine():
    """In-memory SQLite engine holding table 'foo' with the reference points."""
    engine = create_engine("sqlite://")
    event.listen(engine, "connect", _register_math_functions)

    metadata = MetaData()
    foo = Table(
        "foo",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("name", String, nullable=True),
        Column("lat", Float, nullable=False),
        Column("lng", Float, nullable=False),
        Column("active", Boolean, nullable=False),
    )
    metadata.create_all(engine)
    with engine.begin() as conn:
        conn.execute(foo.insert(), FOO_RECORDS)

    yield engine
    engine.dispose()


@pytest.fixture
def birmingham_centre():
    """(latitude, longitude) of the 'birmingham centre' point."""
    return BIRMINGHAM_CENTRE
