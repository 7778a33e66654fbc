"""
Core distance computation.

Contains the spherical law of cosines in Python (scalar and vectorized)
and its SQL rendering for MySQL and PostgreSQL.
"""
from geo_distance.core.geometry import (
    DistanceUnit,
    GeoPoint,
    EARTH_RADIUS,
    earth_radius,
    parse_units,
    spherical_distance,
    spherical_distance_array,
    distance_series,
)
from geo_distance.core.expressions import (
    Dialect,
    BoundParameter,
    DistanceExpression,
    compute_distance_expression,
)

__all__ = [
    'DistanceUnit',
    'GeoPoint',
    'EARTH_RADIUS',
    'earth_radius',
    'parse_units',
    'spherical_distance',
    'spherical_distance_array',
    'distance_series',
    'Dialect',
    'BoundParameter',
    'DistanceExpression',
    'compute_distance_expression',
]
