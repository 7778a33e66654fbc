"""
geo-distance: find-by-distance filtering for relational data sources.

Computes great-circle distance with the spherical law of cosines, both in
Python and as MySQL/PostgreSQL expressions, and applies it as a filter
and sort key to queries.
"""
from geo_distance.behavior import GeoDistance
from geo_distance.core.expressions import Dialect, BoundParameter, compute_distance_expression
from geo_distance.core.geometry import DistanceUnit, GeoPoint, spherical_distance
from geo_distance.query.builder import DistanceQuerySpec, build_distance_filter
from geo_distance.query.sources import QueryableSource, SQLAlchemyQuery, apply_distance_filter
from geo_distance.utils.config import BehaviorConfig, GeoDistanceSettings, load_settings
from geo_distance.utils.exceptions import (
    GeoDistanceError,
    ConfigurationError,
    InvalidArgumentError,
    QueryBuildError,
)

__version__ = "0.1.0"

__all__ = [
    'GeoDistance',
    'Dialect',
    'BoundParameter',
    'compute_distance_expression',
    'DistanceUnit',
    'GeoPoint',
    'spherical_distance',
    'DistanceQuerySpec',
    'build_distance_filter',
    'QueryableSource',
    'SQLAlchemyQuery',
    'apply_distance_filter',
    'BehaviorConfig',
    'GeoDistanceSettings',
    'load_settings',
    'GeoDistanceError',
    'ConfigurationError',
    'InvalidArgumentError',
    'QueryBuildError',
]
