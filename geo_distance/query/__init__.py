"""
Distance filter construction and the queryable source interface.
"""
from geo_distance.query.builder import DistanceQuerySpec, build_distance_filter, validate_options
from geo_distance.query.sources import QueryableSource, SQLAlchemyQuery, apply_distance_filter

__all__ = [
    'DistanceQuerySpec',
    'build_distance_filter',
    'validate_options',
    'QueryableSource',
    'SQLAlchemyQuery',
    'apply_distance_filter',
]
