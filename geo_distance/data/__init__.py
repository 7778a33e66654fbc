"""
Schema and connection introspection for table bindings.
"""
from geo_distance.data.schema import SchemaIntrospector, SQLAlchemyIntrospector, StaticIntrospector

__all__ = [
    'SchemaIntrospector',
    'SQLAlchemyIntrospector',
    'StaticIntrospector',
]
