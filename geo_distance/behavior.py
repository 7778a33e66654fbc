"""
Distance filtering bound to one table.

GeoDistance checks once, at attach time, that the connection speaks a
supported dialect and that the configured coordinate columns exist. After
that every query only validates its own options.
"""
from typing import Any, Mapping, Optional

import pandas as pd

from geo_distance.data.schema import SchemaIntrospector, SQLAlchemyIntrospector, missing_columns
from geo_distance.query.builder import DistanceQuerySpec, build_distance_filter
from geo_distance.query.sources import Conditions, QueryableSource, SQLAlchemyQuery, apply_distance_filter
from geo_distance.utils.config import BehaviorConfig, GeoDistanceSettings
from geo_distance.utils.exceptions import ConfigurationError
from geo_distance.utils.logging_config import get_logger

logger = get_logger(__name__)


class GeoDistance:
    """
    Find-by-distance support for a table.

    Example:
        >>> geo = GeoDistance.from_engine(engine, "foo", GeoDistanceSettings(latitude_column="lat", longitude_column="lng"))
        >>> df = geo.fetch(engine, latitude=52.48, longitude=-1.9, radius=0.9, units="km")
    """

    def __init__(
        self,
        table: str,
        introspector: SchemaIntrospector,
        settings: Optional[GeoDistanceSettings] = None,
        alias: Optional[str] = None,
    ):
        """
        Bind to a table.

        Args:
            table: Table name
            introspector: Schema/connection introspection
            settings: Column names and default unit (defaults: latitude,
                longitude, miles)
            alias: Alias used to qualify columns (default: table name)

        Raises:
            ConfigurationError: If the dialect is not MySQL or Postgres, or
                a configured column is missing from the table
        """
        self.table = table
        self.alias = alias or table
        settings = settings or GeoDistanceSettings()

        dialect = introspector.get_dialect()
        if not dialect.supported:
            logger.error("geo_distance_setup_failed", table=table, reason="unsupported_dialect")
            raise ConfigurationError(
                "Only MySQL and Postgres are supported",
                table=table,
                details={"dialect": dialect.value}
            )

        missing = missing_columns(
            introspector.get_column_names(table),
            [settings.latitude_column, settings.longitude_column],
        )
        if missing:
            logger.error("geo_distance_setup_failed", table=table, reason="invalid_column", missing=sorted(missing))
            raise ConfigurationError(
                "Invalid column",
                table=table,
                details={"missing": sorted(missing)}
            )

        self.config = BehaviorConfig(
            latitude_column=f"{self.alias}.{settings.latitude_column}",
            longitude_column=f"{self.alias}.{settings.longitude_column}",
            default_unit=settings.default_unit,
            dialect=dialect,
        )

        logger.info(
            "geo_distance_attached",
            table=table,
            alias=self.alias,
            dialect=dialect.value,
            units=self.config.default_unit.value,
        )

    @classmethod
    def from_engine(
        cls,
        connectable,
        table: str,
        settings: Optional[GeoDistanceSettings] = None,
        alias: Optional[str] = None,
        schema: Optional[str] = None,
    ) -> "GeoDistance":
        """Bind using SQLAlchemy introspection of connectable."""
        return cls(table, SQLAlchemyIntrospector(connectable, schema=schema), settings, alias)

    def build(self, options: Mapping[str, Any]) -> DistanceQuerySpec:
        """Validate options and build the distance filter for this table."""
        return build_distance_filter(self.config, options)

    def find_by_distance(
        self,
        source: Optional[QueryableSource] = None,
        conditions: Optional[Conditions] = None,
        **options
    ) -> QueryableSource:
        """
        Apply a distance filter to source (default: a new query on this table).

        Args:
            source: Query to modify
            conditions: Extra predicates ANDed with the distance filter
            **options: latitude, longitude, radius and optional units

        Returns:
            The modified source

        Raises:
            InvalidArgumentError: If options fail validation; source is untouched
        """
        spec = self.build(options)
        if source is None:
            source = SQLAlchemyQuery(self.table, alias=self.alias)
        return apply_distance_filter(source, spec, conditions)

    def fetch(self, connectable, *columns: str, conditions: Optional[Conditions] = None, **options) -> pd.DataFrame:
        """
        Run a distance query and return matching rows, nearest first.

        Args:
            connectable: SQLAlchemy Engine or Connection
            *columns: Columns to return besides 'distance' (default: all)
            conditions: Extra predicates ANDed with the distance filter
            **options: latitude, longitude, radius and optional units
        """
        query = SQLAlchemyQuery(self.table, alias=self.alias, columns=list(columns))
        self.find_by_distance(query, conditions=conditions, **options)
        return query.fetch(connectable)
