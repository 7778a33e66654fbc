"""
Distance filter construction.

Validates caller options, resolves units and assembles a DistanceQuerySpec:
the computed distance column, its filter condition, sort order and the
typed parameters the executor must bind.
"""
from dataclasses import dataclass, field
from typing import Any, List, Mapping

from geo_distance.core.expressions import BoundParameter, compute_distance_expression
from geo_distance.core.geometry import DistanceUnit, GeoPoint, UNIT_ALIASES, is_number, parse_units
from geo_distance.utils.config import BehaviorConfig
from geo_distance.utils.exceptions import InvalidArgumentError
from geo_distance.utils.logging_config import get_logger

logger = get_logger(__name__)

DISTANCE_ALIAS = "distance"


@dataclass(frozen=True)
class DistanceQuerySpec:
    """Everything an executor needs to filter and order rows by distance."""
    distance_expression: str
    filter_condition: str
    having_condition: str
    order_clause: str
    point: GeoPoint
    radius: float
    unit: DistanceUnit
    bound_parameters: List[BoundParameter] = field(default_factory=list)
    alias: str = DISTANCE_ALIAS

    @property
    def parameters(self) -> dict:
        """Bound parameters as a name -> value mapping."""
        return {p.name: p.value for p in self.bound_parameters}


def validate_options(options: Mapping[str, Any]) -> None:
    """
    Check query options; the first violated rule wins.

    Raises:
        InvalidArgumentError: If latitude, longitude, radius or units are
            missing or invalid
    """
    latitude = options.get('latitude')
    if not is_number(latitude) or not -90 <= float(latitude) <= 90:
        raise InvalidArgumentError("latitude out of range or missing", parameter="latitude", value=latitude)

    longitude = options.get('longitude')
    if not is_number(longitude) or not -180 <= float(longitude) <= 180:
        raise InvalidArgumentError("longitude out of range or missing", parameter="longitude", value=longitude)

    radius = options.get('radius')
    if not is_number(radius):
        raise InvalidArgumentError("radius must be a number", parameter="radius", value=radius)
    if float(radius) < 0:
        raise InvalidArgumentError("radius must not be negative", parameter="radius", value=radius)

    units = options.get('units')
    if units and not isinstance(units, DistanceUnit) and (not isinstance(units, str) or units not in UNIT_ALIASES):
        raise InvalidArgumentError("unrecognized units", parameter="units", value=units)


def resolve_units(options: Mapping[str, Any], default: DistanceUnit) -> DistanceUnit:
    """Per-call units override the configured default; empty values fall back to it."""
    units = options.get('units')
    if not units:
        return default
    return parse_units(units)


def build_distance_filter(config: BehaviorConfig, options: Mapping[str, Any]) -> DistanceQuerySpec:
    """
    Build the distance filter for one query.

    Args:
        config: Table binding configuration
        options: Mapping with 'latitude', 'longitude', 'radius' and
            optionally 'units'

    Returns:
        DistanceQuerySpec ready to apply to a queryable source

    Raises:
        InvalidArgumentError: If options fail validation; nothing is built
        ConfigurationError: If config.dialect is unsupported

    Example:
        >>> config = BehaviorConfig(latitude_column="Foo.lat", longitude_column="Foo.lng")
        >>> spec = build_distance_filter(config, {"latitude": 52.48, "longitude": -1.9, "radius": 0.9, "units": "km"})
        >>> spec.order_clause
        'distance ASC'
    """
    try:
        validate_options(options)
    except InvalidArgumentError as e:
        logger.warning("distance_filter_rejected", parameter=e.parameter, reason=str(e))
        raise

    point = GeoPoint(options['latitude'], options['longitude'])
    radius = float(options['radius'])
    unit = resolve_units(options, config.default_unit)

    expression = compute_distance_expression(
        point,
        config.latitude_column,
        config.longitude_column,
        unit,
        config.dialect,
    )

    spec = DistanceQuerySpec(
        distance_expression=expression.sql,
        filter_condition=f"{expression.sql} <= :radius",
        having_condition=f"{DISTANCE_ALIAS} <= :radius",
        order_clause=f"{DISTANCE_ALIAS} ASC",
        point=point,
        radius=radius,
        unit=unit,
        bound_parameters=expression.parameters + [BoundParameter("radius", radius, "float")],
    )

    logger.debug(
        "distance_filter_built",
        latitude=point.latitude,
        longitude=point.longitude,
        radius=radius,
        units=unit.value,
        dialect=config.dialect.value,
    )
    return spec
