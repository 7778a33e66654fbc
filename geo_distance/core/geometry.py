"""
Spherical distance functions.

Provides great-circle distance between coordinates using the spherical
law of cosines, in miles or kilometres. The same formula is rendered as
SQL by geo_distance.core.expressions, so values computed here match the
distances a database reports for the same rows.
"""
import math
import numbers
import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Union

import numpy as np
import pandas as pd

from geo_distance.utils.exceptions import InvalidArgumentError


class DistanceUnit(Enum):
    """Supported distance units."""
    MILES = "miles"
    KILOMETRES = "kilometres"


# Mean radius of the earth per unit (approximate)
EARTH_RADIUS = {
    DistanceUnit.MILES: 3958.756,
    DistanceUnit.KILOMETRES: 6371.0,
}

UNIT_ALIASES = {
    "miles": DistanceUnit.MILES,
    "mi": DistanceUnit.MILES,
    "kilometres": DistanceUnit.KILOMETRES,
    "km": DistanceUnit.KILOMETRES,
}

# Decimal places distances are rounded to
DISTANCE_PRECISION = 3

# Plain decimal numbers, optionally signed, with an optional exponent
_NUMERIC_STRING = re.compile(r'^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$')

UnitLike = Union[DistanceUnit, str]


def parse_units(units: UnitLike) -> DistanceUnit:
    """
    Resolve a unit alias to a DistanceUnit.

    Args:
        units: DistanceUnit member or one of 'miles', 'mi', 'kilometres', 'km'

    Returns:
        The matching DistanceUnit

    Raises:
        InvalidArgumentError: If the alias is not recognised

    Example:
        >>> parse_units("km")
        <DistanceUnit.KILOMETRES: 'kilometres'>
    """
    if isinstance(units, DistanceUnit):
        return units
    if isinstance(units, str) and units in UNIT_ALIASES:
        return UNIT_ALIASES[units]
    raise InvalidArgumentError("unrecognized units", parameter="units", value=units)


def earth_radius(units: UnitLike = DistanceUnit.MILES) -> float:
    """Mean radius of the earth in the given units."""
    return EARTH_RADIUS[parse_units(units)]


def is_number(value) -> bool:
    """
    Check whether a value is numeric.

    Accepts ints, floats, Decimals and strings holding a plain decimal
    number such as '52.48', '-1e3' or ' 7 '. Booleans, NaN, infinities and
    values too large for a float are rejected.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, str):
        if not _NUMERIC_STRING.match(value):
            return False
    elif not isinstance(value, (numbers.Real, Decimal)):
        return False
    try:
        return math.isfinite(float(value))
    except (OverflowError, ValueError):
        return False


@dataclass(frozen=True)
class GeoPoint:
    """
    A latitude/longitude pair in decimal degrees.

    Example:
        >>> GeoPoint(52.4798, -1.8968)
        GeoPoint(latitude=52.4798, longitude=-1.8968)
    """
    latitude: float
    longitude: float

    def __post_init__(self):
        if not is_number(self.latitude) or not -90 <= float(self.latitude) <= 90:
            raise InvalidArgumentError(
                "latitude out of range or missing", parameter="latitude", value=self.latitude
            )
        if not is_number(self.longitude) or not -180 <= float(self.longitude) <= 180:
            raise InvalidArgumentError(
                "longitude out of range or missing", parameter="longitude", value=self.longitude
            )
        object.__setattr__(self, "latitude", float(self.latitude))
        object.__setattr__(self, "longitude", float(self.longitude))


def spherical_distance(a: GeoPoint, b: GeoPoint, units: UnitLike = DistanceUnit.MILES) -> float:
    """
    Calculate great-circle distance between two points using the spherical law of cosines.

    The cosine-law argument is clamped to [-1, 1] before acos; for
    coincident points rounding can push it just above 1.

    Args:
        a: First point
        b: Second point
        units: Distance unit (default miles)

    Returns:
        Distance rounded to 3 decimal places

    Example:
        >>> spherical_distance(GeoPoint(90, 0), GeoPoint(-90, 0), "km")
        20015.087

    References:
        https://en.wikipedia.org/wiki/Spherical_law_of_cosines
    """
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)

    cosine = (
        math.cos(lat1) * math.cos(lat2) *
        math.cos(math.radians(b.longitude) - math.radians(a.longitude)) +
        math.sin(lat1) * math.sin(lat2)
    )
    cosine = max(-1.0, min(1.0, cosine))

    return round(earth_radius(units) * math.acos(cosine), DISTANCE_PRECISION)


def spherical_distance_array(
    point: GeoPoint,
    latitudes,
    longitudes,
    units: UnitLike = DistanceUnit.MILES
) -> np.ndarray:
    """
    Vectorized spherical_distance from one point to many coordinates.

    Args:
        point: Reference point
        latitudes: Array-like of latitudes (decimal degrees)
        longitudes: Array-like of longitudes (decimal degrees)
        units: Distance unit (default miles)

    Returns:
        Array of distances rounded to 3 decimal places
    """
    lats = np.radians(np.asarray(latitudes, dtype=float))
    lngs = np.radians(np.asarray(longitudes, dtype=float))
    lat0 = math.radians(point.latitude)
    lng0 = math.radians(point.longitude)

    cosine = (
        math.cos(lat0) * np.cos(lats) * np.cos(lngs - lng0) +
        math.sin(lat0) * np.sin(lats)
    )
    cosine = np.clip(cosine, -1.0, 1.0)

    return np.round(earth_radius(units) * np.arccos(cosine), DISTANCE_PRECISION)


def distance_series(
    df: pd.DataFrame,
    point: GeoPoint,
    lat_column: str = "latitude",
    lng_column: str = "longitude",
    units: UnitLike = DistanceUnit.MILES
) -> pd.Series:
    """
    Distance from point to every row of a DataFrame.

    Args:
        df: DataFrame holding coordinate columns
        point: Reference point
        lat_column: Name of the latitude column
        lng_column: Name of the longitude column
        units: Distance unit (default miles)

    Returns:
        Series named 'distance', aligned with df's index

    Example:
        >>> df['distance'] = distance_series(df, GeoPoint(52.48, -1.90), 'lat', 'lng', 'km')
    """
    values = spherical_distance_array(point, df[lat_column], df[lng_column], units)
    return pd.Series(values, index=df.index, name="distance")
