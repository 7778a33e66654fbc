"""
Configuration management using Pydantic for validation.

GeoDistanceSettings holds what an integrator writes (column names and a
default unit), optionally loaded from YAML. BehaviorConfig is the frozen,
schema-checked result of attaching those settings to a table.
"""
import os
import re
from pathlib import Path
from typing import Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from geo_distance.core.expressions import Dialect
from geo_distance.core.geometry import DistanceUnit, UNIT_ALIASES
from geo_distance.utils.exceptions import ConfigurationError

_IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


class GeoDistanceSettings(BaseModel):
    """Per-table settings before they are checked against a schema."""
    model_config = ConfigDict(str_strip_whitespace=True)

    latitude_column: str = Field("latitude", min_length=1, description="Column holding latitude")
    longitude_column: str = Field("longitude", min_length=1, description="Column holding longitude")
    units: str = Field("miles", description="Default unit: miles, mi, kilometres or km")

    @field_validator('latitude_column', 'longitude_column')
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        """Column names are inserted into SQL, so only plain identifiers are allowed."""
        if not _IDENTIFIER.match(v):
            raise ValueError(f"Invalid column name: {v!r}")
        return v

    @field_validator('units', mode='before')
    @classmethod
    def validate_units(cls, v: Union[str, DistanceUnit]) -> str:
        if isinstance(v, DistanceUnit):
            return v.value
        if isinstance(v, str):
            v = v.strip()
        if not isinstance(v, str) or v not in UNIT_ALIASES:
            raise ValueError(f"units must be one of: {', '.join(UNIT_ALIASES)}")
        return v

    @property
    def default_unit(self) -> DistanceUnit:
        return UNIT_ALIASES[self.units]


class BehaviorConfig(BaseModel):
    """
    Immutable configuration of one table binding.

    Column names are qualified with the table alias, e.g. 'Foo.lat'.
    """
    model_config = ConfigDict(frozen=True)

    latitude_column: str
    longitude_column: str
    default_unit: DistanceUnit = DistanceUnit.MILES
    dialect: Dialect = Dialect.MYSQL


def _expand_env_vars(value: str) -> str:
    """Expand ${VAR} references in string values."""
    pattern = r'\$\{([^}]+)\}'

    def replace_var(match):
        return os.environ.get(match.group(1), '')

    return re.sub(pattern, replace_var, value)


def load_settings(config_path: Path) -> GeoDistanceSettings:
    """
    Load and validate settings from a YAML file.

    Args:
        config_path: Path to YAML config file

    Returns:
        Validated GeoDistanceSettings object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is malformed
        ConfigurationError: If the file does not hold a mapping
        ValidationError: If settings validation fails

    Example:
        >>> settings = load_settings(Path("config/geo_distance.yaml"))
        >>> settings.latitude_column
        'lat'
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        config_dict = yaml.safe_load(f) or {}

    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Settings file must contain a mapping: {config_path}",
            details={"type": type(config_dict).__name__}
        )

    config_dict = {
        key: _expand_env_vars(value) if isinstance(value, str) else value
        for key, value in config_dict.items()
    }
    return GeoDistanceSettings(**config_dict)
