#!/usr/bin/env python3
"""
Configuration management for netdash.
Centralizes numeric field bounds and environment-driven settings.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv
from loguru import logger
from pathlib import Path
from typing import Any, Optional


@dataclass(frozen=True)
class FieldBounds:
    """Allowed range and fallback for one numeric input field."""
    minimum: int
    maximum: int
    default: int

    def __post_init__(self):
        if self.minimum > self.maximum:
            raise ValueError(f"minimum {self.minimum} exceeds maximum {self.maximum}")
        if not self.minimum <= self.default <= self.maximum:
            raise ValueError(f"default {self.default} outside {self.minimum}-{self.maximum}")


# Per-field bounds for every numeric value read from user input
FIELD_BOUNDS = {
    'vlan_id': FieldBounds(1, 4094, 1),
    'admin_distance': FieldBounds(1, 255, 1),
    'enumerate_limit': FieldBounds(1, 65536, 256),
}


def sanitize(value: Any, bounds: FieldBounds) -> int:
    """
    Coerce a form value to an int inside ``bounds``.

    Unparseable values and values below the minimum take the default;
    values above the maximum are clamped to it.

    Args:
        value: Raw value (str, int, float or None)
        bounds: Field bounds to apply

    Returns:
        Sanitized integer
    """
    if isinstance(value, bool) or value is None:
        return bounds.default

    if isinstance(value, (int, float)):
        number = value
    else:
        text = str(value).strip()
        try:
            number = int(text, 10)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                return bounds.default

    # NaN and infinities are treated as unparseable
    if isinstance(number, float):
        if number != number or number in (float('inf'), float('-inf')):
            return bounds.default
        number = int(number)

    if number < bounds.minimum:
        return bounds.default
    return min(number, bounds.maximum)


VALID_OUTPUT_FORMATS = ('table', 'json', 'csv')
VALID_LOG_LEVELS = ('TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass
class NetDashConfig:
    """
    Centralized configuration with validation and output preferences.
    """
    allow_point_to_point: bool = False
    output_format: str = "table"
    log_level: str = "WARNING"
    log_file: Optional[str] = None
    enumerate_limit: int = FIELD_BOUNDS['enumerate_limit'].default

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.output_format = (self.output_format or "table").strip().lower()
        if self.output_format not in VALID_OUTPUT_FORMATS:
            raise ValueError(
                f"output_format must be one of {', '.join(VALID_OUTPUT_FORMATS)}"
            )

        self.log_level = (self.log_level or "WARNING").strip().upper()
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(VALID_LOG_LEVELS)}")

        # Clamp numeric values to safe ranges
        self.enumerate_limit = sanitize(self.enumerate_limit, FIELD_BOUNDS['enumerate_limit'])

        if self.log_file:
            self.log_file = str(Path(self.log_file).expanduser())

    @classmethod
    def from_env(cls, env_file: str = ".env") -> "NetDashConfig":
        """
        Load configuration from environment, reading ``env_file`` first if present.

        Variables already set in the process environment win over the file.

        Args:
            env_file: Path to environment file

        Returns:
            NetDashConfig instance
        """
        env_path = Path(env_file).expanduser()

        if env_path.exists():
            load_dotenv(env_path, override=False)
            logger.debug(f"Loaded configuration from: {env_path}")

        return cls(
            allow_point_to_point=os.environ.get('NETDASH_ALLOW_P2P', 'false').lower() in ('1', 'true', 'yes'),
            output_format=os.environ.get('NETDASH_OUTPUT_FORMAT', 'table'),
            log_level=os.environ.get('NETDASH_LOG_LEVEL', 'WARNING'),
            log_file=os.environ.get('NETDASH_LOG_FILE'),
            enumerate_limit=os.environ.get(
                'NETDASH_ENUMERATE_LIMIT', FIELD_BOUNDS['enumerate_limit'].default
            ),
        )

    def to_dict(self) -> dict:
        """
        Export configuration as dictionary.

        Returns:
            Dictionary with all configuration values
        """
        return {
            'allow_point_to_point': self.allow_point_to_point,
            'output_format': self.output_format,
            'log_level': self.log_level,
            'log_file': self.log_file,
            'enumerate_limit': self.enumerate_limit,
        }
