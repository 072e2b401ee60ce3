"""
Centralized settings and path configuration for the freight rates package.
"""
import logging
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

import structlog


DATA_DIR_ENV = 'FREIGHT_RATES_DATA_DIR'


def get_package_root() -> Path:
    """Get the freight_rates package directory."""
    return Path(__file__).resolve().parent.parent


@dataclass(frozen=True)
class Settings:
    """Application settings with sensible defaults."""

    # Reference tables
    data_dir: Path
    tariffs_csv: Path
    drivers_csv: Path

    # Facility preselected on the import screen
    default_facility: str = 'Santa Luzia'

    # Fallback driver identities for plates missing from the roster
    unknown_driver_label: str = 'Motorista Não Identificado'
    route_driver_template: str = 'Motorista (Rota {ref})'

    @classmethod
    def load(cls, data_dir: Optional[Path] = None) -> 'Settings':
        """Load settings, honouring the data directory override."""
        if data_dir is None:
            override = os.environ.get(DATA_DIR_ENV)
            data_dir = Path(override) if override else get_package_root() / 'data'

        return cls(
            data_dir=data_dir,
            tariffs_csv=data_dir / 'tariffs.csv',
            drivers_csv=data_dir / 'drivers.csv',
        )

    def placeholder_driver(self, map_ref: str = '') -> str:
        """Driver label used when a plate is not on the roster."""
        if map_ref:
            return self.route_driver_template.format(ref=map_ref)
        return self.unknown_driver_label


def configure_logging(level: str = 'INFO') -> None:
    """Configure structlog for the API and UI entry points."""
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
    )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
