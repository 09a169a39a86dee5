"""
Centralized settings and path configuration for the quote tool.

Values that can change between deployments come from DUCT_QUOTE_* environment
variables (see EnvSettings); table paths are derived from the data directory.
"""
from pathlib import Path
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Installed package: fall back to the package directory itself
    return Path(__file__).resolve().parent.parent


def get_default_data_dir() -> Path:
    """Directory holding the shipped pricing tables."""
    return Path(__file__).resolve().parent.parent / 'data' / 'tables'


class EnvSettings(BaseSettings):
    """Deployment settings read from the environment."""

    model_config = SettingsConfigDict(env_prefix="DUCT_QUOTE_")

    data_dir: Optional[Path] = None
    admin_password: str = "change-me"
    log_level: str = "INFO"

    @field_validator("log_level", mode="before")
    def upper_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    project_root: Path
    data_dir: Path

    # Pricing tables
    sqft_tiers: Path
    clean_seal_tiers: Path
    service_prices: Path
    zipcode_charges: Path
    pricing_workbook: Path

    # Admin tables
    companies: Path

    admin_password: str = "change-me"
    log_level: str = "INFO"

    @classmethod
    def load(cls, data_dir: Optional[Path] = None) -> 'Settings':
        """Load settings; an explicit data_dir wins over DUCT_QUOTE_DATA_DIR."""
        env = EnvSettings()
        root = Path(data_dir or env.data_dir or get_default_data_dir())

        return cls(
            project_root=get_project_root(),
            data_dir=root,
            sqft_tiers=root / 'sqft_tiers.csv',
            clean_seal_tiers=root / 'clean_seal_tiers.csv',
            service_prices=root / 'service_prices.csv',
            zipcode_charges=root / 'zipcode_charges.csv',
            pricing_workbook=root / 'pricing_tables.xlsx',
            companies=root / 'companies.csv',
            admin_password=env.admin_password,
            log_level=env.log_level,
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
