"""
Pricing Config Loader - Builds a PricingConfig snapshot from the pricing tables.

Each table is read from its CSV file; when the CSV is missing the sheet of
the same name in pricing_tables.xlsx is used instead. The snapshot carries a
version hash of the files it was built from.
"""
import asyncio
import hashlib
import logging
import math
from datetime import datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from ..config.settings import get_settings, Settings
from ..engine.models import AddOnService, PriceTier, PricingConfig
from ..engine.tiers import validate_tiers

logger = logging.getLogger(__name__)

# Table attribute on Settings -> sheet name in the workbook
TABLE_SHEETS = {
    'sqft_tiers': 'sqft_tiers',
    'clean_seal_tiers': 'clean_seal_tiers',
    'service_prices': 'service_prices',
    'zipcode_charges': 'zipcode_charges',
}

# service_prices rows that feed the engine directly; everything else is an add-on
BASE_PRICE_KEYS = ('hvac_system_charge', 'duct_clean_seal_per_hvac', 'partner_discount_percent')

TRUE_VALUES = {'true', '1', 'yes', 'y'}


def get_file_hash(path: Path) -> str:
    """Get SHA256 hash of a file."""
    if not path.exists():
        return ""
    with open(path, 'rb') as f:
        return hashlib.sha256(f.read()).hexdigest()[:12]


def _table_source(settings: Settings, name: str) -> Path:
    csv_path = getattr(settings, name)
    if csv_path.exists():
        return csv_path
    if settings.pricing_workbook.exists():
        return settings.pricing_workbook
    raise FileNotFoundError(
        f"{csv_path.name} not found in {settings.data_dir} and no {settings.pricing_workbook.name} to fall back on."
    )


def read_table(settings: Settings, name: str) -> pd.DataFrame:
    """Read one pricing table as strings with stripped headers."""
    source = _table_source(settings, name)
    if source.suffix == '.xlsx':
        try:
            df = pd.read_excel(source, sheet_name=TABLE_SHEETS[name], dtype=str)
        except ValueError as e:
            raise FileNotFoundError(f"Sheet '{TABLE_SHEETS[name]}' not found in {source}") from e
    else:
        df = pd.read_csv(source, dtype=str)

    df = df.fillna('')
    df.columns = [str(c).strip() for c in df.columns]
    for col in df.columns:
        df[col] = df[col].astype(str).str.strip()
    return df


def _require_columns(df: pd.DataFrame, name: str, columns: tuple[str, ...]):
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"{name}: missing column(s) {', '.join(missing)}")


def _parse_tiers(df: pd.DataFrame, name: str) -> tuple[PriceTier, ...]:
    _require_columns(df, name, ('min', 'max', 'price'))
    tiers = []
    for _, row in df.iterrows():
        upper = row['max'].lower()
        tiers.append(PriceTier(
            min=float(row['min']),
            max=math.inf if upper in ('', 'inf', 'infinity') else float(row['max']),
            price=float(row['price']),
        ))
    tiers.sort(key=lambda t: t.min)
    validate_tiers(tiers, name)
    return tuple(tiers)


def _parse_zipcodes(df: pd.DataFrame) -> dict[str, float]:
    _require_columns(df, 'zipcode_charges', ('zipcode', 'charge'))
    charges = {}
    for _, row in df.iterrows():
        zipcode = row['zipcode'].replace('-', '').replace(' ', '')
        if not zipcode:
            continue
        charge = float(row['charge'] or 0)
        if charge < 0:
            raise ValueError(f"zipcode_charges: negative charge for {zipcode}")
        if zipcode in charges:
            logger.warning("Duplicate zipcode %s in surcharge table, keeping last row", zipcode)
        charges[zipcode] = charge
    return charges


def _parse_services(df: pd.DataFrame) -> tuple[dict[str, float], dict[str, AddOnService]]:
    _require_columns(df, 'service_prices', ('service_name', 'price'))
    base_prices = {}
    add_ons = {}
    for _, row in df.iterrows():
        key = row['service_name']
        if not key:
            continue
        price = float(row['price'])
        if key in BASE_PRICE_KEYS:
            base_prices[key] = price
            continue
        add_ons[key] = AddOnService(
            service_name=key,
            price=price,
            description=row.get('description', '') or key,
            hidden=row.get('is_hidden', '').lower() in TRUE_VALUES,
        )

    missing = [k for k in BASE_PRICE_KEYS if k not in base_prices]
    if missing:
        raise ValueError(f"service_prices: missing base price(s) {', '.join(missing)}")

    percent = base_prices['partner_discount_percent']
    if not 0 <= percent <= 100:
        raise ValueError(f"service_prices: partner_discount_percent must be 0-100, got {percent:g}")

    return base_prices, add_ons


def _config_version(settings: Settings) -> str:
    digest = hashlib.sha256()
    for name in TABLE_SHEETS:
        source = _table_source(settings, name)
        digest.update(f"{name}:{get_file_hash(source)}".encode())
    return digest.hexdigest()[:12]


def load_pricing_config(settings: Optional[Settings] = None) -> PricingConfig:
    """
    Load a complete pricing snapshot.

    Raises FileNotFoundError for a missing table and ValueError for a table
    that would make the engine misprice (bad tiers, missing base prices).
    """
    settings = settings or get_settings()

    sqft_tiers = _parse_tiers(read_table(settings, 'sqft_tiers'), 'sqft_tiers')
    clean_seal_tiers = _parse_tiers(read_table(settings, 'clean_seal_tiers'), 'clean_seal_tiers')
    base_prices, add_ons = _parse_services(read_table(settings, 'service_prices'))
    zipcode_charges = _parse_zipcodes(read_table(settings, 'zipcode_charges'))

    config = PricingConfig(
        sqft_tiers=sqft_tiers,
        clean_and_seal_tiers=clean_seal_tiers,
        clean_and_seal_per_unit=base_prices['duct_clean_seal_per_hvac'],
        per_additional_hvac_charge=base_prices['hvac_system_charge'],
        partner_discount_percent=base_prices['partner_discount_percent'],
        zipcode_charges=zipcode_charges,
        add_on_services=add_ons,
        version=_config_version(settings),
    )
    logger.info(
        "Loaded pricing config %s: %d sqft tiers, %d clean & seal tiers, %d zipcodes, %d add-ons",
        config.version, len(sqft_tiers), len(clean_seal_tiers), len(zipcode_charges), len(add_ons),
    )
    return config


async def fetch_pricing_config(settings: Optional[Settings] = None) -> PricingConfig:
    """Load the snapshot without blocking the event loop."""
    return await asyncio.to_thread(load_pricing_config, settings)


def build_config_report(settings: Optional[Settings] = None, verbose: bool = True) -> dict:
    """
    Validate the pricing tables and summarize them.

    Args:
        settings: Optional settings override
        verbose: Print progress messages

    Returns:
        Report dictionary with status, input files, metrics, warnings and errors
    """
    settings = settings or get_settings()

    report = {
        "timestamp": datetime.now().isoformat(),
        "status": "pending",
        "input_files": {},
        "metrics": {},
        "warnings": [],
        "errors": []
    }

    for name in TABLE_SHEETS:
        try:
            source = _table_source(settings, name)
        except FileNotFoundError as e:
            report["errors"].append(str(e))
            continue
        report["input_files"][name] = {"path": str(source), "hash": get_file_hash(source)}

    if report["errors"]:
        report["status"] = "failed"
        if verbose:
            for error in report["errors"]:
                print(f"ERROR: {error}")
        return report

    try:
        config = load_pricing_config(settings)
    except (ValueError, FileNotFoundError) as e:
        report["errors"].append(str(e))
        report["status"] = "failed"
        if verbose:
            print(f"ERROR: {e}")
        return report

    zip_df = read_table(settings, 'zipcode_charges')
    duplicates = zip_df[zip_df['zipcode'].duplicated()]['zipcode'].unique().tolist()
    if duplicates:
        report["warnings"].append(f"Duplicate zipcodes: {', '.join(duplicates)}")

    bad_zips = [z for z in config.zipcode_charges if len(z) != 5 or not z.isdigit()]
    if bad_zips:
        report["warnings"].append(f"Zipcodes that are not 5 digits: {', '.join(bad_zips)}")

    charges = list(config.zipcode_charges.values())
    hidden = [s for s in config.add_on_services.values() if s.hidden]
    report["metrics"] = {
        "config_version": config.version,
        "sqft_tier_count": len(config.sqft_tiers),
        "clean_seal_tier_count": len(config.clean_and_seal_tiers),
        "zipcode_count": len(charges),
        "min_zipcode_charge": min(charges) if charges else 0,
        "max_zipcode_charge": max(charges) if charges else 0,
        "add_on_count": len(config.add_on_services),
        "hidden_add_on_count": len(hidden),
        "partner_discount_percent": config.partner_discount_percent,
    }
    report["status"] = "success"

    if verbose:
        print(f"Config version: {config.version}")
        for key, value in report["metrics"].items():
            print(f"  {key}: {value}")
        for warning in report["warnings"]:
            print(f"WARNING: {warning}")

    return report
