import math
import shutil
from pathlib import Path

import pytest

from duct_quote.config.settings import Settings, get_default_data_dir
from duct_quote.engine import AddOnService, PriceTier, PricingConfig, PricingEngine


SQFT_TIERS = [
    PriceTier(0, 999, 400),
    PriceTier(1000, 1999, 450),
    PriceTier(2000, 2999, 500),
    PriceTier(3000, 3999, 550),
    PriceTier(4000, 4999, 600),
    PriceTier(5000, 5999, 650),
    PriceTier(6000, 6999, 700),
    PriceTier(7000, 7999, 750),
    PriceTier(8000, 8999, 800),
    PriceTier(9000, 9999, 850),
    PriceTier(10000, math.inf, 900),
]

CLEAN_SEAL_TIERS = [
    PriceTier(0, 1999, 2500),
    PriceTier(2000, 2999, 2750),
    PriceTier(3000, 3999, 3000),
    PriceTier(4000, 4999, 3250),
    PriceTier(5000, 5999, 3500),
    PriceTier(6000, math.inf, 3750),
]


@pytest.fixture
def config():
    """Hand-built snapshot with the production values."""
    return PricingConfig(
        sqft_tiers=SQFT_TIERS,
        clean_and_seal_tiers=CLEAN_SEAL_TIERS,
        clean_and_seal_per_unit=2000,
        per_additional_hvac_charge=300,
        partner_discount_percent=20,
        zipcode_charges={'84003': 0, '84101': 50, '84010': 100},
        add_on_services={
            'dryer_vent': AddOnService('dryer_vent', 99, 'Dryer Vent Cleaning'),
            'bathroom_fan_cleaning': AddOnService(
                'bathroom_fan_cleaning', 49, 'Bathroom Fan Cleaning', hidden=True
            ),
        },
    )


@pytest.fixture
def data_dir(tmp_path) -> Path:
    """A writable copy of the shipped pricing tables."""
    target = tmp_path / "tables"
    shutil.copytree(get_default_data_dir(), target)
    return target


@pytest.fixture
def settings(data_dir) -> Settings:
    return Settings.load(data_dir=data_dir)


@pytest.fixture
def engine(settings) -> PricingEngine:
    return PricingEngine(settings)
