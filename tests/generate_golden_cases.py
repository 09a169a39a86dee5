"""
Generate golden test cases by running the current quote engine on sample inputs.
This captures current behavior as a regression baseline.
"""
import os

import pandas as pd

from duct_quote.config.settings import Settings, get_default_data_dir
from duct_quote.engine import PricingEngine, QuoteRequest


def generate_golden_cases():
    engine = PricingEngine(Settings.load(data_dir=get_default_data_dir()))
    config = engine.config

    # Both ends of every sqft tier, plus one past the last bound
    sqft_values = []
    for tier in config.sqft_tiers:
        sqft_values.append(tier.min)
        if not tier.unbounded:
            sqft_values.append(tier.max)
    sqft_values.append(config.sqft_tiers[-1].min * 1.2)

    # One zipcode per distinct surcharge, plus one outside the table
    by_charge = {}
    for zipcode, charge in sorted(config.zipcode_charges.items()):
        by_charge.setdefault(charge, zipcode)
    zipcodes = list(by_charge.values()) + ['99999']

    print(f"Square footages to test: {sqft_values}")
    print(f"Zipcodes to test: {zipcodes}")
    print()

    cases = []
    for sqft in sqft_values:
        for hvac in [0, 2]:  # Tiered and per-unit Clean & Seal
            zipcode = zipcodes[len(cases) % len(zipcodes)]
            result = engine.calculate(QuoteRequest(sqft, hvac, zipcode))
            cases.append({
                'square_footage': sqft,
                'additional_hvac_systems': hvac,
                'zipcode': zipcode,
                'expected_sqft_charge': result.sqft_charge,
                'expected_hvac_charge': result.hvac_charge,
                'expected_zipcode_charge': result.zipcode_charge,
                'expected_subtotal': result.subtotal,
                'expected_discount': result.discount,
                'expected_total': result.total,
                'expected_clean_and_seal_price': result.clean_and_seal_price,
            })

    # Write to CSV
    df = pd.DataFrame(cases)
    output_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'golden_cases.csv')
    df.to_csv(output_path, index=False)
    print(f"Generated {len(cases)} golden test cases")
    print(f"Output: {output_path}")
    print()
    print("Sample cases:")
    print(df.head(10).to_string(index=False))


if __name__ == "__main__":
    generate_golden_cases()
