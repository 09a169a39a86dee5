import copy

import pytest

from duct_quote.engine import (
    PriceTier,
    PricingConfig,
    QuoteRequest,
    compute_quote,
    compute_zipcode_charge,
    get_clean_and_seal_price,
    get_sqft_charge,
)


def quote(config, sqft, hvac, zipcode, add_ons=()):
    return compute_quote(QuoteRequest(sqft, hvac, zipcode, add_ons), config)


def test_single_system_mid_size_home(config):
    result = quote(config, 1500, 0, "84003")

    assert result.sqft_charge == 450
    assert result.hvac_charge == 0
    assert result.zipcode_charge == 0
    assert result.subtotal == 450
    assert result.discount == 90
    assert result.total == 360
    assert result.clean_and_seal_price == 2500
    assert result.sqft_tier_label == "1000-1999 sqft"


def test_extra_systems_with_surcharge(config):
    result = quote(config, 2500, 2, "84101")

    assert result.sqft_charge == 500
    assert result.hvac_charge == 600
    assert result.zipcode_charge == 50
    assert result.subtotal == 1150
    assert result.discount == 230
    assert result.total == 920
    assert result.clean_and_seal_price == 6000


def test_large_home_unknown_zipcode(config):
    result = quote(config, 12000, 0, "99999")

    assert result.sqft_charge == 900
    assert result.zipcode_charge == 0
    assert result.clean_and_seal_price == 3750
    assert result.sqft_tier_label == "10000+ sqft"


def test_zero_square_feet(config):
    result = quote(config, 0, 0, "84010")

    assert result.sqft_charge == 400
    assert result.zipcode_charge == 100
    assert result.subtotal == 500
    assert result.discount == 100
    assert result.total == 400


@pytest.mark.parametrize("sqft, expected", [
    (0, 400), (999, 400), (1000, 450), (1999, 450), (2000, 500),
    (5500, 650), (9999, 850), (10000, 900), (250000, 900),
])
def test_sqft_tier_boundaries(config, sqft, expected):
    assert get_sqft_charge(sqft, config) == expected


def test_every_integer_sqft_hits_exactly_one_tier(config):
    for sqft in range(0, 12001, 7):
        matches = [t for t in config.sqft_tiers if t.contains(sqft)]
        assert len(matches) == 1
        assert quote(config, sqft, 0, "84003").sqft_charge == matches[0].price


def test_no_matching_tier_falls_back_to_last_tier(config):
    gappy = PricingConfig(
        sqft_tiers=(PriceTier(0, 999, 400), PriceTier(2000, 2999, 500)),
        clean_and_seal_tiers=(PriceTier(0, 999, 2500), PriceTier(2000, 2999, 2750)),
        clean_and_seal_per_unit=2000,
        per_additional_hvac_charge=300,
        partner_discount_percent=20,
    )

    result = quote(gappy, 1500, 0, "84003")

    assert result.sqft_charge == 500
    assert result.clean_and_seal_price == 2750
    assert "using highest tier" in result.trace[0].description
    assert result.warnings == ()


def test_fractional_sqft_between_integer_tiers_uses_fallback(config):
    # 999.5 sits between the 0-999 and 1000-1999 tiers
    assert get_sqft_charge(999.5, config) == 900


def test_identical_inputs_give_identical_breakdowns(config):
    first = quote(config, 3200, 1, "84101", ("dryer_vent",))
    second = quote(config, 3200, 1, "84101", ("dryer_vent",))

    assert first == second
    assert first.to_payload_dict() == second.to_payload_dict()


def test_config_is_not_mutated(config):
    before = copy.deepcopy(dict(config.zipcode_charges))
    tiers_before = config.sqft_tiers

    quote(config, 4100, 3, "84010", ("dryer_vent", "nope"))

    assert dict(config.zipcode_charges) == before
    assert config.sqft_tiers == tiers_before


@pytest.mark.parametrize("sqft, hvac, zipcode", [
    (0, 0, "84003"), (1500, 3, "84101"), (7200, 1, "84010"), (15000, 5, "00000"),
])
def test_subtotal_and_total_invariants(config, sqft, hvac, zipcode):
    result = quote(config, sqft, hvac, zipcode)

    assert result.subtotal == result.sqft_charge + result.hvac_charge + result.zipcode_charge
    assert result.discount == pytest.approx(result.subtotal * 20 / 100)
    assert result.total == result.subtotal - result.discount


def test_each_extra_system_adds_the_flat_charge(config):
    previous = quote(config, 2500, 0, "84101")
    for hvac in range(1, 8):
        current = quote(config, 2500, hvac, "84101")
        assert current.hvac_charge - previous.hvac_charge == 300
        assert current.total >= previous.total
        previous = current


def test_zipcode_normalization(config):
    assert compute_zipcode_charge("84-101", config) == 50
    assert compute_zipcode_charge(" 84 010 ", config) == 100
    assert compute_zipcode_charge("12345", config) == 0


def test_clean_and_seal_switches_model_with_extra_systems(config):
    # One system: tier price for the home size
    assert get_clean_and_seal_price(1500, 0, config) == 2500
    assert get_clean_and_seal_price(2500, 0, config) == 2750
    assert get_clean_and_seal_price(8000, 0, config) == 3750
    # Extra systems: every unit at the per-unit price, size no longer matters
    assert get_clean_and_seal_price(1500, 1, config) == 4000
    assert get_clean_and_seal_price(8000, 1, config) == 4000
    assert get_clean_and_seal_price(2500, 2, config) == 6000


def test_clean_and_seal_discount_uses_partner_percent(config):
    result = quote(config, 2500, 2, "84101")

    assert result.clean_and_seal_discount == 1200
    assert result.clean_and_seal_total == 4800


def test_zero_percent_discount(config):
    no_discount = PricingConfig(
        sqft_tiers=config.sqft_tiers,
        clean_and_seal_tiers=config.clean_and_seal_tiers,
        clean_and_seal_per_unit=2000,
        per_additional_hvac_charge=300,
        partner_discount_percent=0,
    )

    result = quote(no_discount, 1500, 0, "84003")

    assert result.discount == 0
    assert result.total == result.subtotal == 450
    assert result.clean_and_seal_total == 2500


def test_add_ons_are_itemized_outside_subtotal(config):
    result = quote(config, 1500, 0, "84003", ("dryer_vent", "bathroom_fan_cleaning"))

    assert [line.service_name for line in result.add_ons] == ["dryer_vent", "bathroom_fan_cleaning"]
    assert result.add_on_total == 148
    assert result.subtotal == 450
    assert result.total == 360


def test_unknown_add_on_is_skipped_with_warning(config):
    result = quote(config, 1500, 0, "84003", ("gutter_cleaning",))

    assert result.add_ons == ()
    assert result.add_on_total == 0
    assert result.warnings == ("Unknown add-on service 'gutter_cleaning' ignored",)


def test_trace_text_lists_each_step(config):
    text = quote(config, 2500, 2, "84101").get_trace_text()

    assert "→ Square Footage: Tier 2000-2999 sqft = $500.00" in text
    assert "→ Clean & Seal: 3 units × $2,000.00 = $6,000.00" in text


def test_payload_dict_uses_camel_case(config):
    payload = quote(config, 2500, 2, "84101").to_payload_dict()

    assert payload["sqftCharge"] == 500
    assert payload["cleanAndSealPrice"] == 6000
    assert payload["total"] == 920
    assert payload["addOns"] == []


def test_engine_calculates_from_loaded_tables(engine):
    result = engine.calculate(QuoteRequest(2500, 2, "84101"))

    assert result.total == 920
    assert result.clean_and_seal_price == 6000
    assert engine.get_zipcode_charge("84010") == 100
