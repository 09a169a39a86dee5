"""Tests for the CSV-backed admin services."""
import pytest

from duct_quote.engine import PricingEngine, QuoteRequest
from duct_quote.services.catalog_service import ServiceCatalogService, display_name, service_key
from duct_quote.services.company_service import CompanyService
from duct_quote.services.table_store import (
    CsvTable,
    DuplicateRecordError,
    RecordNotFoundError,
    format_amount,
)
from duct_quote.services.zipcode_service import ZipcodeService


@pytest.fixture
def zipcodes(settings):
    return ZipcodeService(settings.zipcode_charges)


@pytest.fixture
def catalog(settings):
    return ServiceCatalogService(settings.service_prices)


@pytest.fixture
def companies(settings):
    return CompanyService(settings.companies)


class TestCsvTable:

    def test_missing_file_reads_empty(self, tmp_path):
        assert CsvTable(tmp_path / "nope.csv", ["a"]).read_rows() == []

    def test_write_then_read(self, tmp_path):
        table = CsvTable(tmp_path / "sub" / "t.csv", ["a", "b"])
        table.write_rows([{"a": "1", "b": " x "}, {"a": "2"}])

        assert table.read_rows() == [{"a": "1", "b": "x"}, {"a": "2", "b": ""}]

    def test_format_amount_keeps_every_digit(self):
        assert format_amount(300.0) == "300"
        assert format_amount(12499.99) == "12499.99"
        assert format_amount(1234567.25) == "1234567.25"


class TestZipcodeService:

    def test_list_is_sorted(self, zipcodes):
        entries = zipcodes.list_zipcodes()

        assert len(entries) == 20
        assert [e.zipcode for e in entries] == sorted(e.zipcode for e in entries)

    def test_create_and_get(self, zipcodes):
        entry = zipcodes.create_zipcode("84-999", "35")

        assert entry.zipcode == "84999"
        assert entry.charge == 35
        assert entry.updated_at
        assert zipcodes.get_zipcode("84999").charge == 35

    def test_create_duplicate(self, zipcodes):
        with pytest.raises(DuplicateRecordError, match="already exists"):
            zipcodes.create_zipcode("84101", 10)

    @pytest.mark.parametrize("zipcode", ["8410", "abcde", ""])
    def test_create_rejects_bad_zipcode(self, zipcodes, zipcode):
        with pytest.raises(ValueError, match="exactly 5 digits"):
            zipcodes.create_zipcode(zipcode, 10)

    @pytest.mark.parametrize("charge", ["-1", "ten", None])
    def test_create_rejects_bad_charge(self, zipcodes, charge):
        with pytest.raises(ValueError, match="positive number"):
            zipcodes.create_zipcode("84999", charge)

    def test_update(self, zipcodes):
        zipcodes.update_zipcode("84101", 65)

        assert zipcodes.get_zipcode("84101").charge == 65

    def test_update_keeps_exact_charge(self, settings, zipcodes):
        zipcodes.update_zipcode("84101", 12499.99)

        assert ZipcodeService(settings.zipcode_charges).get_zipcode("84101").charge == 12499.99
        assert PricingEngine(settings).get_zipcode_charge("84101") == 12499.99

    def test_update_missing(self, zipcodes):
        with pytest.raises(RecordNotFoundError):
            zipcodes.update_zipcode("84999", 10)

    def test_delete(self, zipcodes):
        assert zipcodes.delete_zipcode("84101")
        assert zipcodes.get_zipcode("84101") is None

        with pytest.raises(RecordNotFoundError):
            zipcodes.delete_zipcode("84101")

    def test_grouped_by_charge(self, zipcodes):
        groups = zipcodes.grouped_by_charge()

        assert list(groups) == sorted(groups)
        assert groups[200.0] == ["84060"]
        assert groups[150.0] == ["84401", "84403"]

    def test_stats(self, zipcodes):
        assert zipcodes.get_stats() == {
            "total": 20,
            "distinct_charges": 7,
            "min_charge": 0.0,
            "max_charge": 200.0,
        }

    def test_changes_reach_engine_on_reload(self, settings, zipcodes):
        engine = PricingEngine(settings)
        zipcodes.create_zipcode("84999", 80)

        assert engine.get_zipcode_charge("84999") == 0
        engine.reload_data()
        assert engine.get_zipcode_charge("84999") == 80


class TestServiceCatalog:

    def test_service_key_and_display_name(self):
        assert service_key("Dryer Vent (Large)") == "dryer_vent_large"
        assert display_name("hvac_system_charge") == "Additional HVAC System Charge"
        assert display_name("attic_fan") == "Attic Fan"

    def test_base_prices_and_add_ons(self, catalog):
        assert [s.service_name for s in catalog.list_base_prices()] == [
            "hvac_system_charge", "duct_clean_seal_per_hvac", "partner_discount_percent",
        ]
        add_ons = catalog.list_add_ons(include_hidden=False)
        assert "bathroom_fan_cleaning" not in [s.service_name for s in add_ons]
        assert len(catalog.list_add_ons()) == 5

    def test_update_price_flows_into_quotes(self, settings, catalog):
        catalog.update_price("hvac_system_charge", "350")

        engine = PricingEngine(settings)
        assert engine.calculate(QuoteRequest(2500, 2, "84101")).hvac_charge == 700

    def test_discount_over_100_is_rejected(self, catalog):
        with pytest.raises(ValueError, match="between 0 and 100"):
            catalog.update_price("partner_discount_percent", 120)

    def test_update_keeps_exact_price(self, settings, catalog):
        catalog.update_price("dryer_vent", 1234567.25)

        assert catalog.get_service("dryer_vent").price == 1234567.25
        assert PricingEngine(settings).config.add_on_services["dryer_vent"].price == 1234567.25

    def test_rejected_update_leaves_table_unchanged(self, settings, catalog):
        before = settings.service_prices.read_bytes()

        with pytest.raises(ValueError, match="cannot be empty"):
            catalog.update_service("hvac_system_charge", {"price": 999, "description": "  "})
        with pytest.raises(ValueError, match="between 0 and 100"):
            catalog.update_service(
                "partner_discount_percent", {"price": 150, "description": "Partner discount"}
            )

        assert settings.service_prices.read_bytes() == before

    def test_update_missing_service(self, catalog):
        with pytest.raises(RecordNotFoundError):
            catalog.update_price("gutter_cleaning", 10)

    def test_create_add_on(self, catalog):
        service = catalog.create_add_on("Attic Fan", 75)

        assert service.service_name == "attic_fan"
        assert service.description == "Attic Fan"
        assert catalog.get_service("attic_fan").price == 75

    def test_create_add_on_duplicate(self, catalog):
        with pytest.raises(DuplicateRecordError, match="already exists"):
            catalog.create_add_on("Dryer Vent", 50)

    @pytest.mark.parametrize("name, price, message", [
        ("", 10, "Please enter a service name."),
        ("Attic Fan", "abc", "Please enter a valid price."),
        ("Attic Fan", -3, "Price must be a positive number."),
    ])
    def test_create_add_on_rejects_bad_input(self, catalog, name, price, message):
        with pytest.raises(ValueError, match=message):
            catalog.create_add_on(name, price)

    def test_update_description(self, catalog):
        service = catalog.update_service("dryer_vent", {"description": "Dryer Vent (any length)"})

        assert service.description == "Dryer Vent (any length)"
        assert service.price == 99

    def test_toggle_hidden(self, catalog):
        assert catalog.toggle_hidden("bathroom_fan_cleaning").is_hidden is False
        assert catalog.toggle_hidden("bathroom_fan_cleaning").is_hidden is True

    def test_base_prices_cannot_be_hidden_or_deleted(self, catalog):
        with pytest.raises(ValueError, match="cannot be hidden"):
            catalog.toggle_hidden("hvac_system_charge")
        with pytest.raises(ValueError, match="cannot be deleted"):
            catalog.delete_service("partner_discount_percent")

    def test_delete_add_on(self, catalog):
        assert catalog.delete_service("dryer_vent")
        assert catalog.get_service("dryer_vent") is None


class TestCompanyService:

    def test_list_sorted_by_name(self, companies):
        assert [c.name for c in companies.list_companies()] == [
            "Refresh Duct Cleaning", "Wasatch Home Services",
        ]

    def test_create_assigns_next_id(self, companies):
        company = companies.create_company("  Alpine Air  ")

        assert company.company_id == "3"
        assert company.name == "Alpine Air"
        assert companies.list_companies()[0].name == "Alpine Air"

    def test_duplicate_name_ignores_case(self, companies):
        with pytest.raises(DuplicateRecordError, match="already exists"):
            companies.create_company("refresh duct cleaning")

    def test_empty_name(self, companies):
        with pytest.raises(ValueError, match="Please enter a company name."):
            companies.create_company("   ")

    def test_rename(self, companies):
        companies.rename_company("1", "Refresh Duct Co")

        assert companies.get_company("1").name == "Refresh Duct Co"

    def test_rename_to_own_name_is_allowed(self, companies):
        assert companies.rename_company("1", "REFRESH DUCT CLEANING").name == "REFRESH DUCT CLEANING"

    def test_rename_onto_other_company(self, companies):
        with pytest.raises(DuplicateRecordError):
            companies.rename_company("1", "Wasatch Home Services")

    def test_delete(self, companies):
        companies.delete_company("2")

        assert companies.get_company("2") is None
        with pytest.raises(RecordNotFoundError):
            companies.delete_company("2")
