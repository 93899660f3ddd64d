import pytest

from core.errors import FieldNotFoundError, InvalidOptionError
from scenarios.pages.checkout_page import CheckoutPage, match_option
from scenarios.run_data import ShippingFormData
from scenarios.test_data import TestDataGenerator

PLACEHOLDER = ("", "Please select a region, state or province.")
COUNTRIES = [("", " "), ("US", "United States"), ("RO", "Romania"), ("DE", "Germany"), ("FR", "France")]
US_REGIONS = [PLACEHOLDER, ("12", "California"), ("43", "New York")]
RO_REGIONS = [
    PLACEHOLDER, ("278", "Alba"), ("280", "Arad"), ("281", "Bihor"),
    ("286", "Cluj"), ("297", "Dolj"), ("313", "Prahova"),
]

TEXT_FIELDS = (
    '#customer-email',
    'input[name="firstname"]',
    'input[name="lastname"]',
    'input[name="street[0]"]',
    'input[name="city"]',
    'input[name="postcode"]',
    'input[name="telephone"]',
)


@pytest.fixture
def form(fake_page):
    """Formularz jak w sklepie: po zmianie kraju lista regionow przychodzi po 300 ms."""
    for selector in TEXT_FIELDS:
        fake_page.locator(selector).visible = True

    country = fake_page.locator('select[name="country_id"]')
    country.visible = True
    country.options = list(COUNTRIES)
    country.value = "US"

    region_select = fake_page.locator('select[name="region_id"]')
    region_select.visible = True
    region_select.options = list(US_REGIONS)
    region_input = fake_page.locator('input[name="region"]')

    def on_country(value):
        def reload_regions():
            if value == "RO":
                region_select.options = list(RO_REGIONS)
                region_select.visible, region_input.visible = True, False
            elif value in ("DE", "FR"):
                region_select.visible, region_input.visible = False, True
            else:
                region_select.options = list(US_REGIONS)
                region_select.visible, region_input.visible = True, False

        fake_page.at(fake_page.clock.ms + 300, reload_regions)

    country.on_select = on_country
    return fake_page


@pytest.fixture
def checkout(nav):
    return CheckoutPage(nav, TestDataGenerator(seed=7))


class TestMatchOption:
    def test_label_then_case_insensitive_then_value(self):
        options = [("RO", "Romania"), ("US", "United States")]
        assert match_option(options, "Romania") == ("RO", "Romania")
        assert match_option(options, "united states") == ("US", "United States")
        assert match_option(options, "ro") == ("RO", "Romania")
        assert match_option(options, "Atlantis") is None


class TestFillShippingAddress:
    @pytest.mark.asyncio
    async def test_partial_update_leaves_other_fields_untouched(self, form, checkout):
        first_name = form.locator('input[name="firstname"]')
        first_name.value = "Ioana"

        await checkout.fill_shipping_address(ShippingFormData(city="Cluj-Napoca"))

        assert form.locator('input[name="city"]').value == "Cluj-Napoca"
        assert first_name.value == "Ioana"
        assert first_name.fills == []
        assert form.locator('#customer-email').fills == []
        assert form.locator('select[name="country_id"]').selected == []

    @pytest.mark.asyncio
    async def test_required_only_leaves_optional_fields_untouched(self, form, checkout):
        optional = [
            form.locator(selector)
            for selector in ('input[name="company"]', 'input[name="street[1]"]',
                             'input[name="postcode"]', 'input[name="telephone"]')
        ]
        for field in optional:
            field.visible = True
            field.value = "bez zmian"

        await checkout.fill_shipping_address(ShippingFormData(
            email="ioana@example.com", first_name="Ioana", last_name="Pop",
            street="Strada Memorandumului 28", city="Cluj-Napoca", country="Romania",
        ))

        assert form.locator('input[name="city"]').value == "Cluj-Napoca"
        assert form.locator('select[name="country_id"]').value == "RO"
        for field in optional:
            assert field.fills == []
            assert field.value == "bez zmian"

    @pytest.mark.asyncio
    async def test_romania_selects_cluj_after_region_list_reloads(self, form, checkout):
        await checkout.fill_shipping_address(ShippingFormData(country="Romania", state="Cluj"))

        assert form.locator('select[name="country_id"]').value == "RO"
        assert form.locator('select[name="region_id"]').value == "286"
        assert await checkout.region_value() == "286"
        assert form.clock.ms >= 300

    @pytest.mark.asyncio
    async def test_postcode_and_phone_filled_after_country(self, form, checkout):
        country = form.locator('select[name="country_id"]')
        phone = form.locator('input[name="telephone"]')
        postcode = form.locator('input[name="postcode"]')
        reload_regions = country.on_select
        seen_at_country = {}

        def on_country(value):
            seen_at_country["phone"] = list(phone.fills)
            seen_at_country["postcode"] = list(postcode.fills)
            reload_regions(value)

        country.on_select = on_country

        await checkout.fill_shipping_address(
            ShippingFormData(country="Romania", state="Cluj", zip_code="400000", phone="+40712345678"),
        )

        assert seen_at_country == {"phone": [], "postcode": []}
        assert phone.value == "+40712345678"
        assert postcode.value == "400000"

    @pytest.mark.asyncio
    async def test_region_before_list_reload_is_invalid(self, form, checkout):
        with pytest.raises(InvalidOptionError) as exc:
            await checkout.select_state("Cluj")

        assert exc.value.field == "state"
        assert "California" in exc.value.available

    @pytest.mark.asyncio
    async def test_select_state_retries_until_option_arrives(self, form, checkout):
        region_select = form.locator('select[name="region_id"]')
        form.at(400, lambda: setattr(region_select, "options", list(RO_REGIONS)))

        await checkout.select_state("Cluj")

        assert region_select.value == "286"
        assert form.clock.ms == pytest.approx(400)

    @pytest.mark.asyncio
    async def test_unknown_country_raises(self, form, checkout):
        with pytest.raises(InvalidOptionError) as exc:
            await checkout.fill_shipping_address(ShippingFormData(country="Atlantis"))

        assert exc.value.field == "country"
        assert "Romania" in exc.value.available

    @pytest.mark.asyncio
    async def test_country_matched_by_code(self, form, checkout):
        await checkout.select_country("RO")

        assert form.locator('select[name="country_id"]').value == "RO"

    @pytest.mark.asyncio
    async def test_same_country_is_not_reselected(self, form, checkout):
        await checkout.select_country("United States")

        assert form.locator('select[name="country_id"]').selected == []
        assert form.clock.ms == 0

    @pytest.mark.asyncio
    async def test_free_text_region(self, form, checkout):
        await checkout.fill_shipping_address(ShippingFormData(country="Germany", state="Bayern"))

        assert form.locator('input[name="region"]').value == "Bayern"
        assert await checkout.region_value() == "Bayern"

    @pytest.mark.asyncio
    async def test_switch_between_free_text_countries_settles_after_one_poll(self, form, checkout):
        await checkout.select_country("Germany")
        started = form.clock.ms

        await checkout.select_country("France")

        assert form.locator('select[name="country_id"]').value == "FR"
        assert form.clock.ms - started == pytest.approx(100)

    @pytest.mark.asyncio
    async def test_missing_required_field(self, form, checkout):
        form.locator('input[name="city"]').visible = False

        with pytest.raises(FieldNotFoundError) as exc:
            await checkout.fill_shipping_address(ShippingFormData(city="Cluj-Napoca"))

        assert exc.value.field == "city"


class TestDefaults:
    @pytest.mark.asyncio
    async def test_overrides_win_over_generated_data(self, form, checkout):
        data = await checkout.fill_shipping_address_with_defaults(
            ShippingFormData(city="Cluj-Napoca", state="Cluj"), locale="RO",
        )

        assert data.country == "Romania"
        assert data.city == "Cluj-Napoca"
        assert data.missing_required() == []
        assert form.locator('#customer-email').value == data.email
        assert form.locator('select[name="region_id"]').value == "286"

    @pytest.mark.asyncio
    async def test_romanian_variant(self, form, checkout):
        data = await checkout.fill_romanian_address(state="Dolj", city="Craiova")

        assert data.country == "Romania"
        assert data.state == "Dolj"
        assert form.locator('select[name="region_id"]').value == "297"
        assert form.locator('input[name="city"]').value == "Craiova"

    @pytest.mark.asyncio
    async def test_country_variant_drops_foreign_region(self, form, checkout):
        data = await checkout.fill_country_address("Germany", locale="en_US")

        assert data.country == "Germany"
        assert data.state is None
        assert form.locator('input[name="region"]').fills == []

    @pytest.mark.asyncio
    async def test_country_variant_by_code_keeps_generated_region(self, form, checkout):
        data = await checkout.fill_country_address("RO", locale="ro_RO")

        assert data.country == "RO"
        assert data.state in {"Alba", "Arad", "Bihor", "Cluj", "Dolj", "Prahova"}
        assert form.locator('select[name="country_id"]').value == "RO"
        assert form.locator('select[name="region_id"]').value == {label: value for value, label in RO_REGIONS}[data.state]
