"""
CheckoutPage — formularz adresu, metody dostawy i platnosci, zlozenie zamowienia.

Kolejnosc wypelniania adresu ma znaczenie:
  pola tekstowe → kraj → (lista regionow sie przeladowuje) → region → kod / telefon
Region wybrany przed przeladowaniem listy = zly region albo brak opcji.
"""
import re
from dataclasses import replace

from playwright.async_api import Locator

from core.errors import FieldNotFoundError, InvalidOptionError
from scenarios.pages.navigator import PageNavigator
from scenarios.run_data import ShippingFormData
from scenarios.test_data import LOCALES, TestDataGenerator, normalize_locale

CHECKOUT_URL = re.compile(r"/checkout/(?!cart)")
OPTIONS_SCRIPT = "el => Array.from(el.options).map(o => [o.value, o.text.trim()])"
POLL_MS = 100
FREE_TEXT_REGION = (False, (), True)


def match_option(options: list[tuple[str, str]], wanted: str) -> tuple[str, str] | None:
    """Najpierw etykieta (dokladnie, potem bez wielkosci liter), na koncu value ('RO')."""
    for value, label in options:
        if label == wanted:
            return value, label
    lowered = wanted.strip().lower()
    for value, label in options:
        if label.lower() == lowered:
            return value, label
    for value, label in options:
        if value.lower() == lowered:
            return value, label
    return None


class CheckoutPage:
    EMAIL          = ('locator', '#customer-email')
    FIRST_NAME     = ('locator', 'input[name="firstname"]')
    LAST_NAME      = ('locator', 'input[name="lastname"]')
    COMPANY        = ('locator', 'input[name="company"]')
    STREET         = ('locator', 'input[name="street[0]"]')
    STREET_LINE2   = ('locator', 'input[name="street[1]"]')
    CITY           = ('locator', 'input[name="city"]')
    COUNTRY        = ('locator', 'select[name="country_id"]')
    REGION_SELECT  = ('locator', 'select[name="region_id"]')
    REGION_INPUT   = ('locator', 'input[name="region"]')
    ZIP_CODE       = ('locator', 'input[name="postcode"]')
    PHONE          = ('locator', 'input[name="telephone"]')

    SHIPPING_FORM     = ('locator', '#co-shipping-form')
    SHIPPING_METHODS  = ('locator', '#checkout-shipping-method-load')
    SHIPPING_RADIO    = ('locator', '#checkout-shipping-method-load input[type="radio"]')
    SHIPPING_ROW      = ('locator', '#checkout-shipping-method-load tbody tr')
    BTN_NEXT          = ('locator', '#shipping-method-buttons-container button.continue')
    PAYMENT_METHODS   = ('locator', '.payment-methods')
    PAYMENT_RADIO     = ('locator', '.payment-methods input[type="radio"]')
    BTN_PLACE_ORDER   = ('locator', '.payment-method._active button.action.primary.checkout')
    ORDER_TOTAL       = ('locator', '.opc-block-summary .grand.totals .price')
    SAME_AS_SHIPPING  = (
        ('locator', '#billing-address-same-as-shipping-checkmo'),
        ('locator', 'input[name="billing-address-same-as-shipping"]'),
    )
    CREATE_ACCOUNT    = ('locator', '#create_account')
    PASSWORD          = ('locator', '#customer-password')
    PASSWORD_CONFIRM  = ('locator', '#password-confirmation')

    # Pola tekstowe: przed krajem i po kraju (kod / telefon sklep waliduje wg kraju)
    FIELDS_BEFORE_COUNTRY = (
        ('email', EMAIL),
        ('first_name', FIRST_NAME),
        ('last_name', LAST_NAME),
        ('company', COMPANY),
        ('street', STREET),
        ('street_line2', STREET_LINE2),
        ('city', CITY),
    )
    FIELDS_AFTER_COUNTRY = (
        ('zip_code', ZIP_CODE),
        ('phone', PHONE),
    )

    def __init__(self, nav: PageNavigator, data_generator: TestDataGenerator | None = None):
        self.nav = nav
        self.page = nav.page
        self.timeouts = nav.timeouts
        self.data_generator = data_generator or TestDataGenerator()

    # ── Ladowanie ─────────────────────────────────────────────────────────────

    async def wait_for_checkout_page_load(self):
        await self.nav.actionable(self.EMAIL, 'email', self.timeouts.navigation_ms)
        await self.nav.await_spinner_hidden()

    async def wait_for_shipping_form_ready(self):
        await self.wait_for_checkout_page_load()
        await self.nav.actionable(self.FIRST_NAME, 'first_name')
        await self.nav.wait_until_stable(self.SHIPPING_FORM)

    # ── Adres ─────────────────────────────────────────────────────────────────

    async def fill_shipping_address(self, data: ShippingFormData) -> None:
        """
        Wypelnia tylko pola ustawione w `data`. Pole None zostaje z wartoscia z DOM.
        """
        for field_name, selector in self.FIELDS_BEFORE_COUNTRY:
            await self._fill_field(field_name, selector, getattr(data, field_name))

        if data.country:
            await self.select_country(data.country)

        if data.state:
            await self.select_state(data.state)

        for field_name, selector in self.FIELDS_AFTER_COUNTRY:
            await self._fill_field(field_name, selector, getattr(data, field_name))

        await self.nav.await_spinner_hidden()

    async def fill_shipping_address_with_defaults(
        self, overrides: ShippingFormData | None = None, locale: str | None = None
    ) -> ShippingFormData:
        """Brakujace pola uzupelnia wygenerowanymi danymi. Zwraca to co wpisano."""
        defaults = self.data_generator.get_test_customer_data(locale or self.nav.context.locale)
        data = overrides.merged_over(defaults) if overrides else defaults
        await self.fill_shipping_address(data)
        return data

    async def fill_country_address(
        self,
        country: str,
        state: str | None = None,
        overrides: ShippingFormData | None = None,
        locale: str | None = None,
    ) -> ShippingFormData:
        """Kraj zablokowany, region do nadpisania."""
        locale = locale or self.nav.context.locale
        defaults = self.data_generator.get_test_customer_data(locale)
        profile = LOCALES[normalize_locale(locale)]
        if match_option([(profile.country_code, profile.country)], country) is None:
            # region z innego kraju i tak nie istnieje w liscie
            defaults = replace(defaults, state=None)

        data = replace(overrides or ShippingFormData(), country=country)
        if state is not None:
            data = replace(data, state=state)
        data = data.merged_over(defaults)

        await self.fill_shipping_address(data)
        return data

    async def fill_romanian_address(self, state: str = "Cluj", **overrides) -> ShippingFormData:
        return await self.fill_country_address(
            "Romania", state, ShippingFormData(**overrides), locale="ro_RO",
        )

    async def select_country(self, country: str) -> None:
        select = await self.nav.actionable(self.COUNTRY, 'country')
        options = await self._options(select)
        option = match_option(options, country)
        if option is None:
            raise InvalidOptionError('country', country, [label for _, label in options])

        value, label = option
        if await select.input_value() == value:
            self.nav.log(f"Kraj '{label}' juz wybrany")
            return

        before = await self._region_signature()
        await select.select_option(value=value)
        self.nav.log(f"Wybrano kraj: {label} ({value})")
        await self._await_region_refresh(before)

    async def select_state(self, state: str) -> None:
        """
        Dropdown → wybierz po etykiecie, ponawiajac az lista sie zaladuje.
        Pole tekstowe (kraje bez listy regionow) → wpisz.
        """
        kind, control = await self._region_control()
        if kind == 'input':
            await control.fill(state)
            self.nav.log(f"Region wpisany recznie: {state}")
            return

        waited = 0
        while True:
            options = await self._options(control)
            option = match_option(options, state)
            if option is not None:
                await control.select_option(value=option[0])
                self.nav.log(f"Wybrano region: {option[1]} ({option[0]})")
                return
            if waited >= self.timeouts.region_ms:
                raise InvalidOptionError('state', state, [label for _, label in options])
            await self.page.wait_for_timeout(POLL_MS)
            waited += POLL_MS

    async def field_value(self, field_name: str) -> str:
        selectors = dict(self.FIELDS_BEFORE_COUNTRY + self.FIELDS_AFTER_COUNTRY)
        selectors['country'] = self.COUNTRY
        if field_name == 'state':
            return await self.region_value()
        return await self.nav.loc(selectors[field_name]).first.input_value()

    async def region_value(self) -> str:
        region_select = self.nav.loc(self.REGION_SELECT).first
        if await region_select.is_visible():
            return await region_select.input_value()
        return await self.nav.loc(self.REGION_INPUT).first.input_value()

    # ── Dostawa / platnosc ────────────────────────────────────────────────────

    async def wait_for_shipping_methods(self):
        await self.nav.wait_until_stable(self.SHIPPING_METHODS)
        await self.nav.await_spinner_hidden()

    async def select_shipping_method(self, method_name: str | None = None) -> bool:
        await self.wait_for_shipping_methods()

        if method_name:
            row = self.nav.loc(self.SHIPPING_ROW).filter(has_text=method_name).first
            radio = row.locator('input[type="radio"]')
        else:
            radios = self.nav.loc(self.SHIPPING_RADIO)
            if await radios.count() == 0:
                self.nav.log("Brak metod dostawy do wyboru")
                return False
            radio = radios.first

        await radio.check()
        await self.nav.await_spinner_hidden()
        return True

    async def proceed_to_payment(self):
        await self.nav.safe_click(self.BTN_NEXT)
        await self.nav.await_spinner_hidden()
        await self.nav.actionable(self.PAYMENT_METHODS, 'payment_methods', self.timeouts.navigation_ms)

    async def select_payment_method(self, method_name: str | None = None) -> bool:
        if method_name:
            radio = self.page.locator(f'.payment-methods input[value*="{method_name}"]').first
        else:
            radios = self.nav.loc(self.PAYMENT_RADIO)
            if await radios.count() == 0:
                self.nav.log("Brak metod platnosci do wyboru")
                return False
            radio = radios.first

        # Przy jednej metodzie sklep chowa radio i zaznacza ja sam
        if not await radio.is_visible():
            return False

        await radio.check()
        await self.nav.await_spinner_hidden()
        return True

    async def place_order(self):
        button = await self.nav.actionable(self.BTN_PLACE_ORDER, 'place_order')
        await self.nav.await_spinner_hidden()
        await button.click()
        await self.nav.await_load_complete()

    async def is_place_order_enabled(self) -> bool:
        return await self.nav.loc(self.BTN_PLACE_ORDER).first.is_enabled()

    async def get_order_summary_total(self) -> str:
        return await self.nav.get_text(self.ORDER_TOTAL) or ""

    async def set_billing_same_as_shipping(self, enabled: bool = True):
        checkbox = await self.nav.first_visible(self.SAME_AS_SHIPPING)
        if checkbox is None:
            raise FieldNotFoundError('billing_same_as_shipping')
        if enabled:
            await checkbox.check()
        else:
            await checkbox.uncheck()
        await self.nav.await_spinner_hidden()

    async def enable_create_account(self, enabled: bool = True, password: str | None = None):
        checkbox = await self.nav.actionable(self.CREATE_ACCOUNT, 'create_account')
        if not enabled:
            await checkbox.uncheck()
            return
        await checkbox.check()
        if password:
            await (await self.nav.actionable(self.PASSWORD, 'password')).fill(password)
            await (await self.nav.actionable(self.PASSWORD_CONFIRM, 'password_confirmation')).fill(password)

    # ── Wewnetrzne ────────────────────────────────────────────────────────────

    async def _fill_field(self, field_name: str, selector: tuple, value: str | None):
        if value is None:
            return
        field = await self.nav.actionable(selector, field_name)
        await field.fill(value)

    async def _options(self, select: Locator) -> list[tuple[str, str]]:
        # Placeholder "Please select a region..." ma puste value
        return [(value, label) for value, label in await select.evaluate(OPTIONS_SCRIPT) if value]

    async def _region_signature(self) -> tuple:
        region_select = self.nav.loc(self.REGION_SELECT).first
        region_input = self.nav.loc(self.REGION_INPUT).first
        select_visible = await region_select.is_visible()
        values = tuple(value for value, _ in await self._options(region_select)) if select_visible else ()
        return select_visible, values, await region_input.is_visible()

    async def _await_region_refresh(self, before: tuple):
        """
        Zamiast stalej pauzy po zmianie kraju: czekamy az lista regionow
        faktycznie sie zmieni (albo pojawi sie pole tekstowe).
        """
        waited = 0
        while waited < self.timeouts.settle_ms:
            await self.page.wait_for_timeout(POLL_MS)
            waited += POLL_MS
            after = await self._region_signature()
            select_visible, _, input_visible = after
            if after != before and (select_visible or input_visible):
                return
            if after == before == FREE_TEXT_REGION:
                # pole tekstowe przed i po zmianie kraju, nie ma listy do przeladowania
                return
        self.nav.log(f"Kontrolka regionu bez zmian po {self.timeouts.settle_ms} ms od wyboru kraju")

    async def _region_control(self) -> tuple[str, Locator]:
        region_select = self.nav.loc(self.REGION_SELECT).first
        region_input = self.nav.loc(self.REGION_INPUT).first
        waited = 0
        while True:
            if await region_select.is_visible():
                return 'select', region_select
            if await region_input.is_visible():
                return 'input', region_input
            if waited >= self.timeouts.region_ms:
                raise FieldNotFoundError('state', "ani select regionu, ani pole tekstowe")
            await self.page.wait_for_timeout(POLL_MS)
            waited += POLL_MS
