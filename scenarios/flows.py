"""
Flow = deklaratywna sekwencja wywolan page objects.

Te same flow odpala CLI (main.py → SuiteExecutor) i testy e2e. Kazdy krok
idzie przez `shop.step(...)`, wiec w bazie widac na ktorym etapie padl run.
"""
from typing import Awaitable, Callable

from scenarios.pages.storefront import Storefront
from scenarios.run_data import OrderData, ProductData, ShippingFormData


async def _add_product(shop: Storefront, category: str, index: int) -> ProductData:
    async with shop.step(f"listing:{category}#{index}"):
        await shop.home.navigate_to_category(category)
        await shop.listing.select_product_by_index(index)

    async with shop.step("add_to_cart"):
        product = await shop.product.add_to_cart_with_defaults()
        await shop.cart.wait_for_minicart_update()
    return product


async def _checkout(shop: Storefront, order: OrderData, overrides: ShippingFormData, locale: str) -> OrderData:
    async with shop.step("cart_access"):
        order.cart_route = await shop.cart.proceed_to_checkout()

    async with shop.step("shipping_address"):
        await shop.checkout.wait_for_shipping_form_ready()
        customer = await shop.checkout.fill_shipping_address_with_defaults(overrides, locale=locale)
        order.customer_email = customer.email

    async with shop.step("shipping_method"):
        await shop.checkout.select_shipping_method()
        await shop.checkout.proceed_to_payment()

    async with shop.step("place_order"):
        await shop.checkout.select_payment_method()
        await shop.checkout.place_order()

    async with shop.step("confirmation"):
        await shop.confirmation.wait_for_confirmation_page()
        order.order_number = await shop.confirmation.get_order_number()
        order.thank_you_message = await shop.confirmation.get_thank_you_message()

    return order


# ── Flows ─────────────────────────────────────────────────────────────────────

async def order_single_product(
    shop: Storefront,
    locale: str = "RO",
    city: str = "Cluj-Napoca",
    state: str = "Cluj",
    category: str = "men",
) -> OrderData:
    """Jeden produkt → checkout → zamowienie z adresem w Rumunii."""
    async with shop.step("home"):
        await shop.home.navigate_to_home()

    product = await _add_product(shop, category, 0)
    order = OrderData(products=[product])
    order.item_count = await shop.cart.get_minicart_item_count()

    return await _checkout(shop, order, ShippingFormData(city=city, state=state), locale)


async def order_multiple_products(
    shop: Storefront,
    categories: tuple[str, ...] = ("men", "women"),
    count: int = 3,
    locale: str | None = None,
) -> OrderData:
    """`count` roznych produktow na przemian z kategorii → pelny koszyk → zamowienie."""
    async with shop.step("home"):
        await shop.home.navigate_to_home()

    order = OrderData()
    for i in range(count):
        category = categories[i % len(categories)]
        order.products.append(await _add_product(shop, category, i // len(categories)))

    async with shop.step("cart"):
        await shop.cart.navigate_to_cart()
        order.item_count = await shop.cart.get_cart_item_count()

    return await _checkout(shop, order, ShippingFormData(), locale or shop.context.locale)


async def remove_only_item(shop: Storefront, category: str = "men") -> OrderData:
    """Dodaj jeden produkt, usun go z pelnego koszyka → koszyk pusty."""
    async with shop.step("home"):
        await shop.home.navigate_to_home()

    product = await _add_product(shop, category, 0)

    async with shop.step("remove_item"):
        await shop.cart.navigate_to_cart()
        await shop.cart.remove_item(0)

    return OrderData(products=[product], item_count=await shop.cart.get_cart_item_count())


Flow = Callable[..., Awaitable[OrderData]]

FLOWS: dict[str, Flow] = {
    "order_single_product": order_single_product,
    "order_multiple_products": order_multiple_products,
    "remove_only_item": remove_only_item,
}
