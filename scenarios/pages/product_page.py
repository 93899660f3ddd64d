from scenarios.pages.navigator import PageNavigator
from scenarios.run_data import ProductData

# ── ProductPage ───────────────────────────────────────────────────────────────

class ProductPage:
    PRODUCT_NAME    = ('locator', '.product-info-main .page-title')
    PRODUCT_PRICE   = ('locator', '.product-info-main .price-final_price .price')
    QUANTITY        = ('locator', '#qty')
    SIZE_OPTIONS    = ('locator', '.swatch-attribute.size .swatch-option')
    COLOR_OPTIONS   = ('locator', '.swatch-attribute.color .swatch-option')
    ADD_TO_CART     = ('locator', '#product-addtocart-button')
    ADD_TO_WISHLIST = ('locator', '.product-social-links .action.towishlist')
    SUCCESS_MESSAGE = ('locator', '.page.messages .message-success')

    def __init__(self, nav: PageNavigator):
        self.nav = nav
        self.page = nav.page
        self.timeouts = nav.timeouts

    async def select_size(self, size: str):
        option = self.page.locator(f'.swatch-attribute.size .swatch-option[option-label="{size}"]').first
        await option.click()

    async def select_color(self, color: str):
        option = self.page.locator(f'.swatch-attribute.color .swatch-option[option-label="{color}"]').first
        await option.click()

    async def set_quantity(self, quantity: int):
        await self.nav.safe_fill(self.QUANTITY, str(quantity))

    async def add_to_cart(self):
        await self.nav.safe_click(self.ADD_TO_CART)
        await self.nav.actionable(self.SUCCESS_MESSAGE, 'add_to_cart_confirmation')
        self.nav.log("Produkt dodany do koszyka")

    async def add_to_cart_with_options(self, size: str | None = None, color: str | None = None,
                                       quantity: int | None = None):
        if size:
            await self.select_size(size)
        if color:
            await self.select_color(color)
        if quantity:
            await self.set_quantity(quantity)
        await self.add_to_cart()

    async def add_to_cart_with_defaults(self) -> ProductData:
        """Pierwszy rozmiar i kolor, jesli produkt je ma."""
        product = ProductData(
            name=await self.get_product_name(),
            price=await self.get_product_price(),
            url=self.page.url,
        )
        for options in (self.SIZE_OPTIONS, self.COLOR_OPTIONS):
            swatches = self.nav.loc(options)
            if await swatches.count() > 0:
                await swatches.first.click()
        await self.add_to_cart()
        return product

    async def get_product_name(self) -> str:
        return await self.nav.get_text(self.PRODUCT_NAME) or ""

    async def get_product_price(self) -> float | None:
        return await self.nav.get_decimal(self.PRODUCT_PRICE)

    async def is_add_to_cart_enabled(self) -> bool:
        return await self.nav.loc(self.ADD_TO_CART).first.is_enabled()

    async def get_available_sizes(self) -> list[str]:
        labels = []
        for option in await self.nav.loc(self.SIZE_OPTIONS).all():
            label = await option.get_attribute('option-label')
            if label:
                labels.append(label)
        return labels

    async def add_to_wishlist(self):
        await self.nav.safe_click(self.ADD_TO_WISHLIST)
        await self.nav.await_load_complete()
