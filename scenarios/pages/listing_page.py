from core.retry import retry_action
from scenarios.pages.navigator import PageNavigator, parse_price
from scenarios.run_data import ProductData

# ── ListingPage ───────────────────────────────────────────────────────────────

class ListingPage:
    PRODUCT_ITEM  = ('locator', '.products-grid li.product-item')
    PRODUCT_LINK  = ('locator', '.products-grid .product-item-link')
    PRODUCT_PRICE = ('locator', '.products-grid .product-item .price')
    SORTER        = ('locator', '.toolbar-products #sorter')

    def __init__(self, nav: PageNavigator):
        self.nav = nav
        self.page = nav.page
        self.timeouts = nav.timeouts

    async def select_product(self, name: str):
        link = self.nav.loc(self.PRODUCT_LINK).filter(has_text=name).first
        await self._open(link)

    async def select_product_by_index(self, index: int):
        """Grid doladowuje obrazki i przesuwa kafelki — klikamy dopiero stabilny link."""
        link = self.nav.loc(self.PRODUCT_ITEM).nth(index).locator('.product-item-link')
        await link.wait_for(state='visible', timeout=self.timeouts.action_ms)
        await self.nav.scroll_into_view(link)

        async def click_when_stable():
            await self.nav.stability.wait_until_stable(link, self.timeouts.action_ms)
            await link.click(timeout=self.timeouts.action_ms)

        # kafelek potrafi sie przesunac miedzy pomiarem a klikiem
        await retry_action(click_when_stable)
        await self.nav.await_load_complete()
        await self.nav.dismiss_consent()

    async def select_product_by_name(self, name: str):
        link = self.page.locator(f'.products-grid .product-item-link[title*="{name}"]').first
        if await link.count() == 0:
            link = self.nav.loc(self.PRODUCT_LINK).filter(has_text=name).first
        await self._open(link)

    async def get_product_count(self) -> int:
        return await self.nav.loc(self.PRODUCT_ITEM).count()

    async def get_product_name_by_index(self, index: int) -> str:
        text = await self.nav.loc(self.PRODUCT_LINK).nth(index).text_content()
        return (text or "").strip()

    async def get_product_price_by_index(self, index: int) -> float | None:
        item = self.nav.loc(self.PRODUCT_ITEM).nth(index)
        return parse_price(await item.locator('.price').first.text_content())

    async def sort_by(self, label: str):
        await self.nav.loc(self.SORTER).first.select_option(label=label)
        await self.nav.await_load_complete()

    async def get_products_in_price_range(self, low: float, high: float) -> list[ProductData]:
        products = []
        for item in await self.nav.loc(self.PRODUCT_ITEM).all():
            link = item.locator('.product-item-link').first
            price = parse_price(await item.locator('.price').first.text_content())
            if price is None or not low <= price <= high:
                continue
            products.append(ProductData(
                name=((await link.text_content()) or "").strip(),
                price=price,
                url=await link.get_attribute('href'),
            ))
        return products

    async def _open(self, link):
        await link.click()
        await self.nav.await_load_complete()
        await self.nav.dismiss_consent()
