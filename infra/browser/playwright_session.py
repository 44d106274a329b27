from __future__ import annotations

from typing import Any, Mapping, Sequence
from urllib.parse import urlencode

from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from domain.models import AccountCredential, Capability, PostingField


POSTING_CARD_SELECTOR = ".base-card"
DETAIL_PANE_SELECTOR = ".jobs-search__job-details--container"

CAPABILITY_SELECTORS: dict[Capability, str] = {
    Capability.QUICK_APPLY: "button.jobs-apply-button",
    Capability.EMAIL_SELECT: 'select[aria-required="true"]',
    Capability.PHONE_COUNTRY_SELECT: 'select[id*="phoneNumber-country"]',
    Capability.PHONE_NUMBER_INPUT: 'input[aria-describedby*="phoneNumber-nationalNumber-error"]',
    Capability.SUBMIT: 'button[aria-label="Submit application"]',
    Capability.REVIEW: "xpath=//span[contains(text(), 'Review')]/ancestor::button",
    Capability.NEXT: "button[data-easy-apply-next-button]",
    Capability.DISMISS_LOGIN_OVERLAY: 'button[aria-label="Dismiss"]',
    Capability.DISMISS_UPSELL: "xpath=//button[contains(text(), 'No thanks')]",
}

POSTING_FIELD_SELECTORS: dict[PostingField, str] = {
    PostingField.TITLE: ".base-search-card__title",
    PostingField.EMPLOYER: ".base-search-card__subtitle",
    PostingField.LOCALITY: ".job-search-card__location",
    PostingField.RECENCY: "time",
}

DEFAULT_SEARCH_FILTERS: Mapping[str, str] = {
    "geoId": "101165590",
    "f_JT": "F,C",
    "f_TPR": "r86400",
    "f_WT": "2",
}

_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)
_LAUNCH_ARGS = ["--disable-blink-features=AutomationControlled"]
_DETAIL_PANE_SCRIPT = """
selector => {
    const pane = document.querySelector(selector);
    return !!pane && pane.offsetHeight > 0;
}
"""


class PlaywrightControl:
    """Implements ``ControlPort`` over a Playwright locator."""

    def __init__(self, locator: Any) -> None:
        self._locator = locator

    async def click(self) -> None:
        await self._locator.click()

    async def hover(self) -> None:
        await self._locator.hover()

    async def select_option(self, value: str) -> None:
        await self._locator.select_option(value)

    async def replace_text(self, value: str) -> None:
        await self._locator.click(click_count=3)
        await self._locator.press_sequentially(value)


class PlaywrightPostingHandle:
    """Implements ``PostingHandlePort`` for one result card."""

    def __init__(self, locator: Any, *, field_timeout_ms: int = 2_000) -> None:
        self._locator = locator
        self._field_timeout_ms = field_timeout_ms

    async def text(self) -> str:
        return await self._locator.inner_text() or ""

    async def hover(self) -> None:
        await self._locator.hover()

    async def click(self) -> None:
        await self._locator.click()

    async def read_field(self, field: PostingField) -> str:
        element = self._locator.locator(POSTING_FIELD_SELECTORS[field]).first
        text = await element.inner_text(timeout=self._field_timeout_ms)
        return text.strip()


class PlaywrightJobBoardSession:
    """
    Playwright-backed implementation of ``JobBoardSessionPort``.

    Requires ``playwright`` to be installed and browsers set up via
    ``playwright install chromium``.

    The session drives a single Chromium page. Call ``close()`` when
    finished. A ready-made page can be passed in instead of calling
    ``launch()``.
    """

    def __init__(
        self,
        *,
        base_url: str = "https://www.linkedin.com",
        headless: bool = False,
        search_filters: Mapping[str, str] | None = None,
        page: Any = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._headless = headless
        self._search_filters = dict(
            DEFAULT_SEARCH_FILTERS if search_filters is None else search_filters
        )
        self._playwright: Any = None
        self._browser: Any = None
        self._page: Any = page

    async def launch(self) -> None:
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self._headless,
            args=_LAUNCH_ARGS,
        )
        context = await self._browser.new_context(
            user_agent=_USER_AGENT,
            viewport={"width": 1280, "height": 800},
        )
        self._page = await context.new_page()

    async def close(self) -> None:
        if self._browser:
            await self._browser.close()
        if self._playwright:
            await self._playwright.stop()

    def _ensure_page(self) -> Any:
        if self._page is None:
            raise RuntimeError("Browser not launched. Call launch() first.")
        return self._page

    # -- session ------------------------------------------------------------

    async def login(self, credential: AccountCredential) -> None:
        page = self._ensure_page()
        await page.goto(f"{self._base_url}/login")
        await page.locator("#username").fill(credential.email)
        await page.locator("#password").fill(credential.password)
        await page.locator('button[type="submit"]').click()
        await page.wait_for_load_state("networkidle", timeout=30_000)

    # -- results page -------------------------------------------------------

    def search_url(self, search_term: str, location: str) -> str:
        query = {"keywords": search_term, "location": location, **self._search_filters}
        return f"{self._base_url}/jobs/search/?{urlencode(query)}"

    async def open_search(self, search_term: str, location: str) -> None:
        page = self._ensure_page()
        await page.goto(self.search_url(search_term, location), wait_until="domcontentloaded")

    async def wait_for_postings(self, timeout_ms: int) -> bool:
        page = self._ensure_page()
        try:
            await page.wait_for_selector(POSTING_CARD_SELECTOR, timeout=timeout_ms)
        except PlaywrightTimeoutError:
            return False
        return True

    async def list_postings(self) -> Sequence[PlaywrightPostingHandle]:
        cards = self._ensure_page().locator(POSTING_CARD_SELECTOR)
        count = await cards.count()
        return [PlaywrightPostingHandle(cards.nth(i)) for i in range(count)]

    async def wait_for_detail_pane(self, timeout_ms: int) -> bool:
        page = self._ensure_page()
        try:
            await page.wait_for_function(
                _DETAIL_PANE_SCRIPT,
                arg=DETAIL_PANE_SELECTOR,
                timeout=timeout_ms,
            )
        except PlaywrightTimeoutError:
            return False
        return True

    # -- capability probes --------------------------------------------------

    async def probe(self, capability: Capability) -> PlaywrightControl | None:
        locator = self._ensure_page().locator(CAPABILITY_SELECTORS[capability])
        if await locator.count() == 0:
            return None
        return PlaywrightControl(locator.first)
