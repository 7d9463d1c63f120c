"""Headless browser driver used by the login/logout flow.

``BrowserDriver`` is the small set of capabilities the session state machine needs.
``PlaywrightBrowser`` implements it on top of Playwright's async API and keeps exactly
one page under control: any page opened behind our back (pop-ups, target=_blank) is
closed as soon as it appears.
"""
import logging
from typing import Any, Protocol

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from automation.stealth import STEALTH_SCRIPT, context_options, launch_options
from config.settings import settings
from utils.errors import BrowserError
from utils.logging import get_logger


class BrowserDriver(Protocol):
    @property
    def url(self) -> str: ...

    async def navigate(self, url: str) -> None: ...

    async def fill_field(self, selector: str, value: str) -> None: ...

    async def submit(self, selector: str) -> None:
        """Click selector and wait for the resulting navigation, without a timeout."""
        ...

    async def submit_form(self, selector: str) -> None:
        """Submit the form matched by selector and wait for the resulting navigation."""
        ...

    async def query_marker(self, selector: str) -> bool: ...

    async def read_cookies(self) -> list[dict[str, Any]]: ...

    async def set_cookies(self, cookies: list[dict[str, Any]]) -> None: ...

    async def close(self) -> None: ...


class PlaywrightBrowser:
    """BrowserDriver over one Chromium context with a single controlled page."""

    def __init__(self, playwright, browser, context, page, logger: logging.Logger | None = None):
        self._playwright = playwright
        self._browser = browser
        self._context = context
        self._page = page
        self.logger = logger or get_logger(__name__)
        self._context.on("page", self._on_page)

    @classmethod
    async def launch(cls, headless: bool | None = None, logger: logging.Logger | None = None) -> "PlaywrightBrowser":
        if headless is None:
            headless = settings.BROWSER_HEADLESS
        p = await async_playwright().start()
        try:
            browser = await p.chromium.launch(**launch_options(headless))
            context = await browser.new_context(**context_options())
            await context.add_init_script(STEALTH_SCRIPT)
            page = context.pages[0] if context.pages else await context.new_page()
        except PlaywrightError as e:
            await p.stop()
            raise BrowserError(str(e)) from e
        return cls(p, browser, context, page, logger=logger)

    @property
    def page(self):
        return self._page

    @property
    def url(self) -> str:
        return self._page.url

    async def _on_page(self, page) -> None:
        if page is self._page:
            return
        self.logger.debug("Closing extra page %s", page.url)
        try:
            await page.close()
        except PlaywrightError as e:
            # The site may have closed it already.
            self.logger.debug("Extra page already closed: %s", e)

    async def ensure_single_page(self) -> None:
        """Close every page in the context except the controlled one."""
        for page in list(self._context.pages):
            if page is not self._page:
                await self._on_page(page)

    async def navigate(self, url: str) -> None:
        await self.ensure_single_page()
        try:
            await self._page.goto(url, wait_until="domcontentloaded", timeout=0)
        except PlaywrightError as e:
            raise BrowserError(str(e)) from e

    async def fill_field(self, selector: str, value: str) -> None:
        await self.ensure_single_page()
        try:
            await self._page.fill(selector, value)
        except PlaywrightError as e:
            raise BrowserError(str(e)) from e

    async def submit(self, selector: str) -> None:
        await self.ensure_single_page()
        try:
            async with self._page.expect_navigation(timeout=0):
                await self._page.click(selector)
        except PlaywrightError as e:
            raise BrowserError(str(e)) from e

    async def submit_form(self, selector: str) -> None:
        await self.ensure_single_page()
        try:
            async with self._page.expect_navigation(timeout=0):
                await self._page.eval_on_selector(selector, "form => form.submit()")
        except PlaywrightError as e:
            raise BrowserError(str(e)) from e

    async def query_marker(self, selector: str) -> bool:
        await self.ensure_single_page()
        try:
            return await self._page.query_selector(selector) is not None
        except PlaywrightError as e:
            raise BrowserError(str(e)) from e

    async def read_cookies(self) -> list[dict[str, Any]]:
        try:
            return await self._context.cookies()
        except PlaywrightError as e:
            raise BrowserError(str(e)) from e

    async def set_cookies(self, cookies: list[dict[str, Any]]) -> None:
        try:
            await self._context.add_cookies(cookies)
        except PlaywrightError as e:
            raise BrowserError(str(e)) from e

    async def close(self) -> None:
        """Close context, browser and the Playwright driver. Safe to call more than once."""
        context, browser, playwright = self._context, self._browser, self._playwright
        self._context = self._browser = self._playwright = None
        try:
            if context is not None:
                await context.close()
            if browser is not None:
                await browser.close()
        except PlaywrightError as e:
            self.logger.debug("Ignoring error while closing browser: %s", e)
        finally:
            if playwright is not None:
                await playwright.stop()
