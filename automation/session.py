"""AtCoder sign-in / sign-out through a headless browser.

The site has no login API, so ``connect`` drives the HTML login form, then lifts the
``REVEL_SESSION`` cookie out of the browser and hands it to the HTTP adapter. Cookies
are cached per user so the next ``connect`` can usually skip the form entirely.
"""
import logging
import weakref
from typing import Any, Awaitable, Callable

from automation.browser_session import BrowserDriver, PlaywrightBrowser
from integrations.routes import Routes
from utils.cookies import CookieStore, to_browser_cookies
from utils.errors import AtCoderError, BrowserError, LoginRejected, LogoutRejected, MissingAccess
from utils.logging import get_logger, log_extra

SESSION_COOKIE = "REVEL_SESSION"

USERNAME_FIELD = 'input[name="username"]'
PASSWORD_FIELD = 'input[name="password"]'
SUBMIT_BUTTON = 'button[type="submit"]'
LOGOUT_LINK = "a[href*=logout]"
LOGOUT_FORM = 'form[name="form_logout"]'

BrowserFactory = Callable[[], Awaitable[BrowserDriver]]


def find_session_cookie(cookies: list[dict[str, Any]]) -> dict[str, Any] | None:
    return next((c for c in cookies if c.get("name") == SESSION_COOKIE), None)


class Session:
    """One authenticated identity for a client. ``id`` is the session token, None when signed out."""

    def __init__(
        self,
        client,
        cookie_store: CookieStore | None = None,
        browser_factory: BrowserFactory | None = None,
        logger: logging.Logger | None = None,
    ):
        self._client_ref = weakref.ref(client)
        self.cookie_store = cookie_store or CookieStore()
        self.browser_factory = browser_factory or PlaywrightBrowser.launch
        self.logger = logger or get_logger(__name__)
        self.id: str | None = None

    @property
    def client(self):
        return self._client_ref()

    @property
    def connected(self) -> bool:
        return self.id is not None

    async def connect(self, username: str, password: str) -> None:
        """Sign in (or reuse cached cookies), persist the cookies and keep the token.

        Raises LoginRejected if the form could not be submitted and MissingAccess if it was
        submitted but the site still shows us signed out. Navigation waits are unbounded;
        wrap in asyncio.wait_for for a deadline. A failed attempt leaves the session signed out.
        """
        try:
            cookies = await self._sign_in(username, password)
        except AtCoderError:
            self._forget_token()
            raise

        if self.cookie_store.save(username, cookies):
            self.logger.info("Session for %s saved to %s", username, self.cookie_store.path_for(username))

        self.id = find_session_cookie(cookies)["value"]
        log_extra(self.logger, "Session established", username=username, cookies=len(cookies))
        client = self.client
        if client is not None:
            client.username = username
            client.adapter.set_session_token(self.id)

    async def _sign_in(self, username: str, password: str) -> list[dict[str, Any]]:
        """Run the browser part of connect and return the signed-in cookies."""
        try:
            browser = await self._restore(username)
        except BrowserError as e:
            raise LoginRejected(username) from e
        try:
            if not await self._is_signed_in(browser):
                try:
                    await browser.fill_field(USERNAME_FIELD, username)
                    await browser.fill_field(PASSWORD_FIELD, password)
                    await browser.submit(SUBMIT_BUTTON)
                except BrowserError as e:
                    log_extra(self.logger, "Login form failed", logging.WARNING, username=username, error=str(e))
                    raise LoginRejected(username) from e
                self.logger.info("Submitted credentials for %s", username)

            if not await self._is_signed_in(browser):
                raise MissingAccess(username)
            self.logger.info("Signed in as %s", username)

            return await browser.read_cookies()
        finally:
            await browser.close()

    async def destroy(self, username: str | None = None) -> None:
        """Sign out on the site, wipe the cached cookies and forget the token."""
        if username is None:
            client = self.client
            username = (client.username if client is not None else None) or ""

        try:
            browser = await self._restore(username)
        except BrowserError as e:
            raise LogoutRejected(username) from e
        try:
            if await self._is_signed_in(browser):
                try:
                    await browser.submit_form(LOGOUT_FORM)
                except BrowserError as e:
                    log_extra(self.logger, "Logout form failed", logging.WARNING, username=username, error=str(e))
                    raise LogoutRejected(username) from e
        finally:
            await browser.close()

        self.cookie_store.clear(username)
        self._forget_token()
        log_extra(self.logger, "Session destroyed", username=username)

    def _forget_token(self) -> None:
        self.id = None
        client = self.client
        if client is not None:
            client.adapter.clear_session_token()

    async def _is_signed_in(self, browser: BrowserDriver) -> bool:
        # The logout link alone shows up on cached pages; require the cookie as well.
        cookies = await browser.read_cookies()
        return await browser.query_marker(LOGOUT_LINK) and find_session_cookie(cookies) is not None

    async def _restore(self, username: str) -> BrowserDriver:
        """Launch a browser, apply any cached cookies and open the login page."""
        cookies = self.cookie_store.load(username)
        login_url = self._login_url()
        browser = await self.browser_factory()
        try:
            if cookies:
                await browser.set_cookies(to_browser_cookies(cookies))
                self.logger.info("Restored cached session for %s", username)
            if browser.url != login_url:
                await browser.navigate(login_url)
        except Exception:
            await browser.close()
            raise
        return browser

    def _login_url(self) -> str:
        client = self.client
        base_url = client.adapter.base_url if client is not None else None
        return Routes(base_url).login
