"""AtCoder HTTP client: default headers, the session cookie header, and the client facade."""
import logging
import re

import httpx

from automation.session import SESSION_COOKIE, BrowserFactory, Session
from config.settings import settings
from integrations.routes import Routes
from models.problem import ContestProblem
from utils.cookies import CookieStore
from utils.logging import get_logger

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; atcoder-client)",
    "Accept-Language": "en-US,en;q=0.9",
}

_SESSION_PAIR = re.compile(rf"{SESSION_COOKIE}=[^;]*;?\s*")


class HTTPAdapter:
    """Plain HTTP access to the site. Holds the default headers every request carries."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: logging.Logger | None = None,
    ):
        self.base_url = (base_url or settings.ATCODER_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT
        self.headers: dict[str, str] = dict(DEFAULT_HEADERS)
        self.routes = Routes(self.base_url)
        self._transport = transport
        self.logger = logger or get_logger(__name__)

    def set_session_token(self, token: str) -> None:
        cookie = _SESSION_PAIR.sub("", self.headers.get("Cookie", ""))
        self.headers["Cookie"] = f"{cookie}{SESSION_COOKIE}={token};"

    def clear_session_token(self) -> None:
        cookie = _SESSION_PAIR.sub("", self.headers.get("Cookie", ""))
        if cookie:
            self.headers["Cookie"] = cookie
        else:
            self.headers.pop("Cookie", None)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=self.headers,
            timeout=self.timeout,
            follow_redirects=True,
            transport=self._transport,
        )

    async def get(self, url: str) -> httpx.Response:
        async with self._client() as client:
            return await client.get(url)

    async def get_text(self, url: str) -> str:
        try:
            r = await self.get(url)
            r.raise_for_status()
            return r.text
        except httpx.HTTPError as e:
            self.logger.warning("GET %s failed: %s", url, e)
            raise

    async def status(self, url: str) -> int:
        r = await self.get(url)
        return r.status_code


class AtCoderClient:
    """Entry point: owns the HTTP adapter and the (single) browser-backed session."""

    def __init__(
        self,
        username: str | None = None,
        *,
        cookie_dir: str | None = None,
        adapter: HTTPAdapter | None = None,
        browser_factory: BrowserFactory | None = None,
        logger: logging.Logger | None = None,
    ):
        self.username = username
        self.logger = logger or get_logger(__name__)
        self.adapter = adapter or HTTPAdapter(logger=logger)
        self.session = Session(
            self,
            cookie_store=CookieStore(cookie_dir, logger=logger),
            browser_factory=browser_factory,
            logger=logger,
        )

    @property
    def routes(self) -> Routes:
        return self.adapter.routes

    async def login(self, username: str, password: str) -> None:
        await self.session.connect(username, password)

    async def logout(self) -> None:
        await self.session.destroy(self.username)

    def problem(self, contest_id: str, task_id: str) -> ContestProblem:
        return ContestProblem(self, contest_id, task_id)
