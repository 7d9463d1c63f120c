import httpx
import pytest

from automation.session import LOGOUT_LINK, PASSWORD_FIELD, SESSION_COOKIE, USERNAME_FIELD, find_session_cookie
from integrations.atcoder import AtCoderClient, HTTPAdapter
from utils.errors import BrowserError

BASE_URL = "https://atcoder.jp"


def session_cookie(token: str) -> dict:
    return {
        "name": SESSION_COOKIE,
        "value": token,
        "domain": "atcoder.jp",
        "path": "/",
        "expires": -1,
        "httpOnly": True,
        "secure": True,
        "sameSite": "Lax",
    }


class FakeSite:
    """Server-side state shared by every FakeBrowser launched against it."""

    def __init__(self, users: dict[str, str] | None = None, token: str = "tok123"):
        self.users = users if users is not None else {"alice": "pw"}
        self.token = token
        self.active_tokens: set[str] = set()
        self.fail_submit = False
        self.fail_logout = False
        self.establish_session = True
        self.submissions = 0
        self.browsers: list["FakeBrowser"] = []

    async def launch(self) -> "FakeBrowser":
        browser = FakeBrowser(self)
        self.browsers.append(browser)
        return browser


class FakeBrowser:
    def __init__(self, site: FakeSite):
        self.site = site
        self.url = "about:blank"
        self.cookies: list[dict] = []
        self.fields: dict[str, str] = {}
        self.closed = False

    async def navigate(self, url: str) -> None:
        self.url = url

    async def fill_field(self, selector: str, value: str) -> None:
        self.fields[selector] = value

    async def submit(self, selector: str) -> None:
        if self.site.fail_submit:
            raise BrowserError("net::ERR_CONNECTION_RESET")
        self.site.submissions += 1
        username = self.fields.get(USERNAME_FIELD)
        if self.site.establish_session and self.site.users.get(username) == self.fields.get(PASSWORD_FIELD):
            self.site.active_tokens.add(self.site.token)
            self.cookies = [c for c in self.cookies if c["name"] != SESSION_COOKIE]
            self.cookies.append(session_cookie(self.site.token))

    async def submit_form(self, selector: str) -> None:
        if self.site.fail_logout:
            raise BrowserError("form_logout is not defined")
        cookie = find_session_cookie(self.cookies)
        if cookie is not None:
            self.site.active_tokens.discard(cookie["value"])
        self.cookies = [c for c in self.cookies if c["name"] != SESSION_COOKIE]

    async def query_marker(self, selector: str) -> bool:
        cookie = find_session_cookie(self.cookies)
        return selector == LOGOUT_LINK and cookie is not None and cookie["value"] in self.site.active_tokens

    async def read_cookies(self) -> list[dict]:
        return [dict(c) for c in self.cookies]

    async def set_cookies(self, cookies: list[dict]) -> None:
        self.cookies.extend(dict(c) for c in cookies)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def site() -> FakeSite:
    return FakeSite()


@pytest.fixture
def make_client(tmp_path, site):
    def _make(handler=None, username: str | None = "alice") -> AtCoderClient:
        transport = httpx.MockTransport(handler) if handler is not None else None
        adapter = HTTPAdapter(base_url=BASE_URL, timeout=5, transport=transport)
        return AtCoderClient(
            username,
            cookie_dir=str(tmp_path / "cookies"),
            adapter=adapter,
            browser_factory=site.launch,
        )

    return _make
