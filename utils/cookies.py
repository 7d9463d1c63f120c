"""Per-user cookie files for the browser login flow.

Each user gets ``<cookie_dir>/<username lower-cased>.json`` holding a JSON array of
cookies exactly as the browser reported them. ``[]`` (or no file at all) means
there is no session to restore.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from config.settings import settings
from utils.errors import CookieParseError
from utils.logging import get_logger

# Playwright add_cookies wants: name, value, domain, path; optional: expires, httpOnly, secure, sameSite
_BROWSER_KEYS = ("name", "value", "domain", "path", "expires", "httpOnly", "secure", "sameSite")
_SAME_SITE = {"strict": "Strict", "lax": "Lax", "none": "None"}


def to_browser_cookies(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Build a Playwright cookie list from stored records. Records without a name or domain are dropped."""
    out: list[dict[str, Any]] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        name = item.get("name")
        domain = (item.get("domain") or "").strip()
        if not name or not domain:
            continue
        cookie = {k: item[k] for k in _BROWSER_KEYS if item.get(k) is not None}
        cookie["name"] = str(name)
        cookie["value"] = str(item.get("value") or "")
        cookie["domain"] = domain
        cookie["path"] = str(item.get("path") or "/")
        # Session cookies are reported with expires=-1; the browser rejects that on the way back in.
        expires = cookie.get("expires")
        if not isinstance(expires, (int, float)) or expires <= 0:
            cookie.pop("expires", None)
        same_site = _SAME_SITE.get(str(cookie.get("sameSite", "")).lower())
        if same_site:
            cookie["sameSite"] = same_site
        else:
            cookie.pop("sameSite", None)
        out.append(cookie)
    return out


class CookieStore:
    """Filesystem-backed cookie persistence. No locking: one writer per username is assumed."""

    def __init__(self, cookie_dir: str | os.PathLike | None = None, logger: logging.Logger | None = None):
        self.cookie_dir = Path(cookie_dir or settings.COOKIE_CACHE_DIR)
        self.logger = logger or get_logger(__name__)

    def path_for(self, username: str) -> Path:
        return self.cookie_dir / f"{username.lower()}.json"

    def load(self, username: str) -> list[dict[str, Any]]:
        """Return the stored cookies for username, or [] when nothing was saved yet."""
        path = self.path_for(username)
        if not path.exists():
            self.logger.info("No cached session for %s", username)
            return []
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CookieParseError(str(path)) from e
        if not isinstance(data, list) or not all(isinstance(c, dict) for c in data):
            raise CookieParseError(str(path))
        self.logger.info("Loaded cached session for %s (%d cookies)", username, len(data))
        return data

    def save(self, username: str, cookies: list[dict[str, Any]]) -> bool:
        """Replace the cookie file atomically. Failures are logged, never raised.

        The old file stays intact when the write fails, so the file is always a JSON array at rest.
        """
        path = self.path_for(username)
        tmp_path = None
        try:
            os.makedirs(self.cookie_dir, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.cookie_dir, suffix=".tmp", delete=False
            ) as f:
                tmp_path = f.name
                json.dump(cookies, f)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            self.logger.warning("Could not save cookies for %s to %s: %s", username, path, e)
            if tmp_path is not None:
                try:
                    os.remove(tmp_path)
                except OSError as cleanup_error:
                    self.logger.debug("Could not remove %s: %s", tmp_path, cleanup_error)
            return False
        return True

    def clear(self, username: str) -> bool:
        return self.save(username, [])
