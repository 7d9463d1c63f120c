"""Load settings from environment (and a .env file at the repo root, if present)."""
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parents[1] / ".env")


def _str(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _int(key: str, default: int = 0) -> int:
    try:
        return int(os.environ.get(key, str(default)))
    except ValueError:
        return default


def _bool(key: str, default: bool = False) -> bool:
    return _str(key, "true" if default else "false").lower() in ("true", "1", "yes")


def _cache_root() -> str:
    return os.path.join(os.path.expanduser("~"), ".atcoder-cache")


class Settings:
    # Site
    ATCODER_BASE_URL: str = _str("ATCODER_BASE_URL", "https://atcoder.jp").rstrip("/")

    # Credentials for login_once.py (secret)
    ATCODER_USERNAME: str = _str("ATCODER_USERNAME", "")
    ATCODER_PASSWORD: str = _str("ATCODER_PASSWORD", "")

    # One <username>.json per user lives here
    COOKIE_CACHE_DIR: str = _str("COOKIE_CACHE_DIR", os.path.join(_cache_root(), "cookies"))

    # Login must run headless on servers (no display available)
    BROWSER_HEADLESS: bool = _bool("BROWSER_HEADLESS", True)
    PLAYWRIGHT_BROWSERS_PATH: str = _str("PLAYWRIGHT_BROWSERS_PATH", "")

    # Seconds, for plain HTTP requests only; browser navigation is never bounded
    HTTP_TIMEOUT: int = _int("HTTP_TIMEOUT", 30)

    # Logging
    LOG_LEVEL: str = _str("LOG_LEVEL", "INFO")


def _playwright_path_has_browser(path: str) -> bool:
    """True if path exists and looks like a Playwright browsers dir (has chromium-*)."""
    if not path or not os.path.isdir(path):
        return False
    try:
        return any(
            d.startswith("chromium-") and os.path.isdir(os.path.join(path, d))
            for d in os.listdir(path)
        )
    except OSError:
        return False


settings = Settings()

# Only export PLAYWRIGHT_BROWSERS_PATH when the custom path really holds browsers.
# Otherwise Playwright falls back to its default (e.g. after "playwright install chromium").
if _playwright_path_has_browser(settings.PLAYWRIGHT_BROWSERS_PATH):
    os.environ["PLAYWRIGHT_BROWSERS_PATH"] = settings.PLAYWRIGHT_BROWSERS_PATH
