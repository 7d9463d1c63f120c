"""Chromium launch settings for the login browser.

- Launch with --disable-blink-features=AutomationControlled so navigator.webdriver is not set.
- Inject a small script to mask remaining automation hints.
"""

LAUNCH_ARGS = [
    "--disable-blink-features=AutomationControlled",
    "--disable-dev-shm-usage",
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-infobars",
]

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)

# Script injected into every page to mask navigator.webdriver.
STEALTH_SCRIPT = """
(function() {
  try {
    Object.defineProperty(navigator, 'webdriver', { get: function() { return undefined; }, configurable: true });
  } catch (e) {}
})();
"""


def launch_options(headless: bool = True) -> dict:
    """Kwargs for chromium.launch."""
    return {
        "headless": headless,
        "args": LAUNCH_ARGS,
        "ignore_default_args": ["--enable-automation"],
    }


def context_options(**extra) -> dict:
    """Kwargs for browser.new_context."""
    return {
        "viewport": {"width": 1280, "height": 720},
        "user_agent": USER_AGENT,
        "locale": "en-US",
        **extra,
    }
