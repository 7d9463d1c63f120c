"""Sign in to AtCoder once and cache the session cookies for later runs.

Usage:
    python login_once.py                    # log in as ATCODER_USERNAME
    python login_once.py login alice        # log in as alice (password from ATCODER_PASSWORD or prompt)
    python login_once.py logout alice       # log out and wipe alice's cached cookies
"""
import asyncio
import getpass
import sys

from config.settings import settings
from integrations.atcoder import AtCoderClient
from utils.errors import AtCoderError
from utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


async def login(username: str, password: str) -> None:
    client = AtCoderClient(username)
    await client.login(username, password)
    print(f"\n  Signed in as {username}. Session cached in {client.session.cookie_store.path_for(username)}\n")


async def logout(username: str) -> None:
    client = AtCoderClient(username)
    await client.logout()
    print(f"\n  Signed out {username}. Cached cookies cleared.\n")


def main() -> int:
    setup_logging()
    args = sys.argv[1:]
    action = args[0].lower() if args else "login"
    if action not in ("login", "logout"):
        print(f"Unknown action: {action}. Use 'login' or 'logout'.")
        return 2

    username = args[1] if len(args) > 1 else settings.ATCODER_USERNAME
    if not username:
        print("No username given. Pass one or set ATCODER_USERNAME.")
        return 2

    try:
        if action == "login":
            password = settings.ATCODER_PASSWORD or getpass.getpass(f"AtCoder password for {username}: ")
            asyncio.run(login(username, password))
        else:
            asyncio.run(logout(username))
    except AtCoderError as e:
        logger.error("%s failed: %s", action, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
