"""Error taxonomy. Every error carries a stable ``code`` plus the arguments used in its message."""

MESSAGES = {
    "LOGIN_REJECTED": "Could not sign in as {0}: the login form could not be submitted.",
    "MISSING_ACCESS": "Signed in as {0} but the site did not establish a session.",
    "LOGOUT_REJECTED": "Could not sign out {0}: the logout form could not be submitted.",
    "RESOLUTION_ERROR": "Could not resolve an identifier from {0!r}.",
    "PARSE_ERROR": "Cookie file {0} does not contain a JSON array of cookies.",
    "BROWSER_ERROR": "Browser action failed: {0}",
}


class AtCoderError(Exception):
    code = "ATCODER_ERROR"

    def __init__(self, *args):
        template = MESSAGES.get(self.code)
        message = template.format(*args) if template else " ".join(str(a) for a in args)
        super().__init__(message)


class LoginRejected(AtCoderError):
    code = "LOGIN_REJECTED"

    def __init__(self, username: str):
        self.username = username
        super().__init__(username)


class MissingAccess(AtCoderError):
    code = "MISSING_ACCESS"

    def __init__(self, username: str):
        self.username = username
        super().__init__(username)


class LogoutRejected(AtCoderError):
    code = "LOGOUT_REJECTED"

    def __init__(self, username: str):
        self.username = username
        super().__init__(username)


class ResolutionError(AtCoderError, ValueError):
    code = "RESOLUTION_ERROR"


class CookieParseError(AtCoderError, ValueError):
    code = "PARSE_ERROR"


class BrowserError(AtCoderError):
    code = "BROWSER_ERROR"
