import hmac
import logging
from typing import Optional

from fastapi import Request
from fastapi.responses import RedirectResponse

logger = logging.getLogger(__name__)

COOKIE_NAME = "loggedIn"
COOKIE_VALUE = "1"


class LoginRequired(Exception):
    """Raised when a protected route is hit without a session cookie"""


def attempt_login(submitted_password: Optional[str], password: Optional[str]) -> RedirectResponse:
    """Check the shared password; set the session cookie and go home on success.

    The compare is byte-exact, except that an unset or empty configured
    password matches nothing, not even an empty submission.
    """
    if password and submitted_password is not None and hmac.compare_digest(
        submitted_password.encode("utf-8"), password.encode("utf-8")
    ):
        response = RedirectResponse(url="/", status_code=303)
        response.set_cookie(COOKIE_NAME, COOKIE_VALUE, secure=True, httponly=True)
        return response

    logger.warning("Rejected login attempt")
    return RedirectResponse(url="/login", status_code=303)


def is_authenticated(request: Request) -> bool:
    return request.cookies.get(COOKIE_NAME) == COOKIE_VALUE


def require_login(request: Request):
    if not is_authenticated(request):
        raise LoginRequired(request.url.path)
