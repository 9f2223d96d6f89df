"""Next page handling."""

from flask import current_app

from . import config


def good_next_page(next_page: str) -> str:
    """Checks if a next_page is good and returns it.

    If not good, it will return the default.
    """
    default = current_app.config.get('DEFAULT_LOGIN_REDIRECT_URL',
                                     config.DEFAULT_LOGIN_REDIRECT_URL)
    good = (next_page and len(next_page) < 300 and
            (next_page == default
             or config.login_redirect_pattern.match(next_page)))
    return next_page if good else default
