"""Helpers around the signed session cookie: flash messages, form errors, CSRF."""

import secrets

from fastapi import Request

from blog.utils.security import new_csrf_token

USER_KEY = "user_id"
CSRF_KEY = "_csrf"
FLASH_KEY = "_flash"
ERRORS_KEY = "_errors"
OLD_KEY = "_old"

# never echoed back into forms
_SECRET_FIELDS = {"password", "password_confirmation", "_token"}


def login_session(request: Request, user_id: int) -> None:
    request.session.clear()
    request.session[USER_KEY] = user_id
    request.session[CSRF_KEY] = new_csrf_token()


def logout_session(request: Request) -> None:
    request.session.clear()


def session_user_id(request: Request) -> int | None:
    return request.session.get(USER_KEY)


def csrf_token(request: Request) -> str:
    token = request.session.get(CSRF_KEY)
    if not token:
        token = new_csrf_token()
        request.session[CSRF_KEY] = token
    return token


def csrf_matches(request: Request, submitted: str | None) -> bool:
    expected = request.session.get(CSRF_KEY)
    if not expected or not submitted:
        return False
    return secrets.compare_digest(expected, submitted)


def flash(request: Request, message: str, category: str = "success") -> None:
    request.session.setdefault(FLASH_KEY, []).append([category, message])


def pop_flashes(request: Request) -> list[list[str]]:
    return request.session.pop(FLASH_KEY, [])


def remember_errors(request: Request, errors: dict[str, list[str]]) -> None:
    request.session[ERRORS_KEY] = errors


def remember_old_input(request: Request, data: dict) -> None:
    request.session[OLD_KEY] = {k: str(v) for k, v in data.items() if k not in _SECRET_FIELDS and v is not None}


def pop_form_state(request: Request) -> tuple[dict, dict]:
    return request.session.pop(ERRORS_KEY, {}), request.session.pop(OLD_KEY, {})
