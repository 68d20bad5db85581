import re

from fastapi import Request
from fastapi.responses import RedirectResponse

from blog.web.session import flash, session_user_id

# pages that need a logged-in session; the JSON API checks bearer tokens itself
PROTECTED_PATHS = [
    re.compile(r"^/dashboard$"),
    re.compile(r"^/logout$"),
    re.compile(r"^/posts/create$"),
    re.compile(r"^/posts/\d+/edit$"),
    re.compile(r"^/posts/\d+/comments$"),
]

# GET /posts/{id} is public, everything else under /posts needs a session
_POST_WRITE = re.compile(r"^/posts(/\d+)?$")

def _is_protected(method: str, path: str) -> bool:
    if any(p.match(path) for p in PROTECTED_PATHS):
        return True
    return method != "GET" and bool(_POST_WRITE.match(path))

async def auth_middleware(request: Request, call_next):
    path = request.url.path

    if path.startswith("/api") or not _is_protected(request.method, path):
        return await call_next(request)

    if session_user_id(request) is None:
        flash(request, "Please log in to continue.", "error")
        return RedirectResponse(url="/login", status_code=303)

    return await call_next(request)
