
from fastapi import Request, Depends
from sqlalchemy.orm import Session
from blog.auth.service import resolve_token
from blog.db.session import SessionLocal
from blog.errors import AuthenticationError, CsrfError
from blog.models.user import User
from blog.web.session import csrf_matches, logout_session, session_user_id


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def _get_bearer(request: Request) -> str | None:
    auth = request.headers.get("Authorization")
    if auth and auth.startswith("Bearer "):
        return auth.split(" ", 1)[1].strip()
    return None

def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    token = _get_bearer(request)
    if not token:
        raise AuthenticationError("Unauthenticated.")
    return resolve_token(db, token)

def get_optional_web_user(request: Request, db: Session = Depends(get_db)) -> User | None:
    user_id = session_user_id(request)
    if user_id is None:
        return None
    user = db.get(User, user_id)
    if user is None:
        # account removed while the session was alive
        logout_session(request)
    return user

def get_web_user(user: User | None = Depends(get_optional_web_user)) -> User:
    if user is None:
        raise AuthenticationError("Please log in to continue.")
    return user

async def verify_csrf(request: Request) -> None:
    form = await request.form()
    if not csrf_matches(request, form.get("_token")):
        raise CsrfError()
