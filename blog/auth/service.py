
import logging
from datetime import datetime, timezone

from jose import JWTError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from blog.errors import AuthenticationError, ValidationError
from blog.models.access_token import AccessToken
from blog.models.user import User
from blog.utils.security import hash_password, verify_password, create_access_token, decode_token, new_token_id

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "The email has already been taken."

def register_user(db: Session, name: str, email: str, password: str) -> User:
    email = email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        raise ValidationError.for_field("email", EMAIL_TAKEN)
    user = User(name=name.strip(), email=email, password_hash=hash_password(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError.for_field("email", EMAIL_TAKEN)
    db.refresh(user)
    logger.info("registered user id=%s", user.id)
    return user

def login_user(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if not user or not verify_password(password, user.password_hash):
        logger.warning("failed login attempt")
        raise AuthenticationError("Invalid credentials.")
    return user

def issue_token(db: Session, user: User, name: str = "auth_token") -> str:
    jti = new_token_id()
    db.add(AccessToken(user_id=user.id, jti=jti, name=name))
    db.commit()
    return create_access_token(str(user.id), jti)

def resolve_token(db: Session, token: str) -> User:
    """Return the owner of a bearer token that is well-formed, unexpired and not revoked."""
    try:
        payload = decode_token(token)
    except JWTError:
        raise AuthenticationError("Unauthenticated.")
    sub, jti = payload.get("sub"), payload.get("jti")
    if sub is None or jti is None:
        raise AuthenticationError("Unauthenticated.")

    record = db.query(AccessToken).filter(AccessToken.jti == jti).first()
    if record is None or str(record.user_id) != str(sub):
        raise AuthenticationError("Unauthenticated.")

    record.last_used_at = datetime.now(timezone.utc).replace(tzinfo=None)
    db.commit()
    return record.user

def revoke_tokens(db: Session, user_id: int) -> int:
    revoked = db.query(AccessToken).filter(AccessToken.user_id == user_id).delete(synchronize_session=False)
    db.commit()
    logger.info("revoked %s token(s) for user id=%s", revoked, user_id)
    return revoked
