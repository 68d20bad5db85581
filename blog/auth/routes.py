
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from blog.auth.deps import get_db, get_current_user
from blog.schemas.auth import RegisterIn, LoginIn, TokenOut, UserOut, MessageOut
from blog.auth.service import register_user, login_user, issue_token, revoke_tokens
from blog.models.user import User

router = APIRouter(prefix="/api", tags=["auth"])

@router.post("/register", response_model=TokenOut, status_code=status.HTTP_201_CREATED)
def register(body: RegisterIn, db: Session = Depends(get_db)):
    user = register_user(db, body.name, body.email, body.password)
    token = issue_token(db, user)
    return TokenOut(token=token, user=UserOut.model_validate(user))

@router.post("/login", response_model=TokenOut)
def login(body: LoginIn, db: Session = Depends(get_db)):
    user = login_user(db, body.email, body.password)
    token = issue_token(db, user)
    return TokenOut(token=token, user=UserOut.model_validate(user))

@router.post("/logout", response_model=MessageOut)
def logout(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    revoke_tokens(db, user.id)
    return MessageOut(message="Logged out successfully.")

@router.get("/user", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return user
