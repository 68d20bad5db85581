
import math

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from blog.auth.deps import get_db, get_optional_web_user, get_web_user, verify_csrf
from blog.auth.service import login_user, register_user
from blog.categories.service import list_categories
from blog.comments.service import create_comment
from blog.config import settings
from blog.errors import ValidationError
from blog.models.user import User
from blog.posts.service import (
    count_posts, create_post, delete_post, get_post, get_post_for_edit, list_posts, update_post,
)
from blog.schemas.auth import LoginIn, RegisterForm
from blog.schemas.comment import CommentCreate
from blog.schemas.post import PostCreate, PostUpdate
from blog.web.session import flash, login_session, logout_session, remember_old_input
from blog.web.templating import render

router = APIRouter(tags=["ui"])


def back_to(url: str):
    """Where validation and authorization failures on this form redirect to."""
    def _set(request: Request):
        request.state.back_url = url.format(**request.path_params)
    return Depends(_set)


def _validated(request: Request, schema, **fields):
    remember_old_input(request, fields)
    try:
        return schema(**fields)
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc.errors())


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)


@router.get("/", response_class=HTMLResponse)
def home(request: Request, page: int = 1, db: Session = Depends(get_db)):
    per_page = settings.posts_per_page
    pages = max(1, math.ceil(count_posts(db) / per_page))
    page = min(max(1, page), pages)
    posts = list_posts(db, limit=per_page, offset=(page - 1) * per_page)
    return render(request, "posts/index.html", {"posts": posts, "page": page, "pages": pages})


@router.get("/register", response_class=HTMLResponse)
def register_form(request: Request):
    return render(request, "auth/register.html")


@router.post("/register", dependencies=[back_to("/register"), Depends(verify_csrf)])
def register(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    password_confirmation: str = Form(""),
    db: Session = Depends(get_db),
):
    data = _validated(request, RegisterForm, name=name, email=email, password=password,
                      password_confirmation=password_confirmation)
    user = register_user(db, data.name, data.email, data.password)
    login_session(request, user.id)
    flash(request, "Registration successful!")
    return _redirect("/dashboard")


@router.get("/login", response_class=HTMLResponse)
def login_form(request: Request):
    return render(request, "auth/login.html")


@router.post("/login", dependencies=[back_to("/login"), Depends(verify_csrf)])
def login(request: Request, email: str = Form(""), password: str = Form(""), db: Session = Depends(get_db)):
    data = _validated(request, LoginIn, email=email, password=password)
    user = login_user(db, data.email, data.password)
    login_session(request, user.id)
    flash(request, "You are logged in successfully!")
    return _redirect("/dashboard")


@router.get("/logout")
def logout(request: Request):
    logout_session(request)
    flash(request, "You have been logged out.")
    return _redirect("/login")


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(request: Request, db: Session = Depends(get_db), user: User = Depends(get_web_user)):
    posts = list_posts(db, author_id=user.id)
    return render(request, "dashboard.html", {"user": user, "posts": posts})


@router.get("/posts/create", response_class=HTMLResponse)
def create_form(request: Request, db: Session = Depends(get_db), user: User = Depends(get_web_user)):
    return render(request, "posts/create.html", {"categories": list_categories(db)})


@router.post("/posts", dependencies=[back_to("/posts/create"), Depends(verify_csrf)])
def store_post(
    request: Request,
    title: str = Form(""),
    content: str = Form(""),
    category_id: str = Form(""),
    image: str = Form(""),
    db: Session = Depends(get_db),
    user: User = Depends(get_web_user),
):
    data = _validated(request, PostCreate, title=title, content=content,
                      category_id=category_id, image=image or None)
    post = create_post(db, data, author_id=user.id)
    flash(request, "Post created successfully.")
    return _redirect(f"/posts/{post.id}")


@router.get("/posts/{post_id}", response_class=HTMLResponse)
def show_post(request: Request, post_id: int, db: Session = Depends(get_db),
              user: User | None = Depends(get_optional_web_user)):
    post = get_post(db, post_id)
    return render(request, "posts/show.html", {"post": post, "user": user})


@router.get("/posts/{post_id}/edit", response_class=HTMLResponse, dependencies=[back_to("/dashboard")])
def edit_form(request: Request, post_id: int, db: Session = Depends(get_db), user: User = Depends(get_web_user)):
    post = get_post_for_edit(db, post_id, caller_id=user.id)
    return render(request, "posts/edit.html", {"post": post, "categories": list_categories(db)})


@router.put("/posts/{post_id}", dependencies=[back_to("/posts/{post_id}/edit"), Depends(verify_csrf)])
def put_post(
    request: Request,
    post_id: int,
    title: str = Form(""),
    content: str = Form(""),
    category_id: str = Form(""),
    image: str = Form(""),
    db: Session = Depends(get_db),
    user: User = Depends(get_web_user),
):
    data = _validated(request, PostUpdate, title=title, content=content,
                      category_id=category_id, image=image or None)
    update_post(db, post_id, data, caller_id=user.id)
    flash(request, "Post updated successfully.")
    return _redirect(f"/posts/{post_id}")


@router.delete("/posts/{post_id}", dependencies=[back_to("/dashboard"), Depends(verify_csrf)])
def destroy_post(request: Request, post_id: int, db: Session = Depends(get_db), user: User = Depends(get_web_user)):
    delete_post(db, post_id, caller_id=user.id)
    flash(request, "Post deleted successfully.")
    return _redirect("/dashboard")


@router.post("/posts/{post_id}/comments", dependencies=[back_to("/posts/{post_id}"), Depends(verify_csrf)])
def store_comment(
    request: Request,
    post_id: int,
    body: str = Form(""),
    db: Session = Depends(get_db),
    user: User = Depends(get_web_user),
):
    data = _validated(request, CommentCreate, body=body, post_id=post_id)
    create_comment(db, data, author_id=user.id)
    flash(request, "Comment added.")
    return _redirect(f"/posts/{post_id}")
