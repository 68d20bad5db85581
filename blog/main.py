
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware
from blog.middleware.ratelimit import RateLimitMiddleware, make_key_func
from blog.middleware.method_override import MethodOverrideMiddleware
from blog.middleware.auth import auth_middleware
from blog.config import settings
from blog.db.session import init_db
from blog.errors import register_error_handlers
from blog.auth.routes import router as auth_router
from blog.posts.routes import router as posts_router
from blog.categories.routes import router as categories_router
from blog.comments.routes import router as comments_router
from blog.web.routes_ui import router as ui_router

def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title=settings.app_name)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(
        RateLimitMiddleware,
        window_seconds=settings.rate_limit_window_seconds,
        max_calls=settings.rate_limit_max_calls,
        key_func=make_key_func(),
        include_path_prefixes=("/api",),
    )
    # added last = runs first: the session and the overridden method must exist before the auth check
    app.middleware("http")(auth_middleware)
    app.add_middleware(MethodOverrideMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret_key,
        session_cookie=settings.session_cookie,
        max_age=settings.session_max_age_seconds,
        same_site="lax",
        https_only=settings.app_env == "prod",
    )

    register_error_handlers(app)

    app.include_router(auth_router)
    app.include_router(posts_router)
    app.include_router(categories_router)
    app.include_router(comments_router)
    app.include_router(ui_router)

    @app.on_event("startup")
    def on_startup():
        init_db()

    @app.get("/health", tags=["root"])
    def health():
        return {"name": settings.app_name, "env": settings.app_env}

    return app

app = create_app()
