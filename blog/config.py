from pydantic_settings import BaseSettings
from pydantic import Field

class Settings(BaseSettings):
    app_name: str = "Blog"
    app_env: str = Field("dev", alias="APP_ENV")
    secret_key: str = Field("dev-secret-change-me", alias="SECRET_KEY")
    access_token_expire_minutes: int = Field(60 * 24 * 7, alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    database_url: str | None = Field(default=None, alias="DATABASE_URL")

    session_cookie: str = Field("blog_session", alias="SESSION_COOKIE")
    session_max_age_seconds: int = Field(60 * 60 * 8, alias="SESSION_MAX_AGE_SECONDS")
    posts_per_page: int = Field(10, alias="POSTS_PER_PAGE")

    rate_limit_window_seconds: int = Field(60, alias="RATE_LIMIT_WINDOW_SECONDS")
    rate_limit_max_calls: int = Field(60, alias="RATE_LIMIT_MAX_CALLS")

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
