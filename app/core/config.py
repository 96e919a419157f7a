"""Application configuration."""

from os import getenv

from pydantic import BaseModel


def _split_csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "Box Meal Orders API"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    database_url: str = getenv("DATABASE_URL", "sqlite:///./data.sqlite")
    session_secret: str = getenv("SESSION_SECRET", "dev-session-secret-change-me")
    session_secret_fallback: str = "dev-session-secret-change-me"
    session_cookie_name: str = getenv("SESSION_COOKIE_NAME", "admintoken")
    session_max_age: int = int(getenv("SESSION_MAX_AGE", str(60 * 60 * 24 * 7)))
    cookie_secure: bool = getenv("COOKIE_SECURE", "0") == "1"
    admin_user: str = getenv("ADMIN_USER", "admin")
    admin_pass: str = getenv("ADMIN_PASS", "")
    admin_pass_hash: str = getenv("ADMIN_PASS_HASH", "")
    cors_origins: list[str] = _split_csv(getenv("CORS_ORIGIN", ""))
    upload_dir: str = getenv("UPLOAD_DIR", "./uploads")
    public_dir: str = getenv("PUBLIC_DIR", "./public")
    toss_secret_key: str = getenv("TOSS_SECRET_KEY", "")
    toss_confirm_url: str = getenv("TOSS_CONFIRM_URL", "https://api.tosspayments.com/v1/payments/confirm")
    coolsms_api_key: str = getenv("COOLSMS_API_KEY", "")
    coolsms_api_secret: str = getenv("COOLSMS_API_SECRET", "")
    coolsms_sender: str = getenv("COOLSMS_SENDER", "")
    sms_api_url: str = getenv("SMS_API_URL", "https://api.solapi.com/messages/v4/send")
    http_timeout_seconds: float = float(getenv("HTTP_TIMEOUT_SECONDS", "10"))
    default_base_price: int = int(getenv("DEFAULT_BASE_PRICE", "9000"))


settings: Settings = Settings()
