import os
from typing import List
from dotenv import load_dotenv

# grab env vars from .env file
load_dotenv()


class Settings:
    # app settings
    APP_ENV: str = os.getenv("APP_ENV", "dev")
    APP_HOST: str = os.getenv("APP_HOST", "0.0.0.0")
    APP_PORT: int = int(os.getenv("APP_PORT", "8000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS stuff
    _origins_raw: str = os.getenv("ALLOWED_ORIGINS", "*")
    ALLOWED_ORIGINS: List[str] = [o.strip() for o in _origins_raw.split(",") if o.strip()] if _origins_raw else ["*"]

    # database config with separate creds
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
    DB_NAME: str = os.getenv("DB_NAME", "harness")
    DB_USER: str = os.getenv("DB_USER", "harness_user")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "")
    DB_SSL_MODE: str = os.getenv("DB_SSL_MODE", "require")
    DB_CONNECTION_TIMEOUT: int = int(os.getenv("DB_CONNECTION_TIMEOUT", "30"))
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "5"))
    DB_MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "10"))

    @property
    def DATABASE_URL(self) -> str:
        """build DATABASE_URL from individual components or use explicit override"""
        explicit_url = os.getenv("DATABASE_URL")
        if explicit_url:
            return explicit_url

        return (
            f"postgresql+psycopg://{self.DB_USER}:{self.DB_PASSWORD}@"
            f"{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            f"?sslmode={self.DB_SSL_MODE}&connect_timeout={self.DB_CONNECTION_TIMEOUT}"
        )

    # event store backend: database|file
    EVENT_STORE: str = os.getenv("EVENT_STORE", "database").lower()
    EVENT_LOG_PATH: str = os.getenv("EVENT_LOG_PATH", "events.log")

    # payment provider REST API
    PROVIDER_API_URL: str = os.getenv("PROVIDER_API_URL", "https://api.sandbox.checkout.com")
    PROVIDER_TIMEOUT_SECONDS: float = float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "10"))
    # paths that authenticate with the public key, everything else uses the secret key
    PUBLIC_KEY_PATHS: List[str] = [p.strip() for p in os.getenv("PUBLIC_KEY_PATHS", "/tokens").split(",") if p.strip()]
    DEFAULT_TENANT: str = os.getenv("DEFAULT_TENANT", "abc")

    # provider keys per account structure
    CKO_SECRET_KEY: str | None = os.getenv("CKO_SECRET_KEY")
    CKO_PUBLIC_KEY: str | None = os.getenv("CKO_PUBLIC_KEY")
    CKO_NAS_SECRET_KEY: str | None = os.getenv("CKO_NAS_SECRET_KEY")
    CKO_NAS_PUBLIC_KEY: str | None = os.getenv("CKO_NAS_PUBLIC_KEY")
    CKO_NAS_PROCESSING_CHANNEL_ID: str | None = os.getenv("CKO_NAS_PROCESSING_CHANNEL_ID")

    # Apple Pay merchant
    APPLE_PAY_MERCHANT_ID: str | None = os.getenv("APPLE_PAY_MERCHANT_ID")
    APPLE_PAY_CERTIFICATE: str | None = os.getenv("APPLE_PAY_CERTIFICATE")
    APPLE_PAY_KEY: str | None = os.getenv("APPLE_PAY_KEY")
    APPLE_PAY_DOMAIN: str | None = os.getenv("APPLE_PAY_DOMAIN")
    APPLE_PAY_DISPLAY_NAME: str = os.getenv("APPLE_PAY_DISPLAY_NAME", "Test Harness")
    APPLE_PAY_TENANT: str = os.getenv("APPLE_PAY_TENANT", "nas")
    APPLE_PAY_AMOUNT: int = int(os.getenv("APPLE_PAY_AMOUNT", "300"))
    APPLE_PAY_CURRENCY: str = os.getenv("APPLE_PAY_CURRENCY", "USD")

    @property
    def TENANT_KEYS(self) -> dict[str, tuple[str | None, str | None]]:
        """(secret_key, public_key) per account structure"""
        return {
            "abc": (self.CKO_SECRET_KEY, self.CKO_PUBLIC_KEY),
            "nas": (self.CKO_NAS_SECRET_KEY, self.CKO_NAS_PUBLIC_KEY),
        }


settings = Settings()
