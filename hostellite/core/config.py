from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "local"
    APP_NAME: str = "Hostellite"

    # REST backend root, e.g. http://192.168.1.10:5000/api for a LAN dev server
    API_BASE_URL: str = "https://findyourhostelbackendk.onrender.com/api"
    HTTP_TIMEOUT_SECONDS: float = 25

    @field_validator("API_BASE_URL", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return (v or "").rstrip("/")

    # Booking rules
    PAYMENT_CURRENCY: str = "pkr"
    MIN_STAY_MONTHS: int = 1

    # Durable client storage (credential + escalation ledger)
    DATABASE_URL: str = "sqlite:///./hostellite.db"
    REDIS_URL: str = "redis://localhost:6379/0"

    # Confirmation reconciliation
    RECONCILE_MAX_ATTEMPTS: int = 3
    RECONCILE_INTERVAL_SECONDS: float = 300.0

    # Stripe payment sheet (publishable key only; secret key never lives on the client)
    STRIPE_PUBLISHABLE_KEY: str = ""
    # PaymentMethod id collected for the user (pm_...); no default, test tokens fail on live keys
    STRIPE_PAYMENT_METHOD: str = ""

    LOG_LEVEL: str = "INFO"


settings = Settings()
