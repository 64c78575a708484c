from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Runtime ---
    ENV: str = "production"
    SERVICE_NAME: str = "voice-proxy"
    PORT: int = 8080

    # Outer budget for one /tools/route_call request (the voice platform hangs up past this)
    REQUEST_TIMEOUT_S: float = 8.0

    # --- Estate agency API (sales + lettings catalogs) ---
    ESTATE_BASE_URL: str = "https://apiv3.loop.software/api"
    ESTATE_API_KEY: str | None = None
    ESTATE_KEY_HEADER: str = "x-api-key"

    ESTATE_TIMEOUT_S: float = 2.5  # full search, per source
    ESTATE_FAST_TIMEOUT_S: float = 1.2  # sales-only fast path
    ESTATE_PAGE_SIZE: int = 100
    ESTATE_FAST_PAGE_SIZE: int = 30

    ESTATE_VERIFY_SSL: bool = True
    # Optional: custom CA bundle path, else certifi
    ESTATE_CA_BUNDLE: str | None = None

    # --- Lookup engine tuning ---
    LOOKUP_CACHE_TTL_S: float = 60.0
    LOOKUP_FALLBACK_LIMIT: int = 12

    # --- Lead delivery ---
    SMTP_HOST: str | None = None
    SMTP_PORT: int = 587
    SMTP_USER: str | None = None
    SMTP_PASS: str | None = None
    LEAD_FROM_EMAIL: str | None = None
    FORCE_LEAD_EMAIL_TO: str | None = None

    # Used only when SMTP is not configured
    LEAD_WEBHOOK_URL: str | None = None
    LEAD_WEBHOOK_SECRET: str | None = None


settings = Settings()
