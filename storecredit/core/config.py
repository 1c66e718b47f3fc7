from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "storecredit"
    version: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    APP_DOMAIN: str = "example.com"
    APP_DATABASE_DSN: str = "sqlite:////tmp/storecredit.db"

    # Currency assigned to credits created from the admin screens
    DEFAULT_CURRENCY: str = "USD"

    # Store credit
    STORE_CREDIT_ROLLBACK_ON_SHORTFALL: bool = True
    GIFT_CARD_CATEGORY_NAME: str = "Gift Card"

    # Payment methods captured in this order; store credit always goes first
    CAPTURE_PAYMENT_METHODS: str = "store_credit,credit_card"

    # Card gateway
    PAYMENT_GATEWAY: str = "bogus"  # "bogus" or "stripe"
    stripe_api_key: str = ""

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    @property
    def capture_payment_methods(self) -> list[str]:
        return [m.strip() for m in self.CAPTURE_PAYMENT_METHODS.split(",") if m.strip()]


settings = Settings()
