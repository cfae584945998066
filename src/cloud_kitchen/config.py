from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str
    SQL_ECHO: bool = False
    LOG_LEVEL: str = "INFO"

    TAX_RATE: Decimal = Decimal("0.05")
    ERROR_LOG_LIMIT: int = 100
    ORDER_FEED_INTERVAL: float = 3.0
    PUBLIC_BASE_URL: str = ""

    PHONEPE_MERCHANT_ID: str = ""
    PHONEPE_SALT_KEY: str = ""
    PHONEPE_SALT_INDEX: str = "1"
    PHONEPE_ENV: str = "sandbox"  # sandbox | production

    FCM_PROJECT_ID: str = ""
    FCM_SERVICE_ACCOUNT_FILE: str = ""

    class Config:
        env_file = ".env"


settings = Settings()
