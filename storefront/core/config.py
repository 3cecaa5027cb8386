from typing import List, Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./storefront.db"
    DB_TIMEOUT_SECONDS: float = 10.0

    # JWT verification (tokens are issued by the identity provider)
    JWT_SECRET_KEY: str = "dev-secret-change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Shop Configuration
    SHOP_NAME: str = "SambaMart"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # Orders
    UNKNOWN_PRODUCT_POLICY: Literal["skip", "reject"] = "skip"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
