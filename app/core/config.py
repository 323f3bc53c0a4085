from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Commerce platform connection
    SHOP_DOMAIN: str
    ADMIN_API_ACCESS_TOKEN: str
    ADMIN_API_VERSION: str = "2024-01"
    ADMIN_API_TIMEOUT: float = 30.0

    # Session
    SESSION_SECRET_KEY: str

    # Dashboard
    APP_NAME: str = "Storefront Admin"
    DASHBOARD_SLICE_SIZE: int = 5
    LOW_STOCK_THRESHOLD: int = 6
    LOW_STOCK_OVERFETCH_FACTOR: int = 4

    # Pagination
    PRODUCTS_PAGE_SIZE: int = 25
    INVENTORY_PAGE_SIZE: int = 20

    # UI
    TOAST_DURATION_SECONDS: int = 3
    LOCALE: str = "en"

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
