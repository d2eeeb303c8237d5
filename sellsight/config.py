from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Loads environment variables from the .env file.
    Supabase credentials are only required when DATA_SOURCE is "supabase".
    """
    ENVIRONMENT: str = "production"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    API_VERSION: str = "1.0.0"
    CORS_ORIGINS: List[str] = ["*"]

    # Storage settings
    DATA_SOURCE: str = "supabase"  # "supabase" or "memory"
    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None
    PRODUCTS_TABLE: str = "products"
    SCRAPE_LOGS_TABLE: str = "scrape_logs"
    IDEAS_TABLE: str = "ideas"

    # Logging settings
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = True

    # Mock data settings
    MOCK_PRODUCT_COUNT: int = 50
    MOCK_HTML_PRODUCT_COUNT: int = 10
    MOCK_SEED: Optional[int] = None
    SEED_ON_STARTUP: bool = True

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"


# Create a single, importable instance of the settings
settings = Settings()
