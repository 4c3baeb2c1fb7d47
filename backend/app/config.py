from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )
    
    # Database
    database_url: str = "sqlite+aiosqlite:///./careerbridge.db"
    create_tables_on_startup: bool = True
    store_timeout_seconds: float = 10.0  # Upper bound for a single store round trip
    
    # Auth
    secret_key: str
    session_ttl_minutes: int = 60 * 24 * 7
    secure_cookies: bool = False  # Set to True behind HTTPS
    
    # App
    allowed_origins: str = ""  # Comma-separated extra CORS origins
    debug: bool = False


settings = Settings()
