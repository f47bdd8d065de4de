"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database (use postgresql+psycopg2://... in deployments)
    database_url: str = "sqlite:///./finquest.db"

    # Service
    service_name: str = "finquest"
    log_level: str = "INFO"

    # Progression ledger
    ledger_max_retries: int = 5
    ledger_backoff_base: float = 0.05  # Exponential backoff base in seconds
    simulation_bonus_coins: int = 25

    # Leaderboard
    leaderboard_default_limit: int = 10


settings = Settings()
