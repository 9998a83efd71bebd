"""Application configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All config from environment. Never hardcode secrets."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Database (set to postgresql+asyncpg://... in production)
    database_url: str = Field(default="sqlite+aiosqlite:///./tradejournal.db")

    # Journal defaults, used to seed the user settings row
    default_commission_per_unit: float = Field(default=0.0, ge=0)
    default_max_drawdown_goal: float = Field(default=0.0, ge=0)

    # App
    app_env: str = Field(default="development")
    log_level: str = Field(default="INFO")
    allowed_hosts: str = Field(default="http://localhost:8000,http://localhost:5173")

    # API authentication key for write endpoints (set in .env)
    api_key: str = Field(default="")


settings = Settings()
