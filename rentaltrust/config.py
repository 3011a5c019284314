from functools import lru_cache
from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .constants import CORS_ALLOW_ORIGINS


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_name: str = "RentalTrust"

    # --- Storage ---
    # "memory" keeps everything in process; "database" persists through SQLAlchemy.
    storage_backend: Literal["memory", "database"] = "memory"
    database_url: str = "sqlite:///./rentaltrust.db"
    seed_demo_data: bool = False

    # --- Security / JWT ---
    jwt_secret: str = "dev-secret-please-change"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24  # 24 hours
    login_rate_limit: int = 10
    login_rate_window_seconds: int = 60

    # --- CORS ---
    cors_origins: List[str] = ["http://localhost:5173"]

    # --- Logging ---
    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = "INFO"
    log_json: bool = False

    @property
    def cors_allow_origins(self) -> List[str]:
        origins = list(self.cors_origins)
        for origin in CORS_ALLOW_ORIGINS:
            if origin not in origins:
                origins.append(origin)
        return origins


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()

# --- SQLAlchemy setup (used only by the "database" storage backend) ---
engine = create_engine(
    settings.database_url,
    connect_args={"check_same_thread": False}
    if settings.database_url.startswith("sqlite")
    else {},
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()
