import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field


class Settings(BaseModel):
    HOST: str
    PORT: int = Field(gt=0, lt=65536)
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"]
    UPSTREAM_TIMEOUT_SEC: float = Field(gt=0)
    UPSTREAM_USER_AGENT: str = Field(min_length=1)
    CORS_ALLOW_ORIGINS: list[str]
    STATIC_DIR: str

    @classmethod
    def from_env(cls) -> "Settings":
        raw_origins = os.getenv("CORS_ALLOW_ORIGINS", "*")
        origins = [s.strip() for s in raw_origins.split(",") if s.strip()]
        if not origins:
            origins = ["*"]

        return cls.model_validate(
            {
                "HOST": os.getenv("HOST", "127.0.0.1"),
                "PORT": os.getenv("PORT", "4173"),
                "LOG_LEVEL": os.getenv("LOG_LEVEL", "INFO").strip().upper(),
                "UPSTREAM_TIMEOUT_SEC": os.getenv("UPSTREAM_TIMEOUT_SEC", "10"),
                "UPSTREAM_USER_AGENT": os.getenv("UPSTREAM_USER_AGENT", "portfolio-tracker/1.0"),
                "CORS_ALLOW_ORIGINS": origins,
                "STATIC_DIR": os.getenv("STATIC_DIR", "dist"),
            }
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
