"""Application settings and validation."""

import os
from pathlib import Path

BASE = Path(__file__).resolve().parent.parent
DEFAULT_DB_URL = f"sqlite:///{BASE / 'app.db'}"


class Settings:
    ENV: str
    DATABASE_URL: str
    DATABASE_ECHO: bool
    LOG_LEVEL: str
    ALLOW_DEV_CORS: bool
    DEFAULT_PAGE_SIZE: int
    PASSWORD_SCHEMES: list

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.DATABASE_URL = os.getenv("DATABASE_URL", DEFAULT_DB_URL)
        self.DATABASE_ECHO = os.getenv("DATABASE_ECHO", "false").lower() == "true"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.ALLOW_DEV_CORS = os.getenv("ALLOW_DEV_CORS", "true").lower() == "true"
        self.DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
        self.PASSWORD_SCHEMES = [s.strip() for s in os.getenv("PASSWORD_SCHEMES", "pbkdf2_sha256").split(",") if s.strip()]
        self._validate()

    def _validate(self):
        if self.DEFAULT_PAGE_SIZE < 1:
            raise RuntimeError("DEFAULT_PAGE_SIZE must be >= 1")
        if not self.PASSWORD_SCHEMES:
            raise RuntimeError("PASSWORD_SCHEMES must name at least one passlib scheme")
        if not self.DATABASE_URL:
            raise RuntimeError("DATABASE_URL must not be empty")


settings = Settings()
