"""
Transporter Backend — Application Configuration
=================================================

What:  Environment-driven configuration using Pydantic Settings.
Why:   The service cannot do anything useful without its database coordinates
       and listen port, so those are required and checked before any network
       resource is opened.
How:   `load_settings()` reads the process environment plus an optional `.env`
       file, validates types and ranges, and turns a pydantic validation
       failure into a `ConfigurationError` naming the first offending key.
Who:   Called once by the entry point; Alembic's env.py calls it as well.

Required keys (in check order):
    DATABASE_HOST, DATABASE_PORT, DATABASE_USER, DATABASE_PASS, PORT
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from transporter.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    The five required fields have no defaults; everything else has a sensible
    development default. Field declaration order matters: it is the order in
    which missing keys are reported.
    """

    # ── Required ──────────────────────────────────────────────────────────
    database_host: str
    database_port: int = Field(ge=1, le=65535)
    database_user: str
    database_pass: str
    port: int = Field(ge=0, le=65535)

    # ── Database ──────────────────────────────────────────────────────────
    database_name: str = Field(default="transporter")

    # What: SQLAlchemy dialect+driver used to build the connection URL
    # Why asyncpg: the engine is async; asyncpg is the native async PG driver
    database_driver: str = Field(default="postgresql+asyncpg")

    db_pool_size: int = Field(default=10, ge=1, le=100)
    db_max_overflow: int = Field(default=5, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")

    # Per-connection timeouts (seconds)
    read_timeout: float = Field(default=5.0, gt=0)
    write_timeout: float = Field(default=10.0, gt=0)
    idle_timeout: int = Field(default=120, ge=1)

    # Upper bound on graceful shutdown after SIGINT/SIGTERM
    shutdown_timeout: float = Field(default=30.0, gt=0)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated origins; "*" permits every origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Logging ───────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # DATABASE_HOST and database_host both work
        extra="ignore",
    )

    @property
    def database_url(self) -> URL:
        """
        What:  SQLAlchemy URL assembled from the individual DATABASE_* parts.
        Why URL.create: credentials are escaped correctly even when the
               password contains '@', ':' or '/'.
        """
        return URL.create(
            drivername=self.database_driver,
            username=self.database_user,
            password=self.database_pass,
            host=self.database_host,
            port=self.database_port,
            database=self.database_name,
        )


def load_settings(env_file: Optional[Union[str, Path]] = ".env") -> Settings:
    """
    Load and validate configuration.

    What:    Reads the optional env file, then checks the environment.
    When:    Once at process start, before the database or listener is touched.

    Args:
        env_file: Path of the optional definition file. Its absence is not an
                  error; absence of a required key is.

    Returns:
        A validated Settings instance.

    Raises:
        ConfigurationError: a required key is missing or a value is invalid.
    """
    logger.info("Checking .env file")
    if env_file is not None and not Path(env_file).is_file():
        logger.info("No %s file found; using process environment only", env_file)

    logger.info("Checking environment")
    try:
        settings = Settings(_env_file=env_file)
    except ValidationError as exc:
        raise ConfigurationError.from_validation_error(exc) from exc

    logger.info("Environment check passed")
    return settings
