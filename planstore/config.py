"""Process configuration — env-driven.

Centralized settings using pydantic-settings.  Reads from a .env file and
PLANSTORE_* environment variables.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from planstore.models.records import MAX_RECORD_SIZE_BYTES
from planstore.models.storage import DEFAULT_VOLUME_MOUNT_PATH


class PlanStoreSettings(BaseSettings):
    """Settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export PLANSTORE_LOG_LEVEL=DEBUG
        export PLANSTORE_RECORD_DB_PATH=/data/records.db
        export PLANSTORE_DEFAULT_MOUNT_PATH=/mnt/tf-storage

    Or via .env file::

        PLANSTORE_ENVIRONMENT=production
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PLANSTORE_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"

    # Size-limited store
    record_db_path: Path = Path(".planstore/records.db")
    max_record_size: int = MAX_RECORD_SIZE_BYTES
    chunk_size: int = MAX_RECORD_SIZE_BYTES

    # Spill store
    default_mount_path: Path = Path(DEFAULT_VOLUME_MOUNT_PATH)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def configure_logging(level: str) -> None:
    """Apply a simple logging configuration for command-line use."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# Module-level singleton — import as `from planstore.config import settings`
settings = PlanStoreSettings()
