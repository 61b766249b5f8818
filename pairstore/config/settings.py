"""Runtime settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PAIRSTORE_", extra="ignore")

    log_level: str = "info"
    log_file: str = ""  # empty: no file handler from configure_logging()
    storage_backend: str = "sqlite"  # sqlite | redis
    sqlite_db_path: str = "logs/pairstore.db"
    redis_url: str = "redis://127.0.0.1:6379/0"
    # shared keyspace namespace; scopes live under "<prefix>:"
    redis_key_prefix: str = "pairstore"
    redis_scan_batch_size: int = Field(default=500, ge=1)
    bulk_delete_chunk_size: int = Field(default=500, ge=1)


settings = Settings()
