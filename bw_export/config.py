"""Configuration management for the vault export pipeline."""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env early so BaseSettings can pick values up seamlessly.
load_dotenv()


class Settings(BaseSettings):
    """App configuration derived from environment variables."""

    bw_cli_path: str = Field("bw", alias="BW_CLI_PATH")

    export_dir: Path = Field(Path("export"), alias="EXPORT_DIR")
    max_parallel: int = Field(4, alias="EXPORT_MAX_PARALLEL")
    overwrite: bool = Field(False, alias="EXPORT_OVERWRITE")
    catalog_filename: str = Field("items.json", alias="EXPORT_CATALOG_FILENAME")

    ledger_db: Path | None = Field(Path("data/export_ledger.db"), alias="EXPORT_LEDGER_DB")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("ledger_db", mode="before")
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("max_parallel")
    @classmethod
    def _at_least_one(cls, value: int) -> int:
        if value < 1:
            raise ValueError("EXPORT_MAX_PARALLEL must be at least 1.")
        return value

    @field_validator("catalog_filename")
    @classmethod
    def _plain_filename(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped or Path(stripped).name != stripped:
            raise ValueError("EXPORT_CATALOG_FILENAME must be a bare file name.")
        return stripped

    @property
    def resolved_log_level(self) -> str:
        return self.log_level.upper()
