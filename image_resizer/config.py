from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from image_resizer.resize.constants import OUTPUT_FORMATS


def _env_files() -> list[str]:
    """Load .env from the project root, then the working directory."""
    base = Path(__file__).resolve().parent.parent  # project root
    return [str(base / ".env"), ".env"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── AWS / S3 ──────────────────────────────────────────────────────────────
    # Empty credentials fall through to the default boto credential chain.
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    aws_region: str = "us-east-1"
    s3_endpoint_url: str = ""  # MinIO / LocalStack
    s3_cache_control: str = "max-age=31536000"

    # ── Output encoding ──────────────────────────────────────────────────────
    output_format: str = "JPEG"
    output_quality: int = Field(default=75, ge=1, le=100)

    # ── Server ───────────────────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    # ── CORS ─────────────────────────────────────────────────────────────────
    env_name: str = "development"
    cors_origins: str = "http://localhost:3000"

    @field_validator("output_format")
    @classmethod
    def _known_output_format(cls, value: str) -> str:
        fmt = value.strip().upper()
        if fmt == "JPG":
            fmt = "JPEG"
        if fmt not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unsupported output format: {value} (expected one of {sorted(OUTPUT_FORMATS)})"
            )
        return fmt

    @property
    def cors_origins_list(self) -> list[str]:
        return [x.strip() for x in self.cors_origins.split(",") if x.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
