import json
import logging
import sys
from functools import lru_cache
from pathlib import Path

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


def _env_files() -> list[str]:
    """Load .env from backend root (when running from services/survey) then local .env."""
    base = Path(__file__).resolve().parent.parent.parent.parent  # backend root
    return [str(base / ".env"), ".env"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Required ───────────────────────────────────────────────────────────────
    database_url: str
    jwt_secret: str
    google_client_id_web: str
    google_client_secret_web: str

    # ── Server ─────────────────────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 3000
    env_name: str = "development"
    log_level: str = "INFO"
    # Comma-separated or JSON list (e.g. CORS_ORIGINS=http://localhost:8081,exp://127.0.0.1:19000)
    cors_origins: str = "*"

    # ── JWT (must match shared.auth.config.AuthSettings) ───────────────────────
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "justask-api"
    jwt_audience: str = "justask-app"
    jwt_expire_seconds: int = 604_800  # 7 days

    # ── Sharing ────────────────────────────────────────────────────────────────
    # Public link prefix; no trailing slash.
    share_base_url: str = "https://justask.app"
    qr_code_api_url: str = "https://api.qrserver.com/v1/create-qr-code/"
    qr_code_size: str = "300x300"

    @property
    def cors_origins_list(self) -> list[str]:
        raw = self.cors_origins.strip()
        if raw.startswith("["):
            try:
                parsed = json.loads(raw)
                if isinstance(parsed, list):
                    return [str(o).strip() for o in parsed if str(o).strip()]
            except (json.JSONDecodeError, ValueError):
                pass
        return [x.strip() for x in raw.split(",") if x.strip()]


@lru_cache
def get_settings() -> Settings:
    """Load settings once; exit the process when a required variable is absent."""
    try:
        return Settings()
    except ValidationError as exc:
        missing = [".".join(str(p) for p in err["loc"]).upper() for err in exc.errors()]
        logger.critical("FATAL: missing or invalid environment variables: %s", ", ".join(missing))
        sys.exit(1)
