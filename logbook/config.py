from __future__ import annotations

import os
from pathlib import Path
from typing import List


class Settings:
    """Centralized configuration for the logbook backend."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        self.data_root: Path = Path(
            os.environ.get("LOGBOOK_DATA_ROOT") or data_root_default
        ).expanduser()
        self.db_path: Path = Path(
            os.environ.get("LOGBOOK_DB_PATH") or (self.data_root / "logbook.db")
        ).expanduser()
        self.log_level: str = (os.environ.get("LOGBOOK_LOG_LEVEL") or "INFO").upper()
        self.host: str = os.environ.get("LOGBOOK_HOST") or "127.0.0.1"
        self.port: int = int(os.environ.get("LOGBOOK_PORT") or "8000")
        self.max_import_mb: int = int(os.environ.get("LOGBOOK_MAX_IMPORT_MB") or "10")

        # ---- Nutrition lookup ----
        self.nutrition_provider: str = (
            os.environ.get("NUTRITION_PROVIDER") or "ninjas"
        ).strip().lower()
        self.nutrition_api_url: str = os.environ.get(
            "NUTRITION_API_URL", "https://api.api-ninjas.com/v1/nutrition"
        )
        self.nutrition_api_key: str | None = os.environ.get("NUTRITION_API_KEY")
        self.fatsecret_api_url: str = os.environ.get(
            "FATSECRET_API_URL", "https://platform.fatsecret.com/rest/server.api"
        )
        self.fatsecret_consumer_key: str | None = os.environ.get("FATSECRET_CONSUMER_KEY")
        self.fatsecret_consumer_secret: str | None = os.environ.get("FATSECRET_CONSUMER_SECRET")
        self.nutrition_timeout: float = float(os.environ.get("NUTRITION_TIMEOUT") or "15")

        # ---- Health-data sync ----
        # Sync is only available when an endpoint is configured.
        self.health_sync_url: str | None = os.environ.get("HEALTH_SYNC_URL") or None
        self.health_sync_token: str | None = os.environ.get("HEALTH_SYNC_TOKEN") or None
        self.health_sync_timeout: float = float(os.environ.get("HEALTH_SYNC_TIMEOUT") or "15")

        cors = os.environ.get("LOGBOOK_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
