from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings, loaded from .env automatically"""

    # Solutions
    SOLUTIONS_PATH: str = "./public/data/practice_solutions"
    MANIFEST_OUTPUT_PATH: str = "./public/data/solution_manifest.json"

    # Markup rendering
    MAX_MARKUP_CHARS: int = 200_000
    RENDER_CACHE_SIZE: int = 256
    RENDER_RATE_LIMIT: str = "120/minute"

    # Comma separated; "*" allows any origin
    CORS_ORIGINS: str = "*"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    RELOAD: bool = True
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def solutions_dir(self) -> Path:
        return Path(self.SOLUTIONS_PATH.strip() or ".").expanduser()

    @property
    def cors_origins(self) -> List[str]:
        origins = [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]
        return origins or ["*"]

    def validate_solutions_path(self) -> Optional[Path]:
        """Return the solutions directory if it exists, otherwise None"""
        path = self.solutions_dir
        if path.exists() and path.is_dir():
            return path
        return None


settings = Settings()
