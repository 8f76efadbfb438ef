"""
Application settings

Loaded from config.yaml, every value can be overridden by an environment
variable of the same name.
"""

import yaml
from pathlib import Path
from typing import Optional, List
import os


ROOT_DIR = Path(__file__).parent.parent.parent


class Settings:
    """Application settings (loaded from config.yaml)"""

    def __init__(self, config_path: Optional[str] = None):
        path = Path(config_path or os.getenv("CHILLING_CONFIG", ROOT_DIR / "config.yaml"))
        with open(path, 'r', encoding='utf-8') as f:
            self._config = yaml.safe_load(f)

    # ==================== Application ====================
    @property
    def APP_NAME(self) -> str:
        return os.getenv("APP_NAME", self._config["app"]["name"])

    @property
    def APP_VERSION(self) -> str:
        return os.getenv("APP_VERSION", self._config["app"]["version"])

    @property
    def API_V1_PREFIX(self) -> str:
        return os.getenv("API_V1_PREFIX", self._config["app"]["api_prefix"])

    @property
    def DEBUG(self) -> bool:
        debug_str = os.getenv("DEBUG", str(self._config["app"]["debug"]))
        return debug_str.lower() in ("true", "1", "yes")

    # ==================== Database ====================
    @property
    def DATABASE_URL(self) -> str:
        return os.getenv("DATABASE_URL", self._config["database"]["url"])

    @property
    def DATABASE_POOL_SIZE(self) -> int:
        return int(os.getenv("DATABASE_POOL_SIZE", self._config["database"]["pool_size"]))

    @property
    def DATABASE_MAX_OVERFLOW(self) -> int:
        return int(os.getenv("DATABASE_MAX_OVERFLOW", self._config["database"]["max_overflow"]))

    @property
    def DATABASE_POOL_TIMEOUT(self) -> int:
        return int(os.getenv("DATABASE_POOL_TIMEOUT", self._config["database"]["pool_timeout"]))

    # ==================== JWT ====================
    @property
    def JWT_SECRET_KEY(self) -> str:
        return os.getenv("JWT_SECRET_KEY", self._config["jwt"]["secret_key"])

    @property
    def JWT_ALGORITHM(self) -> str:
        return os.getenv("JWT_ALGORITHM", self._config["jwt"]["algorithm"])

    @property
    def JWT_EXPIRE_MINUTES(self) -> int:
        return int(os.getenv("JWT_EXPIRE_MINUTES", self._config["jwt"]["expire_minutes"]))

    # ==================== CORS ====================
    @property
    def CORS_ORIGINS(self) -> List[str]:
        env_origins = os.getenv("CORS_ORIGINS")
        if env_origins:
            return [origin.strip() for origin in env_origins.split(",")]
        return self._config["cors"]["origins"]

    # ==================== Storage ====================
    @property
    def ASSETS_DIR(self) -> Path:
        assets_dir = Path(os.getenv("ASSETS_DIR", self._config["storage"]["assets_dir"]))
        if not assets_dir.is_absolute():
            assets_dir = ROOT_DIR / assets_dir
        return assets_dir

    @property
    def POSTER_DIR(self) -> str:
        return os.getenv("POSTER_DIR", self._config["storage"]["poster_dir"])

    @property
    def AVATAR_DIR(self) -> str:
        return os.getenv("AVATAR_DIR", self._config["storage"]["avatar_dir"])

    @property
    def DEFAULT_AVATAR(self) -> str:
        return os.getenv("DEFAULT_AVATAR", self._config["storage"]["default_avatar"])

    @property
    def MAX_POSTER_SIZE(self) -> int:
        return int(os.getenv("MAX_POSTER_SIZE", self._config["storage"]["max_poster_size"]))

    @property
    def MAX_AVATAR_SIZE(self) -> int:
        return int(os.getenv("MAX_AVATAR_SIZE", self._config["storage"]["max_avatar_size"]))

    @property
    def MAX_CHAPTER_SIZE(self) -> int:
        return int(os.getenv("MAX_CHAPTER_SIZE", self._config["storage"]["max_chapter_size"]))

    @property
    def MAX_CHAPTER_FILES(self) -> int:
        return int(os.getenv("MAX_CHAPTER_FILES", self._config["storage"]["max_chapter_files"]))

    # ==================== Business rules ====================
    @property
    def TOP_STORIES_LIMIT(self) -> int:
        return int(os.getenv("TOP_STORIES_LIMIT", self._config["business"]["top_stories_limit"]))

    @property
    def FULL_TEXT_CONFIG(self) -> str:
        return os.getenv("FULL_TEXT_CONFIG", self._config["business"]["full_text_config"])

    # ==================== Logging ====================
    @property
    def LOG_LEVEL(self) -> str:
        return os.getenv("LOG_LEVEL", self._config["logging"]["level"])

    @property
    def LOG_FILE(self) -> Optional[str]:
        return os.getenv("LOG_FILE", self._config["logging"]["file"])


# Global settings instance
settings = Settings()
