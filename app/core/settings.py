"""
Core settings and environment variables for CivicTrack.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """

    # Application
    APP_NAME: str = "CivicTrack"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS - Frontend URLs allowed to access this API (comma separated)
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"

    # Firebase/Firestore
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None  # Path to service account JSON
    FIREBASE_STORAGE_BUCKET: Optional[str] = None

    # Mock DB mode for local development without Firebase credentials.
    # An empty MOCK_DB_PATH keeps the mock database in memory only.
    USE_MOCK_DB: bool = False
    MOCK_DB_PATH: str = "./mock_db.json"

    # Evidence storage
    # - STORAGE_BACKEND: "local" (files under UPLOADS_DIR) or "firebase" (bucket)
    STORAGE_BACKEND: str = "local"
    UPLOADS_DIR: str = "./public/uploads"
    UPLOADS_URL_PREFIX: str = "/uploads"
    REMOTE_UPLOAD_FOLDER: str = "CivicTrack_uploads"

    # Admin tokens
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE: str = "1h"  # "<n>s", "<n>m", "<n>h", "<n>d" or plain seconds

    # bcrypt work factor for stored passwords
    PASSWORD_HASH_ROUNDS: int = 12

    # Moderation: when True only pending -> accepted/rejected is allowed
    STRICT_STATUS_WORKFLOW: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
