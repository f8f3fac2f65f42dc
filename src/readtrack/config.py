# ABOUTME: Application settings loaded from READTRACK_* environment variables and .env.
# ABOUTME: Chooses the backend (local SQLite or Firebase) and where local data lives.

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_DIR = Path.home() / ".readtrack"


class Settings(BaseSettings):
    """readtrack configuration.

    Attributes:
        backend: ``local`` (SQLite + cover directory) or ``firebase``.
        data_dir: Root for the local database, covers and the saved session.
        user_id: Owner id used by the local backend.
        cover_base_url: Public URL the local covers directory is served under.
        firebase_api_key: Web API key of the Firebase project.
        firebase_project_id: Firestore project id.
        firebase_storage_bucket: Storage bucket for cover photos.
        http_timeout: Seconds before a Firebase request times out.
    """

    model_config = SettingsConfigDict(env_prefix="READTRACK_", env_file=".env", extra="ignore")

    backend: Literal["local", "firebase"] = "local"
    data_dir: Path = DEFAULT_DATA_DIR
    user_id: str = "local"
    cover_base_url: str = "http://localhost:8765/covers"
    firebase_api_key: str = ""
    firebase_project_id: str = ""
    firebase_storage_bucket: str = ""
    http_timeout: float = 30.0

    @property
    def db_path(self) -> Path:
        return self.data_dir / "library.db"

    @property
    def covers_dir(self) -> Path:
        return self.data_dir / "covers"

    @property
    def session_path(self) -> Path:
        return self.data_dir / "session.json"

    def missing_firebase_settings(self) -> list[str]:
        """Names of the Firebase settings that are still empty."""
        required = {
            "READTRACK_FIREBASE_API_KEY": self.firebase_api_key,
            "READTRACK_FIREBASE_PROJECT_ID": self.firebase_project_id,
            "READTRACK_FIREBASE_STORAGE_BUCKET": self.firebase_storage_bucket,
        }
        return [name for name, value in required.items() if not value]
