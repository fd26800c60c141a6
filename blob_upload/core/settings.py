"""Unified settings for blob-upload."""

import tempfile
import tomllib
from pathlib import Path
from typing import ClassVar, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


def read_pyproject(pyproject_path: Path) -> dict:
    """Read pyproject.toml into a dict."""
    with pyproject_path.open("rb") as file_handle:
        return tomllib.load(file_handle)


def get_version(base_dir: Path) -> str:
    """Get version from git tags or fallback to package metadata."""
    try:
        import git

        repo = git.Repo(base_dir, search_parent_directories=True)
        latest_tag = max(repo.tags, key=lambda t: t.commit.committed_datetime, default=None)
        return str(latest_tag) if latest_tag else "0.0.0"
    except Exception:
        try:
            import importlib.metadata

            return importlib.metadata.version("blob-upload")
        except Exception:
            return "0.0.0"


class Settings(BaseSettings):
    """Unified settings for blob-upload service."""

    DEBUG: bool = True
    ENVIRONMENT: Literal["DEV", "PROD"] = "DEV"

    # ClassVar to prevent Pydantic from trying to load from env
    BASE_DIR: ClassVar[Path] = Path(__file__).parent.parent.parent
    PROJECT: ClassVar[dict] = read_pyproject(BASE_DIR / "pyproject.toml")
    API_NAME: ClassVar[str] = PROJECT.get("project", {}).get("name", "blob-upload")
    API_DESCRIPTION: ClassVar[str] = PROJECT.get("project", {}).get("description", "Single-file upload service")
    API_VERSION: ClassVar[str] = get_version(BASE_DIR)

    # Server
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Uploads
    FORM_PATH: str = "/"
    UPLOAD_ENDPOINT: str = "/upload"
    UPLOAD_FIELD: str = "myFile"
    UPLOAD_TMP_DIR: Path = Path(tempfile.gettempdir()) / "blob-upload"
    MAX_UPLOAD_SIZE: int | None = None

    # Client-side blob payloads
    BLOB_FIELD: str = "image"
    BLOB_FILENAME: str = "image.jpg"
    BLOB_UPLOAD_URL: str = "http://localhost:8000/upload"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()  # type: ignore
