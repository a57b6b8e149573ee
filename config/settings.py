import os
import urllib.parse
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    try:
        value = int(os.getenv(name, str(default)))
    except ValueError:
        return default
    return value or default


def _build_database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    # Uses SQL_* env vars (e.g., Supabase) when a PostgreSQL host is configured.
    if os.getenv("SQL_HOST"):
        password = urllib.parse.quote_plus(os.getenv("SQL_PASSWORD", ""))
        return (
            f"postgresql+psycopg2://{os.getenv('SQL_USER', 'postgres')}:{password}"
            f"@{os.getenv('SQL_HOST')}:{os.getenv('SQL_PORT', '5432')}/{os.getenv('SQL_DATABASE', 'yogatube')}"
        )

    db_path = Path(os.getenv("DB_PATH", "db/yogatube.db"))
    return f"sqlite:///{db_path}"


@dataclass
class DatabaseSettings:
    url: str = field(default_factory=_build_database_url)
    echo: bool = field(default_factory=lambda: os.getenv("SQL_ECHO", "false").lower() == "true")
    health_timeout_seconds: float = 1.0


@dataclass
class YouTubeSettings:
    api_key: str = field(default_factory=lambda: os.getenv("YOUTUBE_API_KEY", ""))
    playlist_id: str = field(
        default_factory=lambda: os.getenv("YOUTUBE_PLAYLIST_ID", "PLxVWCXBCnDMNRTtdO1E-4VGTz1LEnJoWs")
    )
    max_results: int = field(default_factory=lambda: _env_int("YOUTUBE_MAX_RESULTS", 50))


@dataclass
class ServerSettings:
    host: str = field(default_factory=lambda: os.getenv("APP_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _env_int("PORT", 8080))
    frontend_dir: str = field(default_factory=lambda: os.getenv("FRONTEND_DIR", "frontend/dist"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    log_structured: bool = field(
        default_factory=lambda: os.getenv("LOG_STRUCTURED", "true").lower() in ("true", "1", "yes")
    )
    log_file: str | None = field(default_factory=lambda: os.getenv("LOG_FILE") or None)
