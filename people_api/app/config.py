import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_PAGE_SIZE = 20


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass(frozen=True)
class Settings:
    database_url: Optional[str] = None
    log_level: str = "INFO"
    page_size: int = DEFAULT_PAGE_SIZE
    cors_origins: List[str] = field(default_factory=list)


def get_settings() -> Settings:
    """Read settings from the process environment (and ``.env`` if present)."""
    page_size = int(os.environ.get("PAGE_SIZE", str(DEFAULT_PAGE_SIZE)))
    if page_size < 1:
        raise RuntimeError("PAGE_SIZE must be a positive integer")
    return Settings(
        database_url=os.environ.get("DATABASE_URL") or None,
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        page_size=page_size,
        cors_origins=_split_origins(os.environ.get("CORS_ORIGINS", "")),
    )
