import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, HttpUrl, ValidationError

from web_scraping.scrape.fetcher import UA


class Settings(BaseModel):
    env: str = Field(default="local", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # product cache
    use_database: bool = Field(default=True, alias="USE_DATABASE")
    cache_backend: Literal["sqlite", "supabase"] = Field(default="sqlite", alias="CACHE_BACKEND")
    sqlite_path: str = Field(default="products.db", alias="SQLITE_PATH")
    supabase_url: Optional[HttpUrl] = Field(default=None, alias="SUPABASE_URL")
    supabase_key: Optional[str] = Field(default=None, alias="SUPABASE_SERVICE_KEY")
    supabase_table: str = Field(default="products", alias="SUPABASE_TABLE")

    # fetching
    fetch_timeout: float = Field(default=10.0, gt=0, alias="FETCH_TIMEOUT")
    fetch_retries: int = Field(default=0, ge=0, alias="FETCH_RETRIES")
    max_concurrency: int = Field(default=3, ge=1, alias="MAX_CONCURRENCY")
    user_agent: str = Field(default=UA, alias="USER_AGENT")


def _load_dotenv():
    # Load from repo root if present, otherwise rely on environment variables.
    root_env = Path(__file__).resolve().parents[2] / ".env"
    if root_env.exists():
        load_dotenv(root_env)
    else:
        load_dotenv()


@lru_cache()
def get_settings() -> Settings:
    _load_dotenv()
    try:
        return Settings(**os.environ)
    except ValidationError as exc:
        bad = [str(e["loc"][0]) for e in exc.errors()]
        detail = f"Invalid environment variables: {', '.join(bad)}"
        raise RuntimeError(detail) from exc
