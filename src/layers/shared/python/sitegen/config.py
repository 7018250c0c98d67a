"""Runtime settings for the generation pipeline, read from environment variables."""

import os
from dataclasses import dataclass

DEFAULT_USER_AGENT = "Sitegen-Bot/1.0 (Website Analysis)"


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class GenerationSettings:
    """Settings for the fetcher, enrichment providers and job orchestrator."""

    table_name: str = "sitegen-dev"
    unsplash_access_key: str | None = None

    # Orchestrator
    concurrency: int = 2
    max_attempts: int = 3
    backoff_seconds: float = 1.0
    job_timeout_seconds: float = 120.0
    lock_ttl_seconds: int = 600

    # Secure fetcher
    fetch_timeout_seconds: float = 10.0
    fetch_max_bytes: int = 5 * 1024 * 1024
    fetch_resolve_hosts: bool = True
    user_agent: str = DEFAULT_USER_AGENT

    # Image enrichment
    image_check_timeout_seconds: float = 3.0
    image_search_timeout_seconds: float = 5.0

    @classmethod
    def from_env(cls) -> "GenerationSettings":
        """Build settings from environment variables, falling back to defaults."""
        return cls(
            table_name=os.environ.get("TABLE_NAME", "sitegen-dev"),
            unsplash_access_key=os.environ.get("UNSPLASH_ACCESS_KEY") or None,
            concurrency=int(os.environ.get("GENERATION_CONCURRENCY", "2")),
            max_attempts=int(os.environ.get("GENERATION_MAX_ATTEMPTS", "3")),
            backoff_seconds=float(os.environ.get("GENERATION_BACKOFF_SECONDS", "1.0")),
            job_timeout_seconds=float(os.environ.get("GENERATION_JOB_TIMEOUT_SECONDS", "120")),
            lock_ttl_seconds=int(os.environ.get("GENERATION_LOCK_TTL_SECONDS", "600")),
            fetch_timeout_seconds=float(os.environ.get("FETCH_TIMEOUT_SECONDS", "10")),
            fetch_max_bytes=int(os.environ.get("FETCH_MAX_BYTES", str(5 * 1024 * 1024))),
            fetch_resolve_hosts=_env_bool("FETCH_RESOLVE_HOSTS", True),
            user_agent=os.environ.get("SCRAPER_USER_AGENT", DEFAULT_USER_AGENT),
        )
