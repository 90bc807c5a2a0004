import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import dotenv_values


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class Settings:
    finnhub_api_key: str
    anthropic_api_key: str
    anthropic_model: str
    database_url: str
    quote_delay_seconds: float
    scan_sample_size: int
    quote_cache_ttl: int
    log_level: str


def load_settings(env_file: str) -> Settings:
    """Read settings from a key=value file. Process env vars win over the file."""
    if not os.path.isfile(env_file):
        raise ConfigError(f"Config file not found: {env_file}")

    values = dotenv_values(env_file)

    def get(key, default=None):
        return os.getenv(key) or values.get(key) or default

    database_url = get("DATABASE_URL")
    if not database_url:
        database_url = f"sqlite:///{get('DB_PATH', 'scanner.db')}"

    return Settings(
        finnhub_api_key=get("FINNHUB_API_KEY", ""),
        anthropic_api_key=get("ANTHROPIC_API_KEY", ""),
        anthropic_model=get("ANTHROPIC_MODEL", "claude-sonnet-4-20250514"),
        database_url=database_url,
        quote_delay_seconds=float(get("QUOTE_DELAY_SECONDS", 0.05)),
        scan_sample_size=int(get("SCAN_SAMPLE_SIZE", 28)),
        quote_cache_ttl=int(get("QUOTE_CACHE_TTL", 30)),
        log_level=get("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings(os.getenv("ENV_FILE", ".env"))
