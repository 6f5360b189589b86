from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path(__file__).parent.parent / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="PULLVALUE_")

    app_name: str = "PullValue"
    debug: bool = False

    scryfall_api_url: str = "https://api.scryfall.com"
    user_agent: str = "PullValue/1.0"
    http_timeout: float = 30.0

    data_dir: Path = DATA_DIR
    cache_dir: Path = DATA_DIR / "cache"
    sets_path: Path = DATA_DIR / "sets.json"

    # Local file wins; the URLs are the shared source of truth
    set_configs_path: Path = DATA_DIR / "set-configs.json"
    set_configs_url: str = "https://bensonperry.com/shared/set-configs.json"
    collector_exclusives_url: str = "https://bensonperry.com/shared/collector-exclusives.json"

    # Price floor for cached and live pools
    min_cached_price: float = 0.5
    max_cards_per_query: int = 350

    # Scryfall asks for 50-100ms between requests
    request_delay: float = 0.1
    rate_limit_delay: float = 2.0
    retry_backoff: float = 0.5
    max_attempts: int = 3

    batch_size: int = 5
    batch_pause: float = 1.0


settings = Settings()


# =============================================================================
# LOOKUP DEFAULTS
# =============================================================================

# Minimum display price when the query string omits one
DEFAULT_MIN_PRICE = 1.0
