"""Application configuration using Pydantic settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Discord
    discord_webhook_url: str = ""

    # App Settings
    debug: bool = False
    log_level: str = "INFO"
    log_dir: str = ""  # Empty means current working directory
    app_host: str = "0.0.0.0"
    app_port: int = 3000

    # Scheduler
    poll_seconds: int = 60
    source_delay_seconds: float = 0.8  # Pause between two sources in one cycle
    startup_delay_seconds: int = 8

    # Alerting
    alert_cooldown_seconds: int = 90

    # Headless browser
    headless: bool = True
    navigation_timeout_ms: int = 60000
    page_settle_ms: int = 4500  # Time to let the page fire its XHRs

    # Extraction
    top_orders: int = 15
    extract_max_depth: int = 64
    extract_max_nodes: int = 100_000

    # Seed the faction market pages on startup
    seed_default_sources: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
