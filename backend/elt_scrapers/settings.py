"""
Scraper Configuration
Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings
from pathlib import Path


class Settings(BaseSettings):
    """Scraper settings loaded from environment variables."""

    # Output
    data_dir: Path = Path(__file__).resolve().parent.parent / "data"
    content_filename: str = "content.json"

    # Fetch engine
    scraper_timeout: int = 30              # Navigation timeout (seconds)
    scraper_settle_time: float = 1.5       # Extra wait for deferred content (seconds)
    scraper_headless: bool = True
    scraper_fetch_mode: str = "browser"    # "browser" (Playwright) or "static" (httpx)
    scraper_max_retries: int = 3           # Static engine only

    # Politeness
    scraper_min_delay_ms: int = 2000
    scraper_max_delay_ms: int = 5000
    scraper_items_per_source: int = 3

    # Content loader
    loader_min_body_length: int = 100
    loader_prompt_body_limit: int = 2000

    # Logging Configuration
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @property
    def content_file(self) -> Path:
        """Path of the artifact written by a full run."""
        return self.data_dir / self.content_filename

    def site_content_file(self, site_key: str) -> Path:
        """Path of the artifact written by a single-site run."""
        return self.data_dir / f"content-{site_key.lower()}.json"

    @property
    def log_dir(self) -> Path:
        """Get the log directory path."""
        return Path(__file__).resolve().parent.parent.parent / "logs"

    @property
    def log_file(self) -> Path:
        """Get the log file path."""
        return self.log_dir / "scraper.log"

    class Config:
        # Only load .env if it exists to avoid permission errors
        env_file = ".env" if Path(".env").exists() else None
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Ignore extra environment variables


# Global settings instance
settings = Settings()
