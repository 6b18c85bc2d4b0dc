"""Application configuration management."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    debug: bool = False
    log_level: str = "INFO"
    log_dir: str | None = None
    api_prefix: str = "/api"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Upstream targets (index 0: no key, index 1: bearer key)
    pollinations_base_url: str = "https://text.pollinations.ai"
    a4f_base_url: str = "https://api.a4f.co/v1"
    a4f_api_key: str = ""

    # None means no timeout on upstream calls
    upstream_timeout: float | None = None

    # Typewriter pacing
    stream_tick_ms: int = 20

    @property
    def stream_tick_seconds(self) -> float:
        """Delay between two emitted characters, in seconds."""
        return max(self.stream_tick_ms, 0) / 1000


# Global settings instance
settings = Settings()
