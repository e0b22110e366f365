"""Server configuration with sensible defaults for LAN use."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server settings, overridable via environment variables."""

    # Caches
    BODY_CACHE_MAX: int = 64

    # Headless playback
    FRAME_EVERY_DEFAULT: int = 6
    MAX_SITES: int = 256

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8090

    model_config = SettingsConfigDict(env_prefix="IMPACTSIM_", env_file=".env", extra="ignore")


settings = Settings()
