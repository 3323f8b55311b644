"""Server configuration with sensible defaults for LAN use."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server settings, overridable via environment variables."""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8095

    # Episode listing
    EPISODE_LIST_LIMIT: int = 50
    EPISODE_HISTORY: int = 1000

    model_config = SettingsConfigDict(env_prefix="GLADE_", env_file=".env", extra="ignore")


settings = Settings()
