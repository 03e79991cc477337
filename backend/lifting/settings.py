from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    ENV: str = "local"
    DB_HOST: str = "db"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "lifting"
    DB_URL: str | None = None  # full URL override, e.g. sqlite for tests

    # HTTP
    ALLOW_ORIGINS: str = "*"
    API_VERSION: str = "dev"

    # Progression
    PROGRESSION_LOOKBACK_WEEKS: int = 5
    DELOAD_WEIGHT_FACTOR: float = 0.85
    DELOAD_VOLUME_FACTOR: float = 0.5
    REGRESS_AFTER_MISSES: int = 2

    # Mesocycle generation
    DEFAULT_TOTAL_WEEKS: int = 7
    WRITE_BATCH_SIZE: int = 500

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def DATABASE_URL(self) -> str:
        if self.DB_URL:
            return self.DB_URL
        return (
            f"postgresql+psycopg://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

@lru_cache
def get_settings() -> Settings:
    return Settings()
