"""Application configuration loaded from environment variables."""
import os
from functools import lru_cache

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageKeys(BaseModel):
    """Names of the key-value buckets holding each JSON document."""

    workouts: str = "@stepup_workouts"
    weekly_goals: str = "@stepup_weekly_goals"
    custom_types: str = "@stepup_custom_types"
    user: str = "@stepup_user"
    rest_days: str = "@stepup_rest_days"


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_prefix="STEPUP_", env_nested_delimiter="__")

    # Store location
    data_path: str = os.getenv("DATA_PATH", os.getcwd())
    store_file: str = "stepup.db"

    @property
    def store_path(self) -> str:
        return os.path.join(self.data_path, self.store_file)

    storage_keys: StorageKeys = StorageKeys()

    default_workout_types: list[str] = ["Strength", "Cardio", "Yoga", "HIIT", "Pilates", "Other"]

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
