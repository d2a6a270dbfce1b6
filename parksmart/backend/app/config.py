from datetime import timedelta
from functools import lru_cache
import os
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .core.constants import DEFAULT_TICK_INTERVAL_SECONDS


class Settings(BaseModel):
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    database_url: str = Field(default="", alias="DATABASE_URL")
    postgres_db: str = Field(default="parksmart", alias="POSTGRES_DB")
    postgres_user: str = Field(default="parksmart", alias="POSTGRES_USER")
    postgres_password: str = Field(default="parksmart", alias="POSTGRES_PASSWORD")
    postgres_host: str = Field(default="localhost", alias="POSTGRES_HOST")
    postgres_port: int = Field(default=5432, alias="POSTGRES_PORT")

    extension_near_start_hours: float = Field(default=2, alias="EXTENSION_NEAR_START_HOURS")
    cancellation_lead_minutes: int = Field(default=60, alias="CANCELLATION_LEAD_MINUTES")
    min_extension_hours: int = Field(default=1, alias="MIN_EXTENSION_HOURS")
    max_extension_hours: int = Field(default=12, alias="MAX_EXTENSION_HOURS")
    max_booking_hours: int = Field(default=24, alias="MAX_BOOKING_HOURS")

    tick_interval_seconds: float = Field(default=DEFAULT_TICK_INTERVAL_SECONDS, alias="TICK_INTERVAL_SECONDS")
    status_sweep_minutes: int = Field(default=1, alias="STATUS_SWEEP_MINUTES")
    scheduler_enabled: bool = Field(default=True, alias="SCHEDULER_ENABLED")

    class Config:
        populate_by_name = True

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def near_start_window(self) -> timedelta:
        return timedelta(hours=self.extension_near_start_hours)

    @property
    def cancellation_lead_time(self) -> timedelta:
        return timedelta(minutes=self.cancellation_lead_minutes)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv(override=False)
    return Settings(**os.environ)
