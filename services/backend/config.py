"""Backend settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Gatekeeper Access API"
    debug: bool = False

    database_url: str = ""
    # Hosted poolers require SSL; disable for local Postgres
    database_ssl: bool = True

    # Invite windows are stored as estate-local wall clock
    estate_timezone: str = "Africa/Lagos"
    scan_uri_scheme: str = "gatekeeper"

    # Invites
    invite_sweep_interval_minutes: int = 30
    transition_max_retries: int = 3

    # Device sessions
    device_limit: int = 3
    device_inactivity_days: int = 30
    device_check_interval_hours: int = 24
    device_check_tick_minutes: int = 60
    enable_device_management: bool = True

    # Installation-local state (device id, last inactivity check, telemetry)
    local_state_path: str = ".gatekeeper/local_state.json"

    enable_schedulers: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
