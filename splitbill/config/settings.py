"""
Configuration Management for Split Bill

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The engine itself only needs two numbers (the settling epsilon and the
number of decimal places money is rounded to); everything else is about
where records live and how we log.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Settlement engine tolerances."""
    
    model_config = SettingsConfigDict(
        env_prefix="SPLITBILL_ENGINE_",
        extra="ignore"
    )
    
    epsilon: float = Field(
        default=0.01,
        gt=0.0,
        le=1.0,
        description="Balances within +/- epsilon are considered settled"
    )
    money_places: int = Field(
        default=2,
        ge=0,
        le=4,
        description="Decimal places money is rounded to (0 for whole-unit currencies)"
    )
    
    @property
    def rounding_slack(self) -> float:
        """How far one rounded balance may legitimately sit from its exact value."""
        return max(self.epsilon, 0.5 * 10 ** -self.money_places)


class StorageSettings(BaseSettings):
    """Record store configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="SPLITBILL_STORAGE_",
        extra="ignore"
    )
    
    backend: str = Field(
        default="memory",
        pattern="^(memory|json)$",
        description="Which store implementation to use"
    )
    data_dir: str = Field(
        default=".splitbill",
        description="Directory holding the JSON documents (json backend only)"
    )
    
    # Document names within the data directory
    people_file: str = Field(
        default="people.json",
        description="File for the participant list"
    )
    bills_file: str = Field(
        default="bills.json",
        description="File for the bill list"
    )
    payment_status_file: str = Field(
        default="payment_status.json",
        description="File for the paid/unpaid overlay"
    )
    
    @field_validator('people_file', 'bills_file', 'payment_status_file')
    @classmethod
    def validate_plain_filename(cls, v: str) -> str:
        """Document names must not escape the data directory."""
        if Path(v).name != v:
            raise ValueError(f"Expected a bare file name, got: {v}")
        return v
    
    @property
    def data_path(self) -> Path:
        return Path(self.data_dir)


class AppSettings(BaseSettings):
    """
    Main application settings.
    
    Loads configuration from environment variables and .env file.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for emitted log events"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON lines (console renderer otherwise)"
    )
    
    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class Settings(BaseSettings):
    """
    Root settings container.
    
    Aggregates all sub-settings for easy access.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    @property
    def engine(self) -> EngineSettings:
        return EngineSettings()
    
    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()
    
    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).
    
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.
    
    Returns a dict of {setting_name: is_valid}, with an extra
    `<name>_error` entry describing each failure. Useful for startup checks.
    """
    results = {}
    
    settings = get_settings()
    
    for name in ("engine", "storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)
    
    return results
