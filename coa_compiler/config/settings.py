"""
Configuration Management for the COA Compiler

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All thresholds and formats are centralized here.
Components accept an explicit settings instance so tests and embedding
applications can compile with different policies side by side.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CompilerSettings(BaseSettings):
    """
    Compiler settings.

    Loads configuration from COA_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="COA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Template selection
    base_template_id: str = Field(
        default="universal",
        min_length=1,
        description="Identifier of the base template layer"
    )
    default_country: str = Field(
        default="usa",
        min_length=1,
        description="Country used by quick setup"
    )

    # Validation thresholds
    min_required_accounts: int = Field(
        default=10,
        ge=0,
        description="Fewer required accounts than this is a completeness warning"
    )
    min_posting_rules: int = Field(
        default=5,
        ge=0,
        description="Fewer posting rules than this is an automation warning"
    )
    account_code_digits: int = Field(
        default=7,
        ge=1,
        le=20,
        description="Fixed width of numeric account codes"
    )

    # Smart codes
    smart_code_suffix_digits: int = Field(
        default=7,
        ge=1,
        le=20,
        description="How many trailing code digits go into a smart code"
    )
    smart_code_version: str = Field(
        default="v1",
        pattern=r"^v[0-9]+$",
        description="Version segment appended to generated smart codes"
    )

    # Planning
    large_business_time_multiplier: float = Field(
        default=2.0,
        ge=1.0,
        le=10.0,
        description="Scale factor for time-sensitive steps of large businesses"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Compilation log level"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator('base_template_id', 'default_country')
    @classmethod
    def normalize_key(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def account_code_pattern(self) -> str:
        """Regex every account code must match."""
        return rf"^[0-9]{{{self.account_code_digits}}}$"


@lru_cache()
def get_settings() -> CompilerSettings:
    """
    Get compiler settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return CompilerSettings()
