"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use TYPEWRIGHT_ prefix (e.g., TYPEWRIGHT_DEFAULT_SPEED=40).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use TYPEWRIGHT_ prefix.

    Examples:
        TYPEWRIGHT_DEFAULT_SPEED=40
        TYPEWRIGHT_MAX_EXECUTIONS=5000
        TYPEWRIGHT_TIME_UNIT=0.001
    """

    model_config = SettingsConfigDict(
        env_prefix="TYPEWRIGHT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Playback configuration
    default_speed: float = Field(
        default=25,
        ge=0,
        description="Time units between two literal tokens when no speed is given",
    )

    max_executions: int = Field(
        default=1000,
        gt=0,
        description="Consecutive non-literal loop steps allowed before playback is aborted",
    )

    time_unit: float = Field(
        default=0.001,
        gt=0,
        description="Seconds per time unit used by speed and delay values (milliseconds by default)",
    )

    # Tokenizer configuration
    snippet_length: int = Field(
        default=30,
        gt=0,
        description="Characters of an unclosed directive shown in diagnostics",
    )

    # Output configuration
    transcript_name: str = Field(
        default="transcript.txt",
        description="Default filename of the transcript written by the CLI",
    )


# Singleton instance - import this in your code
appsettings = AppSettings()
