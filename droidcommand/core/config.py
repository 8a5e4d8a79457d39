"""Configuration management for the DroidCommand framework."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Load environment variables
load_dotenv()


class Config(BaseSettings):
    """Configuration class for DroidCommand framework."""

    # Execution engine
    step_retry_attempts: int = Field(default=5, description="Lookup attempts for find/click/type steps")
    step_retry_delay_ms: int = Field(default=500, description="Delay between lookup attempts")
    default_wait_ms: int = Field(default=1000, description="Wait used when a wait step has no valid duration")

    # Plan compiler
    default_message: str = Field(default="Hi", description="Message sent when none could be extracted")

    # Android Configuration
    provider_backend: str = Field(default="adb", description="UI tree provider: 'adb' or 'none'")
    android_device_id: Optional[str] = Field(default=None, description="Device serial, auto-detect when empty")
    adb_path: str = Field(default="adb")
    adb_timeout: int = Field(default=15)

    # Framework Configuration
    log_level: str = Field(default="INFO")
    log_to_file: bool = Field(default=False)
    log_dir: str = Field(default="logs")

    # API Configuration
    api_host: str = Field(default="localhost")
    api_port: int = Field(default=8000)
    cors_origins: list[str] = Field(default=["http://localhost:3000"])

    class Config:
        """Pydantic configuration for environment loading."""

        env_file = ".env"
        env_prefix = "DROIDCOMMAND_"
        case_sensitive = False
        extra = "ignore"  # Ignore unexpected env vars rather than raising errors

    def validate_config(self) -> bool:
        """Validate configuration values."""
        if self.step_retry_attempts <= 0:
            raise ValueError("Step retry attempts must be positive")

        if self.step_retry_delay_ms < 0:
            raise ValueError("Step retry delay must not be negative")

        if self.provider_backend not in ("adb", "none"):
            raise ValueError(f"Unknown provider backend: {self.provider_backend}")

        return True

    @property
    def step_retry_delay(self) -> float:
        """Delay between lookup attempts in seconds."""
        return self.step_retry_delay_ms / 1000

    def get_log_path(self) -> str:
        """Get the full path to the log directory."""
        return os.path.join(os.getcwd(), self.log_dir)


# Global configuration instance
config = Config()
