"""
Configuration management for RADIT

Loads settings from:
1. An optional YAML file (config/config.yaml by default)
2. Environment variables prefixed RADIT_ (and .env)
3. Default values
"""

from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from radit.authority import DEFAULT_ORGANIZATION, ContactPolicy
from radit.catalog import DEFAULT_CURATED_PATH, DEFAULT_PRIMING_PATH
from radit.ingestion.pen import DEFAULT_HEADER_LINES


# Load environment variables
load_dotenv()


class RADITConfig(BaseSettings):
    """Settings for a tree build run."""

    model_config = SettingsConfigDict(
        env_prefix="RADIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Sources ---
    smi_file: Optional[Path] = Field(default=None, description="IANA SMI Numbers XML registry")
    ldap_file: Optional[Path] = Field(default=None, description="IANA LDAP Parameters XML registry")
    pen_file: Optional[Path] = Field(default=None, description="IANA enterprise-numbers text registry")
    pen_header_lines: int = Field(default=DEFAULT_HEADER_LINES, ge=0)

    # --- Assembly ---
    contact_policy: ContactPolicy = ContactPolicy.dedicated
    organization_literal: str = DEFAULT_ORGANIZATION
    sort_by_number: bool = True
    priming_path: Path = DEFAULT_PRIMING_PATH
    curated_path: Path = DEFAULT_CURATED_PATH

    # --- Output ---
    output_path: Path = Path("data/exports/radit.json")

    # --- Logging ---
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return value

    @classmethod
    def from_yaml(cls, yaml_path: str | Path = "config/config.yaml") -> "RADITConfig":
        """Load configuration from YAML file"""
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            return cls()

        with open(yaml_path) as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)


# Global configuration instance
_config: Optional[RADITConfig] = None


def get_config() -> RADITConfig:
    """Get or create global configuration instance"""
    global _config
    if _config is None:
        _config = RADITConfig.from_yaml()
    return _config


def reload_config(yaml_path: Optional[str | Path] = None) -> RADITConfig:
    """Reload configuration from file"""
    global _config
    _config = RADITConfig.from_yaml(yaml_path) if yaml_path else RADITConfig.from_yaml()
    return _config
