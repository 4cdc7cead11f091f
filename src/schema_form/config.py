"""
Configuration module for Schema-Form.

Handles environment variables and default settings.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    return os.getenv(name, str(default).lower()).lower() == "true"


@dataclass
class SchemaFormConfig:
    """Configuration settings for Schema-Form."""

    # Multi-step defaults
    fields_per_step: int = 3
    allow_step_navigation: bool = True
    validate_on_step_change: bool = True
    show_progress_bar: bool = True

    # Persistence keys
    durable_key_prefix: str = "kyc"
    temporary_key_prefix: str = "temp"
    schema_storage_key: str = "form-schema"
    storage_file: str | None = None

    # Messages
    submit_error_fallback: str = "An error occurred"
    submit_invalid_message: str = "Please fix all validation errors before submitting"
    step_invalid_message: str = "Please fix all validation errors before proceeding"

    # MCP Server settings
    mcp_transport: str = "stdio"  # stdio or sse
    mcp_port: int = 8080

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "SchemaFormConfig":
        """
        Create configuration from environment variables.

        If an environment variable is not set, uses the class field default value.
        """
        _defaults = cls()

        return cls(
            fields_per_step=int(os.getenv("SCHEMA_FORM_FIELDS_PER_STEP", str(_defaults.fields_per_step))),
            allow_step_navigation=_env_flag("SCHEMA_FORM_ALLOW_STEP_NAVIGATION", _defaults.allow_step_navigation),
            validate_on_step_change=_env_flag("SCHEMA_FORM_VALIDATE_ON_STEP_CHANGE", _defaults.validate_on_step_change),
            show_progress_bar=_env_flag("SCHEMA_FORM_SHOW_PROGRESS_BAR", _defaults.show_progress_bar),
            durable_key_prefix=os.getenv("SCHEMA_FORM_DURABLE_PREFIX", _defaults.durable_key_prefix),
            temporary_key_prefix=os.getenv("SCHEMA_FORM_TEMPORARY_PREFIX", _defaults.temporary_key_prefix),
            schema_storage_key=os.getenv("SCHEMA_FORM_SCHEMA_KEY", _defaults.schema_storage_key),
            storage_file=os.getenv("SCHEMA_FORM_STORAGE_FILE", _defaults.storage_file),
            mcp_transport=os.getenv("MCP_TRANSPORT", _defaults.mcp_transport),
            mcp_port=int(os.getenv("MCP_PORT", str(_defaults.mcp_port))),
            log_level=os.getenv("SCHEMA_FORM_LOG_LEVEL", _defaults.log_level),
        )


config = SchemaFormConfig.from_env()


def get_config() -> SchemaFormConfig:
    """Get the current configuration."""
    return config


def update_config(**kwargs) -> SchemaFormConfig:
    """Update configuration settings."""
    global config
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
    return config
