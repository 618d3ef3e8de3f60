"""
Configuration management for Livedoc.

This module provides centralized configuration using Pydantic settings
with support for environment variables and .env files.
"""

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

SCOPE_SEPARATOR = "@"


class ValidationResult(BaseModel):
    valid: bool = True
    errors: list[str] = []
    warnings: list[str] = []


class LivedocSettings(BaseSettings):
    """Livedoc configuration settings."""

    # Application
    app_name: str = "livedoc"
    app_version: str = "0.1.0"
    debug: bool = Field(default=False)

    # Graph database settings
    graph_enabled: bool = Field(default=True, description="Enable the Neo4j backed feature store")

    # Neo4j settings
    neo4j_uri: str = Field(default="bolt://localhost:7687", description="Neo4j database URI")
    neo4j_user: str = Field(default="neo4j", description="Neo4j username")
    neo4j_password: str = Field(default="password", description="Neo4j password")

    # Dependency graph settings
    graph_scopes: list[str] = Field(
        default=[],
        description="Scopes ('product@version') spanned by the root graph query; empty means every stored scope"
    )
    strict_signature_ownership: bool = Field(
        default=False,
        description="Fail queries when two features declare the same signature instead of letting the first one win"
    )

    # Logging settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_structured: bool = Field(default=False, description="Emit JSON log records")
    log_file: str = Field(default="", description="Optional log file path")

    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(
        env_file="config/.env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="LIVEDOC_",
        extra="ignore",
    )

    def get_log_file_path(self) -> Path | None:
        """Get log file path as Path object."""
        if not self.log_file:
            return None
        path = Path(self.log_file).expanduser().resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    def get_graph_scopes(self) -> list[tuple[str, str]]:
        """Get configured root query scopes as (product, version) pairs."""
        scopes = []
        for scope in self.graph_scopes:
            product, _, version = scope.rpartition(SCOPE_SEPARATOR)
            scopes.append((product, version))
        return scopes

    def validate_settings(self) -> ValidationResult:
        """Validate settings and return status information."""
        status = ValidationResult()

        for scope in self.graph_scopes:
            product, separator, version = scope.rpartition(SCOPE_SEPARATOR)
            if not separator or not product or not version:
                status.errors.append(f"Invalid graph scope '{scope}', expected 'product@version'")
                status.valid = False

        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            status.errors.append(f"Unknown log level: {self.log_level}")
            status.valid = False

        if not self.graph_enabled:
            status.warnings.append("Neo4j integration is disabled; only snapshot files can be queried.")

        return status


# Global settings instance
settings = LivedocSettings()


def get_settings() -> LivedocSettings:
    """Get the global settings instance."""
    return settings


def reload_settings() -> LivedocSettings:
    """Reload settings from environment and return new instance."""
    global settings
    settings = LivedocSettings()
    return settings
