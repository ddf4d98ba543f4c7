"""Configuration management for AniOrder."""

import os
import re
from pathlib import Path
from typing import Any, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from aniorder.core.reference import parse_media_type, parse_relation_types
from aniorder.models.media import MediaType, RelationType

DEFAULT_ENDPOINT = "https://graphql.anilist.co"
DEFAULT_RELATIONS = ["PREQUEL", "SEQUEL", "PARENT", "SIDE_STORY", "ALTERNATIVE", "SPIN_OFF"]


class CatalogConfig(BaseModel):
    """Catalog API configuration."""

    endpoint: str = Field(default=DEFAULT_ENDPOINT, description="GraphQL endpoint URL")
    timeout_seconds: float = Field(default=10.0, gt=0, description="Per-request timeout")
    transport_attempts: int = Field(
        default=3, ge=1, description="Attempts before a transport error is fatal"
    )


class RateLimitConfig(BaseModel):
    """Rate limit cooperation timings, in seconds."""

    retry_after_buffer_seconds: float = Field(
        default=1, ge=0, description="Added to the server's Retry-After value"
    )
    missing_header_wait_seconds: float = Field(
        default=5, ge=0, description="Wait when X-RateLimit-Remaining is absent"
    )
    exhausted_wait_seconds: float = Field(
        default=63, ge=0, description="Wait when no calls remain in the window"
    )
    exhausted_buffer_seconds: float = Field(
        default=1, ge=0, description="Added to the exhausted wait"
    )


class ResolverConfig(BaseModel):
    """Relation traversal configuration."""

    relations: List[str] = Field(
        default_factory=lambda: list(DEFAULT_RELATIONS),
        description="Relation types followed during traversal",
    )
    media_type: str = Field(default="ANIME", description="Media type filter (ANY, ANIME, MANGA)")
    use_end_date: bool = Field(default=False, description="Order by end date instead of start date")
    max_requests: Optional[int] = Field(
        default=None, ge=1, description="Ceiling on catalog requests per run (None = unbounded)"
    )

    @field_validator("relations", mode="before")
    @classmethod
    def validate_relations(cls, v: Any) -> List[str]:
        """Normalize relation names, accepting a comma-separated string."""
        return sorted(relation.value for relation in parse_relation_types(v))

    @field_validator("media_type")
    @classmethod
    def validate_media_type(cls, v: str) -> str:
        """Normalize media type name."""
        return parse_media_type(v).value

    @property
    def relation_types(self) -> set[RelationType]:
        """Relation allow-list as enum members."""
        return {RelationType(name) for name in self.relations}

    @property
    def media_type_filter(self) -> MediaType:
        """Media type filter as enum member."""
        return MediaType(self.media_type)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    format: str = Field(default="text", description="Log format (json or text)")
    level: str = Field(default="info", description="Log level")
    console: bool = Field(default=True, description="Log to stderr")
    output: Optional[str] = Field(default=None, description="Log file path (None = no file)")

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        if v not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        if v.lower() not in ("debug", "info", "warning", "error", "critical"):
            raise ValueError("Invalid log level")
        return v.lower()


class Config(BaseModel):
    """Main configuration model."""

    catalog: CatalogConfig = Field(default_factory=CatalogConfig, description="Catalog API")
    rate_limit: RateLimitConfig = Field(
        default_factory=RateLimitConfig, description="Rate limit cooperation"
    )
    resolver: ResolverConfig = Field(default_factory=ResolverConfig, description="Traversal")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging")

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path) as f:
            raw_config = yaml.safe_load(f)

        if raw_config is None:
            raw_config = {}

        raw_config = cls._substitute_env_vars(raw_config)

        return cls(**raw_config)

    @staticmethod
    def _substitute_env_vars(obj: Any) -> Any:
        """Recursively replace ${VAR_NAME} with os.environ['VAR_NAME']."""
        if isinstance(obj, dict):
            return {key: Config._substitute_env_vars(value) for key, value in obj.items()}
        elif isinstance(obj, list):
            return [Config._substitute_env_vars(item) for item in obj]
        elif isinstance(obj, str):
            pattern = r"\$\{([^}]+)\}"

            def replace_var(match):
                var_name = match.group(1)
                value = os.environ.get(var_name)
                if value is None:
                    raise ValueError(
                        f"Environment variable '{var_name}' not found "
                        f"(referenced in configuration)"
                    )
                return value

            return re.sub(pattern, replace_var, obj)
        else:
            return obj


def load_config(path: Optional[str | Path] = None) -> Config:
    """Load configuration from file or use defaults.

    Args:
        path: Optional path to configuration file. If None, uses defaults.

    Returns:
        Config instance
    """
    if path is None:
        return Config()

    return Config.from_yaml(path)
