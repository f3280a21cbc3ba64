"""Configuration models and loader for wpfront."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_NAME = "wpfront.yml"

ENV_API_URL = "WORDPRESS_API_URL"
ENV_USER = "WORDPRESS_USER"
ENV_APP_PASSWORD = "WORDPRESS_APP_PASSWORD"


class ConfigError(ValueError):
    """Raised when required settings are missing or invalid."""


class WordPressConfig(BaseModel):
    """Connection settings for the WordPress REST API."""

    api_url: str | None = Field(
        default=None,
        description="Base URL of the WordPress site, e.g. 'https://cms.example.com'.",
    )
    user: str | None = Field(default=None, description="Account used for Basic authentication.")
    app_password: str | None = Field(
        default=None,
        description="Application password; whitespace is ignored.",
    )
    timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds.")

    @field_validator("api_url", mode="before")
    def _normalize_url(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip().rstrip("/")
        return text or None

    @field_validator("user", "app_password", mode="before")
    def _blank_to_none(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value)
        return text if text.strip() else None

    @property
    def rest_base(self) -> str:
        return f"{self.require_api_url()}/wp-json/wp/v2"

    def require_api_url(self) -> str:
        if not self.api_url:
            raise ConfigError(
                f"WordPress API URL is not configured; set wordpress.api_url or {ENV_API_URL}."
            )
        return self.api_url

    def require_credentials(self) -> tuple[str, str]:
        """Return ``(user, app_password)`` or fail when either is missing."""
        self.require_api_url()
        if not self.user:
            raise ConfigError(f"WordPress user is not configured; set wordpress.user or {ENV_USER}.")
        if not self.app_password:
            raise ConfigError(
                "WordPress application password is not configured; "
                f"set wordpress.app_password or {ENV_APP_PASSWORD}."
            )
        return self.user, self.app_password


class SiteConfig(BaseModel):
    """Public metadata for the generated site."""

    title: str = Field(default="devbanhmi")
    description: str = Field(
        default="CODE. CREATE. CRUNCH. Lessons learned in software engineering, AI, and startups."
    )
    url: str = Field(default="https://devbanhmi.com")
    language: str = Field(default="en-us")

    @field_validator("url", mode="before")
    def _strip_trailing_slash(cls, value: Any) -> str:
        return str(value).strip().rstrip("/")


class FeedConfig(BaseModel):
    """Options controlling feed generation."""

    enabled: bool = Field(default=True, description="Toggle RSS feed generation.")
    limit: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Maximum number of posts to include in the feed.",
    )
    filename: str = Field(default="rss.xml")


class Config(BaseModel):
    wordpress: WordPressConfig = Field(default_factory=WordPressConfig)
    site: SiteConfig = Field(default_factory=SiteConfig)
    feeds: FeedConfig = Field(default_factory=FeedConfig)
    output_dir: Path = Field(default=Path("dist"))
    home_page_size: int = Field(default=10, ge=1, le=100)

    @field_validator("output_dir", mode="before")
    def _ensure_path(cls, value: Any) -> Path:
        return Path(value)


def apply_environment(cfg: Config, environ: Mapping[str, str] | None = None) -> Config:
    """Overlay WordPress connection settings taken from environment variables."""
    env = os.environ if environ is None else environ
    overrides: dict[str, str] = {}
    for key, name in (
        ("api_url", ENV_API_URL),
        ("user", ENV_USER),
        ("app_password", ENV_APP_PASSWORD),
    ):
        value = env.get(name)
        if value is not None and value.strip():
            overrides[key] = value
    if overrides:
        data = cfg.wordpress.model_dump()
        data.update(overrides)
        cfg.wordpress = WordPressConfig(**data)
    return cfg


def load_config(path: str | Path, environ: Mapping[str, str] | None = None) -> Config:
    """Load configuration and resolve relative paths based on the config location.

    ``path`` may point to a YAML file or to a directory holding ``wpfront.yml``.
    A directory without a config file yields defaults. Environment variables
    override the WordPress connection settings in either case.
    """
    candidate = Path(path)
    data: dict[str, Any] = {}
    if candidate.is_dir():
        config_file = candidate / DEFAULT_CONFIG_NAME
        if config_file.exists():
            data = _read_yaml(config_file)
        base_dir = candidate.resolve()
    else:
        if not candidate.exists():
            raise FileNotFoundError(candidate)
        data = _read_yaml(candidate)
        base_dir = candidate.parent.resolve()

    cfg = Config(**data)
    if not cfg.output_dir.is_absolute():
        cfg.output_dir = (base_dir / cfg.output_dir).resolve()
    return apply_environment(cfg, environ)


def _read_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must define a mapping.")
    return data
