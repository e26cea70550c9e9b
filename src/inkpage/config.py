"""Configuration management using pydantic-settings."""

from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from inkpage.errors import ConfigurationError


DEFAULT_CONFIG_FILE = "_config.yml"


class Settings(BaseSettings):
    """Site settings loaded from environment variables and the site config file."""

    model_config = SettingsConfigDict(
        env_prefix="INKPAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Site metadata
    site_title: str = Field(default="My Blog", description="Site title shown in the header")
    site_description: str = Field(default="", description="Site tagline and feed subtitle")
    site_url: str = Field(default="", description="Absolute base URL, e.g. https://example.com")
    author: str = Field(default="", description="Default post author")

    # Paths
    source_dir: Path = Field(default=Path("."), description="Directory holding the content")
    destination_dir: Path = Field(default=Path("_site"), description="Build output directory")
    posts_dir_name: str = Field(default="_posts", description="Name of post directories")
    templates_dir: Path | None = Field(
        default=None, description="Directory with templates overriding the default theme"
    )
    static_dir: Path | None = Field(
        default=None, description="Directory copied verbatim into the output"
    )

    # Listing and pagination
    paginate: int = Field(default=10, gt=0, description="Posts per index page")
    paginate_path: str = Field(
        default="/page:num/", description="URL pattern for index pages after the first"
    )
    pagination_window: int = Field(
        default=1, ge=0, description="Page links shown on each side of the current page"
    )
    permalink: str = Field(
        default="/:categories/:year/:month/:day/:title.html",
        description="URL pattern for post pages",
    )
    excerpt_words: int = Field(default=50, gt=0, description="Word limit for listing excerpts")
    excerpt_separator: str = Field(
        default="<!--more-->", description="Marker ending the excerpt inside a post"
    )
    date_format: str = Field(default="%Y-%m-%d", description="strftime format for post dates")
    timezone: str = Field(default="UTC", description="IANA zone that post dates are written in")
    feed_limit: int = Field(default=10, gt=0, description="Number of posts in feed.xml")
    show_drafts: bool = Field(default=False, description="Include unpublished posts")

    log_file: Path | None = Field(default=None, description="Optional build log file")

    @field_validator("paginate_path")
    @classmethod
    def _paginate_path_has_placeholder(cls, value: str) -> str:
        if ":num" not in value:
            raise ValueError("paginate_path must contain ':num'")
        return value

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone {value!r}") from exc
        return value

    @field_validator("site_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def content_root(self) -> Path:
        """Resolved source directory."""
        return self.source_dir.resolve()

    @property
    def output_root(self) -> Path:
        """Resolved destination directory, relative to the source directory."""
        if self.destination_dir.is_absolute():
            return self.destination_dir.resolve()
        return (self.source_dir / self.destination_dir).resolve()

    def site_path(self, path: Path) -> Path:
        """Resolve a configured path relative to the source directory."""
        return path if path.is_absolute() else self.content_root / path

    @property
    def posts_dir(self) -> Path:
        """Top-level post directory, used when scaffolding new posts."""
        return self.content_root / self.posts_dir_name


def read_site_config(config_file: Path) -> dict[str, Any]:
    """Read a YAML site config file into a settings dict."""
    try:
        raw = config_file.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file {config_file}: {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_file} must contain a mapping of settings")
    return data


def load_settings(config_file: Path | None = None, **overrides: Any) -> Settings:
    """
    Build settings for a site.

    Precedence is: keyword overrides, then the YAML config file, then
    INKPAGE_* environment variables, then defaults. Overrides set to None
    are ignored so CLI options can be passed straight through.
    """
    values: dict[str, Any] = {}

    if config_file is None:
        source = overrides.get("source_dir") or Path(".")
        candidate = Path(source) / DEFAULT_CONFIG_FILE
        if candidate.is_file():
            config_file = candidate

    if config_file is not None:
        values.update(read_site_config(config_file))

    values.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return Settings(**values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid settings: {exc}") from exc

