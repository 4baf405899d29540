"""Configuration loading from YAML and environment.

Secrets (tokens) are taken from environment variables or from files
(Docker secrets). Never put real tokens in config files committed to the
repo.
"""

import os
from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_WARNING_MESSAGE = (
    "This PR has been inactive for {{days}} days. "
    "It will be automatically closed in 7 days unless activity is detected."
)
DEFAULT_CLOSING_MESSAGE = "This PR has been closed due to {{days}} days of inactivity."
DEFAULT_REPRIEVE_MESSAGE = "This PR has been granted a temporary stay of execution."


class ConfigError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


def _read_secret(env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    value = _current_env.get(env_key)
    if value:
        return value.strip()
    file_path = _current_env.get(file_env_key)
    if file_path:
        try:
            return Path(file_path).read_text().strip()
        except OSError as e:
            raise ConfigError(f"Cannot read {file_env_key}={file_path}: {e}") from e
    return None


# Injected by load_config so validators can read env/file
_current_env: dict[str, str] = {}


def _split_csv(value: Any) -> Any:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class ReaperConfig(BaseSettings):
    """Thresholds, immunity labels and message templates."""

    model_config = SettingsConfigDict(env_prefix="REAPER_", extra="ignore")

    # Empty list means every repository the token can access
    repositories: Annotated[list[str], NoDecode] = Field(
        default_factory=list, description="Repositories to scan, e.g. org/repo"
    )
    warning_threshold_days: int = Field(default=14, ge=1, description="Inactive days before a warning")
    execution_threshold_days: int = Field(default=7, ge=0, description="Days after a warning before closing")
    immunity_labels: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["do-not-close", "work-in-progress"],
        description="Labels that exempt a PR from warning and closing",
    )
    warning_message: str = Field(default=DEFAULT_WARNING_MESSAGE, description="Warning comment ({{days}})")
    closing_message: str = Field(default=DEFAULT_CLOSING_MESSAGE, description="Closing comment ({{days}})")
    reprieve_message: str = Field(default=DEFAULT_REPRIEVE_MESSAGE, description="Comment when immunity is granted")
    dry_run: bool = Field(default=False, description="Log comments and closures instead of sending them")

    @field_validator("repositories", "immunity_labels", mode="before")
    @classmethod
    def _comma_separated(cls, value: Any) -> Any:
        return _split_csv(value)


class GitHubConfig(BaseSettings):
    """GitHub API settings."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore")

    token: str | None = Field(default=None, description="PAT or app token; use env or secret file")
    api_url: str = Field(default="https://api.github.com", description="API base URL")


class StoreConfig(BaseSettings):
    """Record store settings."""

    model_config = SettingsConfigDict(env_prefix="STORE_", extra="ignore")

    path: str = Field(default=".grim_reaper/records", description="Directory holding record YAML files")


class SchedulerConfig(BaseSettings):
    """Scheduler (polling) settings for the daemon."""

    model_config = SettingsConfigDict(env_prefix="SCHEDULER_", extra="ignore")

    warning_interval_seconds: int = Field(default=86400, ge=30, description="Seconds between warning scans")
    execution_interval_seconds: int = Field(default=86400, ge=30, description="Seconds between execution reviews")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    reaper: ReaperConfig = Field(default_factory=ReaperConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def github_token_resolved(self) -> str | None:
        """Resolve GitHub token from config, env or Docker secret file."""
        t = (self.github.token or "").strip()
        if t and not t.startswith("${"):
            return t
        return _read_secret("GITHUB_TOKEN", "GITHUB_TOKEN_FILE")

    def require_github_token(self) -> str:
        """Return the GitHub token or raise ConfigError when none is set."""
        token = self.github_token_resolved
        if not token:
            raise ConfigError("GitHub token is required (github.token, GITHUB_TOKEN or GITHUB_TOKEN_FILE)")
        return token


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        # Simple $VAR
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file and environment.

    Secrets: GITHUB_TOKEN or GITHUB_TOKEN_FILE. Raises ConfigError when the
    YAML cannot be parsed or a value fails validation.
    """
    global _current_env

    _current_env = dict(os.environ)

    path = config_path or Path("config.yaml")
    try:
        if not path.is_file():
            return AppConfig()

        raw = yaml.safe_load(path.read_text()) or {}
        if not isinstance(raw, dict):
            raise ConfigError(f"{path}: top level must be a mapping")
        raw = _substitute_env(raw)

        return AppConfig(
            reaper=ReaperConfig(**(raw.get("reaper") or {})),
            github=GitHubConfig(**(raw.get("github") or {})),
            store=StoreConfig(**(raw.get("store") or {})),
            scheduler=SchedulerConfig(**(raw.get("scheduler") or {})),
            logging=LoggingConfig(**(raw.get("logging") or {})),
        )
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: invalid YAML: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"{path}: {e}") from e
