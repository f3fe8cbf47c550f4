"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from pydantic import SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from repo_portfolio.domain.exceptions import ConfigurationError
from repo_portfolio.services.call_policy import HostCallPolicy


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_token: SecretStr
    github_user: str | None = None
    github_api_url: str = "https://api.github.com"
    request_timeout: float = 30.0
    max_concurrency: int | None = None
    retry_attempts: int = 1
    retry_backoff: float = 1.0
    share_language_lookups: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    def call_policy(self) -> HostCallPolicy:
        """Build the per-repository call policy from these settings."""
        return HostCallPolicy(
            max_concurrency=self.max_concurrency,
            retry_attempts=self.retry_attempts,
            retry_backoff=self.retry_backoff,
            share_language_lookups=self.share_language_lookups,
        )


def load_settings(**overrides: object) -> Settings:
    """Read settings from the environment, failing on a missing token.

    Each call builds a new :class:`Settings`; nothing is cached at module
    level, so differently configured instances can coexist.
    """
    try:
        settings = Settings(**overrides)  # type: ignore[arg-type]
    except ValidationError as exc:
        missing = [
            ".".join(str(p) for p in err["loc"])
            for err in exc.errors()
            if err.get("type") == "missing"
        ]
        if "github_token" in missing:
            raise ConfigurationError(
                "GitHub Personal Access Token is not set (GITHUB_TOKEN)."
            ) from exc
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc

    if not settings.github_token.get_secret_value().strip():
        raise ConfigurationError("GitHub Personal Access Token is not set (GITHUB_TOKEN).")
    return settings
