"""Configuration via environment variables, with optional .env and secret refs.

Two Clever applications are compared:
  - accelerator: CLEVER_ID / CLEVER_SECRET
  - growth:      MAP_CLEVER_ID / MAP_CLEVER_SECRET

Credential and mail password values may be cloud secret references
(see scripts.repartee.secrets).
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from scripts.repartee.errors import ConfigError
from scripts.repartee.secrets import resolve_secret

CREDENTIAL_VARS = ("MAP_CLEVER_ID", "MAP_CLEVER_SECRET", "CLEVER_ID", "CLEVER_SECRET")


@dataclass(frozen=True)
class CleverCredentials:
    client_id: str
    client_secret: str
    app_label: str = "accelerator"

    def __repr__(self) -> str:
        return f"CleverCredentials(client_id={self.client_id!r}, app_label={self.app_label!r})"


@dataclass(frozen=True)
class ApiConfig:
    base_url: str = "https://api.clever.com/v2.1/"
    token_url: str = "https://clever.com/oauth/tokens"
    page_limit: int = 1000
    timeout_s: float = 30.0
    max_attempts: int = 8


@dataclass(frozen=True)
class MailConfig:
    from_email: str
    to_email: str
    password: str
    host: str = "smtp.gmail.com"
    port: int = 587

    def __repr__(self) -> str:
        return (
            f"MailConfig(from_email={self.from_email!r}, to_email={self.to_email!r}, "
            f"host={self.host!r}, port={self.port!r})"
        )


@dataclass(frozen=True)
class BuildInfo:
    """Build metadata injected by the container image at build time."""

    app_name: str = "unknown"
    project: str = "unknown"
    version: str = "v0.0.0"
    git_commit: str = "?"
    date: str = ""

    @property
    def human_version(self) -> str:
        return (
            f"{self.app_name} {self.project} {self.version} "
            f"({self.git_commit}) on {self.date}"
        )


def _resolve(name: str, value: str) -> str:
    """Resolve a possible secret reference held in environment variable `name`.

    Secret store failures (missing secret, bad JSON key, no cloud credentials,
    unknown project) are configuration errors.
    """
    try:
        return resolve_secret(value)
    except Exception as exc:
        raise ConfigError(f"Unable to resolve {name}: {exc!r}") from exc


def load_credentials(growth: bool) -> CleverCredentials:
    """Load the Clever client id/secret pair for one application.

    Raises ConfigError before any network activity when either half is unset.
    """
    load_dotenv()

    prefix = "MAP_" if growth else ""
    client_id = os.environ.get(f"{prefix}CLEVER_ID", "")
    client_secret = os.environ.get(f"{prefix}CLEVER_SECRET", "")
    if not client_id or not client_secret:
        raise ConfigError(
            "all environment variables must be set including "
            + " ".join(f"${{{name}}}" for name in CREDENTIAL_VARS)
        )

    return CleverCredentials(
        client_id=_resolve(f"{prefix}CLEVER_ID", client_id),
        client_secret=_resolve(f"{prefix}CLEVER_SECRET", client_secret),
        app_label="growth" if growth else "accelerator",
    )


def load_api_config() -> ApiConfig:
    load_dotenv()
    try:
        return ApiConfig(
            base_url=os.environ.get("CLEVER_API_BASE_URL", ApiConfig.base_url),
            page_limit=int(os.environ.get("CLEVER_PAGE_LIMIT", str(ApiConfig.page_limit))),
            timeout_s=float(os.environ.get("HTTP_TIMEOUT_S", str(ApiConfig.timeout_s))),
            max_attempts=int(os.environ.get("HTTP_MAX_ATTEMPTS", str(ApiConfig.max_attempts))),
        )
    except ValueError as exc:
        raise ConfigError(f"Invalid numeric API setting: {exc}") from exc


def load_mail_config() -> MailConfig:
    """Load SMTP sender, recipient and app password."""
    load_dotenv()

    from_email = os.environ.get("FROM_EMAIL", "")
    to_email = os.environ.get("TO_EMAIL", "")
    password = os.environ.get("GMAIL_PASSWORD", "")
    missing = [
        name
        for name, val in (
            ("FROM_EMAIL", from_email),
            ("TO_EMAIL", to_email),
            ("GMAIL_PASSWORD", password),
        )
        if not val
    ]
    if missing:
        raise ConfigError(f"Mail environment variables not set: {', '.join(missing)}")

    try:
        port = int(os.environ.get("SMTP_PORT", "587"))
    except ValueError as exc:
        raise ConfigError(f"SMTP_PORT must be an integer: {exc}") from exc

    return MailConfig(
        from_email=from_email,
        to_email=to_email,
        password=_resolve("GMAIL_PASSWORD", password),
        host=os.environ.get("SMTP_HOST", "smtp.gmail.com"),
        port=port,
    )


def load_build_info() -> BuildInfo:
    """Read build metadata once at process start."""
    return BuildInfo(
        app_name=os.environ.get("REPARTEE_APP_NAME", "unknown"),
        project=os.environ.get("REPARTEE_PROJECT", "unknown"),
        version=os.environ.get("REPARTEE_VERSION", "v0.0.0"),
        git_commit=os.environ.get("REPARTEE_GIT_COMMIT", "?"),
        date=os.environ.get("REPARTEE_BUILD_DATE", ""),
    )
