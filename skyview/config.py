"""Configuration settings for the SkyView backend."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger("skyview.config")


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


@lru_cache(maxsize=1)
def get_opensky_credentials() -> tuple[str, str] | None:
    """Fetch OpenSky account credentials from AWS SSM Parameter Store.

    Authenticated OpenSky users get a larger request budget. The lookup is
    cached in-memory; any SSM failure is logged and anonymous access is used.
    """

    ssm_client = boto3.client(
        "ssm",
        region_name=os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or "us-east-1",
    )
    try:
        username = ssm_client.get_parameter(Name="/skyview/opensky/username")
        password = ssm_client.get_parameter(
            Name="/skyview/opensky/password", WithDecryption=True
        )
    except (ClientError, BotoCoreError) as exc:  # pragma: no cover - AWS error passthrough
        logger.error("Failed to load OpenSky credentials from SSM: %s", exc)
        return None

    user_value = username.get("Parameter", {}).get("Value")
    password_value = password.get("Parameter", {}).get("Value")
    if not user_value or not password_value:
        logger.warning("OpenSky credentials in SSM are empty; using anonymous access")
        return None

    return user_value, password_value


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    skyview_env: str = os.getenv("SKYVIEW_ENV", "local")
    log_level: str = os.getenv("SKYVIEW_LOG_LEVEL", "INFO")

    # OpenSky upstream
    opensky_base_url: str = os.getenv(
        "OPENSKY_BASE_URL", "https://opensky-network.org/api"
    )
    opensky_timeout: float = float(os.getenv("OPENSKY_TIMEOUT", "10.0"))
    opensky_min_interval: float = float(os.getenv("OPENSKY_MIN_INTERVAL", "10.0"))
    opensky_username: str | None = os.getenv("OPENSKY_USERNAME")
    opensky_password: str | None = os.getenv("OPENSKY_PASSWORD")
    use_ssm: bool = _get_bool("SKYVIEW_USE_SSM")

    # Refresh cycle
    refresh_interval: float = float(os.getenv("SKYVIEW_REFRESH_INTERVAL", "10.0"))
    auto_refresh: bool = _get_bool("SKYVIEW_AUTO_REFRESH", default=True)
    default_zoom: int = int(os.getenv("SKYVIEW_DEFAULT_ZOOM", "4"))
    stale_after_seconds: float = float(os.getenv("SKYVIEW_STALE_AFTER", "300"))
    fallback_path: str | None = os.getenv("SKYVIEW_FALLBACK_PATH") or None

    # Rendering
    icon_cache_size: int = int(os.getenv("SKYVIEW_ICON_CACHE_SIZE", "72"))

    def opensky_auth(self) -> tuple[str, str] | None:
        """Return basic-auth credentials for OpenSky, if any are configured."""

        if self.opensky_username and self.opensky_password:
            return self.opensky_username, self.opensky_password
        if self.use_ssm:
            return get_opensky_credentials()
        return None


settings = Settings()

__all__ = ["settings", "Settings", "get_opensky_credentials"]
