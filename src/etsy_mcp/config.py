"""Credential loading for the Etsy MCP server."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from .constants import (
    ENV_API_KEY,
    ENV_REFRESH_TOKEN,
    ENV_SETTINGS_PATH,
    ENV_SHARED_SECRET,
    SETTINGS_FILENAME,
    SETTINGS_SECTION,
)
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EtsyConfig:
    """Long-lived Etsy credentials, immutable for the process lifetime."""

    api_key: str
    shared_secret: str
    refresh_token: str


def default_settings_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Return the settings file location, honouring ETSY_MCP_SETTINGS_PATH."""
    env = os.environ if environ is None else environ
    override = env.get(ENV_SETTINGS_PATH)
    if override:
        return Path(override)
    return Path.cwd() / SETTINGS_FILENAME


def _read_settings_file(settings_path: Path) -> dict[str, Any]:
    if not settings_path.is_file():
        return {}

    try:
        raw = json.loads(settings_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unreadable settings file {settings_path}: {e}")
        return {}

    section = raw.get(SETTINGS_SECTION) if isinstance(raw, dict) else None
    if not isinstance(section, dict):
        return {}
    return section


def load_etsy_config(
    environ: Optional[Mapping[str, str]] = None,
    settings_path: Optional[Path] = None,
) -> EtsyConfig:
    """Resolve the Etsy credentials.

    Environment variables win; the JSON settings file only fills in values that
    are still missing.

    Args:
        environ: Mapping to read variables from (defaults to os.environ)
        settings_path: Settings file to fall back on

    Returns:
        The resolved EtsyConfig

    Raises:
        ConfigurationError: When any credential is missing from both sources
    """
    env = os.environ if environ is None else environ

    api_key = env.get(ENV_API_KEY) or None
    shared_secret = env.get(ENV_SHARED_SECRET) or None
    refresh_token = env.get(ENV_REFRESH_TOKEN) or None

    if not (api_key and shared_secret and refresh_token):
        path = settings_path if settings_path is not None else default_settings_path(env)
        settings = _read_settings_file(path)
        api_key = api_key or settings.get("keystring")
        shared_secret = shared_secret or settings.get("sharedSecret")
        refresh_token = refresh_token or settings.get("refreshToken")

    if not (api_key and shared_secret and refresh_token):
        raise ConfigurationError(
            f"{ENV_API_KEY}, {ENV_SHARED_SECRET}, and {ENV_REFRESH_TOKEN} environment variables are required"
        )

    return EtsyConfig(
        api_key=str(api_key),
        shared_secret=str(shared_secret),
        refresh_token=str(refresh_token),
    )
