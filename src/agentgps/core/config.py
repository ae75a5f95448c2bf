"""Environment-based configuration."""

import logging
import os

logger = logging.getLogger(__name__)


def _float_env(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}")


def _int_env(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


class Settings:
    """Configuration loaded from environment variables."""

    def __init__(self):
        # Tax charged on GCI. 13% is Ontario HST.
        self.hst_rate = _float_env("AGENTGPS_HST_RATE", "0.13")
        self.unknown_agent_name = os.getenv("AGENTGPS_UNKNOWN_AGENT_NAME", "Unknown Agent")

        self.host = os.getenv("AGENTGPS_API_HOST", "0.0.0.0")
        self.port = _int_env("AGENTGPS_API_PORT", "8000")
        self.debug = os.getenv("AGENTGPS_ENV", "production") != "production"


_settings = None


def _get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
        logger.debug(f"Loaded settings (hst_rate={_settings.hst_rate})")
    return _settings


def reset_settings():
    """Drop cached settings so the next access re-reads the environment."""
    global _settings
    _settings = None


class _SettingsProxy:
    """Lazy proxy so settings aren't loaded until first access."""

    def __getattr__(self, name):
        return getattr(_get_settings(), name)


settings = _SettingsProxy()
