"""
HackeyeBot - Configuration Module
=================================

Centralized configuration management with environment variable validation.

DESIGN:
    Single source of truth for process configuration, loaded from
    environment variables at startup. Engine tuning constants are NOT
    here; they live in hackeye.core.constants so they can be reviewed
    alongside the code that uses them.

    Key patterns:
    - Singleton via get_config() ensures one Config instance
    - Validation happens once at load time, not on every access
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo


# =============================================================================
# Timezone Configuration
# =============================================================================

NY_TZ = ZoneInfo("America/New_York")
"""Eastern timezone for human-facing timestamps (logs, incident text)."""


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass
class Config:
    """
    Bot configuration loaded from environment variables.

    Attributes:
        discord_token: Discord bot authentication token.
        environment: Deployment name ("development", "production", ...).
        database_path: SQLite file holding baselines, settings and incidents.
        developer_id: Optional user ID of the bot developer.
        error_webhook_url: Optional webhook receiving error trees.
        health_check_port: Port for the /health endpoint.
        worker_idle_timeout: Seconds a guild worker may sit idle before
            it is reaped together with its transient state.
    """

    # -------------------------------------------------------------------------
    # Required: Discord
    # -------------------------------------------------------------------------

    discord_token: str

    # -------------------------------------------------------------------------
    # Optional: Runtime
    # -------------------------------------------------------------------------

    environment: str = "development"
    database_path: Path = Path("data") / "hackeye.db"
    developer_id: Optional[int] = None

    # -------------------------------------------------------------------------
    # Optional: Webhooks
    # -------------------------------------------------------------------------

    error_webhook_url: Optional[str] = None

    # -------------------------------------------------------------------------
    # Optional: Health / Workers
    # -------------------------------------------------------------------------

    health_check_port: int = 8081
    worker_idle_timeout: int = 900

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


# =============================================================================
# Validation
# =============================================================================

class ConfigValidationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


def _warn(message: str) -> None:
    """Config loads before anything else; import the logger lazily."""
    from hackeye.core.logger import logger
    logger.warning(message)


def _parse_int_optional(value: Optional[str]) -> Optional[int]:
    """Parse optional string to integer, returning None on failure."""
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _parse_int_with_default(
    value: Optional[str],
    default: int,
    name: str,
    min_val: Optional[int] = None,
    max_val: Optional[int] = None,
) -> int:
    """
    Parse optional integer with default and range validation.

    Out-of-range values are clamped, unparsable values fall back to the
    default. Both cases are logged as warnings.
    """
    if not value:
        return default
    try:
        parsed = int(value)
    except ValueError:
        _warn(f"Config {name}='{value}' invalid, using default {default}")
        return default

    if min_val is not None and parsed < min_val:
        _warn(f"Config {name}={parsed} below min {min_val}, using {min_val}")
        return min_val
    if max_val is not None and parsed > max_val:
        _warn(f"Config {name}={parsed} above max {max_val}, using {max_val}")
        return max_val
    return parsed


def _validate_url(value: Optional[str], name: str) -> Optional[str]:
    """Validate webhook URL format, returning None if invalid or empty."""
    if not value:
        return None
    if not value.startswith(("https://", "http://")):
        _warn(f"Config {name} invalid URL format, ignoring")
        return None
    return value


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config() -> Config:
    """
    Load and validate configuration from environment variables.

    Returns:
        Validated Config object.

    Raises:
        ConfigValidationError: If any required variable is missing.
    """
    missing = []

    discord_token = (os.getenv("DISCORD_TOKEN") or "").strip()
    if not discord_token:
        missing.append("DISCORD_TOKEN")

    if missing:
        raise ConfigValidationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    database_path = os.getenv("DATABASE_PATH")

    return Config(
        discord_token=discord_token,
        environment=os.getenv("ENVIRONMENT", "development"),
        database_path=Path(database_path) if database_path else Path("data") / "hackeye.db",
        developer_id=_parse_int_optional(os.getenv("DEVELOPER_ID")),
        error_webhook_url=_validate_url(os.getenv("ERROR_WEBHOOK_URL"), "ERROR_WEBHOOK_URL"),
        health_check_port=_parse_int_with_default(
            os.getenv("HEALTH_CHECK_PORT"), 8081, "HEALTH_CHECK_PORT", min_val=1, max_val=65535
        ),
        worker_idle_timeout=_parse_int_with_default(
            os.getenv("WORKER_IDLE_TIMEOUT"), 900, "WORKER_IDLE_TIMEOUT", min_val=60, max_val=86400
        ),
    )


# =============================================================================
# Global Config Instance
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance, loading if needed.

    Raises:
        ConfigValidationError: On first call if config is invalid.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def validate_and_log_config() -> Config:
    """
    Validate configuration and log a summary at startup.

    Raises:
        ConfigValidationError: If required configuration is missing.
    """
    from hackeye.core.logger import logger

    config = get_config()

    optional_features = []
    if config.error_webhook_url:
        optional_features.append("Error Webhook")
    if config.developer_id:
        optional_features.append("Developer Mentions")

    logger.tree("Configuration Validated", [
        ("Environment", config.environment),
        ("Database", str(config.database_path)),
        ("Health Port", str(config.health_check_port)),
        ("Worker Idle Timeout", f"{config.worker_idle_timeout}s"),
        ("Optional Features", ", ".join(optional_features) if optional_features else "None"),
    ], emoji="⚙️")

    return config


__all__ = [
    "Config",
    "ConfigValidationError",
    "NY_TZ",
    "get_config",
    "load_config",
    "validate_and_log_config",
]
