"""
HackeyeBot - Centralized Constants
==================================

Shared time units, store tuning and engine defaults.

The raid engine's heuristics (EWMA alpha, window length, score weights,
action tiers) are uncalibrated against real raid data. They are kept here
and in each service's constants.py so they can be tuned in one place.
"""

# =============================================================================
# Time Constants (in seconds)
# =============================================================================

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400

MS_PER_SECOND = 1000

# =============================================================================
# Database Constants
# =============================================================================

DB_CONNECTION_TIMEOUT = 30.0          # sqlite3.connect timeout (seconds)
SQLITE_BUSY_TIMEOUT = 5000            # PRAGMA busy_timeout (milliseconds)

# =============================================================================
# Network Constants
# =============================================================================

HEALTH_CHECK_PORT = 8081

# =============================================================================
# Worker Constants (in seconds)
# =============================================================================

WORKER_IDLE_TIMEOUT = 900             # Longer than the join window
SHUTDOWN_TIMEOUT = 10.0               # Max wait for workers to drain

# =============================================================================
# Guild Settings Defaults
# =============================================================================

DEFAULT_RISK_THRESHOLD = 0.75

# =============================================================================
# Log Truncation
# =============================================================================

LOG_TRUNCATE_SHORT = 50
LOG_TRUNCATE_MEDIUM = 100
LOG_TRUNCATE_LONG = 200
