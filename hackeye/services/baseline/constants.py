"""
Baseline Engine Constants
=========================

Smoothing and sampling parameters for per-guild activity baselines.
"""

# =============================================================================
# EWMA
# =============================================================================

EWMA_ALPHA = 0.3  # shared by every metric type

# =============================================================================
# Sampling
# =============================================================================

MIN_SAMPLE_INTERVAL = 1.0  # seconds; faster re-triggers reuse the last rate
SEED_SAMPLE_RATE = 1.0  # events/minute assumed for the first observation
RATE_UNIT_SECONDS = 60.0  # rates are expressed per minute


__all__ = [
    "EWMA_ALPHA",
    "MIN_SAMPLE_INTERVAL",
    "SEED_SAMPLE_RATE",
    "RATE_UNIT_SECONDS",
]
