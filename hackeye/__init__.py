"""
HackeyeBot
==========

Discord raid anomaly engine: per-guild activity baselines, join raid risk
scoring and advisory escalation.
"""

__version__ = "0.1.0"
