"""
HackeyeBot - Services
=====================

Baselines, raid prediction, decisions, guild logs and the pipeline that
ties them together.
"""
