"""Pacing of requests towards the remote service."""

from dealr_bot.resilience.throttle import MissionThrottle

__all__ = ["MissionThrottle"]
