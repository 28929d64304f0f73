"""Public models for the mission automation client."""

from dealr_bot.models.responses import CodeEnvelope, DataEnvelope
from dealr_bot.models.schemas import (
    Mission,
    MissionPartition,
    MissionStatus,
    PointBalance,
    Profile,
    SessionResult,
)

__all__ = [
    "CodeEnvelope",
    "DataEnvelope",
    "Mission",
    "MissionPartition",
    "MissionStatus",
    "PointBalance",
    "Profile",
    "SessionResult",
]
