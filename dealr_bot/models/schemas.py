"""Pydantic models for Dealr API payloads and per-account results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

UNKNOWN_MISSION_NAME = "Unknown Mission"


class MissionStatus(str, Enum):
    """Mission states reported by the API."""

    COMPLETED = "completed"
    NOT_COMPLETED = "not_completed"
    IN_PROGRESS = "in_progress"


INCOMPLETE_STATUSES = frozenset({MissionStatus.NOT_COMPLETED.value, MissionStatus.IN_PROGRESS.value})


class Profile(BaseModel):
    """Identity of the account behind a token."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    name: str | None = None


class Mission(BaseModel):
    """A mission as listed by ``GET /missions``.

    ``id`` keeps the JSON type the API returned so the finish request can
    echo it back unchanged.
    """

    id: int | str
    name: str = UNKNOWN_MISSION_NAME
    status: str

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value: object) -> object:
        return value or UNKNOWN_MISSION_NAME

    @property
    def is_completed(self) -> bool:
        return self.status == MissionStatus.COMPLETED.value

    @property
    def is_incomplete(self) -> bool:
        return self.status in INCOMPLETE_STATUSES


class PointBalance(BaseModel):
    point: float | int


@dataclass
class MissionPartition:
    """Missions split by status, each list in fetched order."""

    completed: list[Mission]
    incomplete: list[Mission]
    unrecognized: list[Mission]


@dataclass
class SessionResult:
    """Outcome of processing one account during one cycle."""

    account_index: int
    user_id: str
    user_name: str | None
    ip: str
    already_completed: int = 0
    completed_now: int = 0
    failed: int = 0
    point_balance: float | int | None = None

    @property
    def remaining(self) -> int:
        """Incomplete missions still open after this cycle."""
        return self.failed
