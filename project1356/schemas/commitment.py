from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class CommitmentMode(str, Enum):
    TEAM_MODE = "TEAM_MODE"
    STRUCTURED_SOLO = "STRUCTURED_SOLO"
    FLEXIBLE_SOLO = "FLEXIBLE_SOLO"


DeadlineType = Literal["GLOBAL_SHARED", "USER_DEFINED"]
PhilosophyAlignment = Literal["CANONICAL", "DISCIPLINED_VARIANT", "ADAPTIVE_VARIANT"]


class Countdown(BaseModel):
    startDate: int
    durationDays: int = Field(gt=0)
    endDate: int


class Goal(BaseModel):
    id: str
    title: str
    detail: str = ""
    locked: bool = True
    icon: Optional[str] = None
    imageUrl: Optional[str] = None
    customDays: Optional[int] = Field(default=None, gt=0)


class UserCommitment(BaseModel):
    mode: CommitmentMode
    goalCount: int
    durationDays: int
    goals: List[Goal]
    countdown: Countdown
    createdAt: int


class CategorizationResult(BaseModel):
    mode: CommitmentMode
    deadlineType: DeadlineType
    philosophyAlignment: PhilosophyAlignment
    description: str


class CountdownStatus(BaseModel):
    remainingDays: int
    isComplete: bool
    progress: int
    valid: bool
    nextMilestone: Optional[int] = None
