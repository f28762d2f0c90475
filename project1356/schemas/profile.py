from typing import List, Literal, Optional

from pydantic import BaseModel, field_validator

from .commitment import UserCommitment

Frequency = Literal["daily", "weekly", "custom"]


class UserProfile(BaseModel):
    name: str
    age: Optional[int] = None
    country: Optional[str] = None


class NotificationSettings(BaseModel):
    frequency: Frequency = "daily"
    customDays: Optional[List[int]] = None
    enabled: bool = True

    @field_validator("customDays")
    @classmethod
    def _distinct_positive(cls, value: Optional[List[int]]) -> Optional[List[int]]:
        if value is None:
            return None
        days: List[int] = []
        for day in value:
            if day <= 0:
                raise ValueError("customDays must be positive")
            if day not in days:
                days.append(day)
        return days or None


class OnboardingState(BaseModel):
    hasSeenContext: bool = False
    hasGrantedNotifications: bool = False
    hasGrantedPhotoAccess: bool = False


class AppState(BaseModel):
    isOnboarded: bool
    commitment: Optional[UserCommitment] = None
