from typing import Optional

from pydantic import BaseModel

from .commitment import UserCommitment
from .profile import NotificationSettings, UserProfile

EXPORT_VERSION = "1.0.0"


class ExportBundle(BaseModel):
    commitment: Optional[UserCommitment] = None
    profile: Optional[UserProfile] = None
    settings: Optional[NotificationSettings] = None
    version: str = EXPORT_VERSION
    exportedAt: int
