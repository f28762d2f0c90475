from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel

Recurrence = Literal["day", "week"]


class ScheduledNotification(BaseModel):
    id: str
    at: int
    title: str
    message: str
    recurrence: Optional[Recurrence] = None
    payload: Dict[str, Any] = {}
