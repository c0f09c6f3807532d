"""Calendar API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class CalendarEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    task_id: str
    title: str
    start: datetime
    end: datetime
    color: str
    status: str
    priority: str
    dept: str
    user_id: str
    user_name: str
    kind: str
