from datetime import datetime

from pydantic import BaseModel, ConfigDict

from gasmeter.db.models import ActivityEventStatus


class ActivityEventResponse(BaseModel):
    """Widok wpisu dziennika aktywności."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    identity_id: str | None
    event_type: str
    status: ActivityEventStatus
    detail: str | None
