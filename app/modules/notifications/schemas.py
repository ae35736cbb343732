from pydantic import Field
from typing import Any, Optional
from datetime import datetime
from app.core.schemas import CamelModel, UUID_PATTERN
from app.modules.notifications.models import Channel


class NotificationCreate(CamelModel):
    user_id: str = Field(pattern=UUID_PATTERN)
    channel: Channel
    template_key: str = Field(min_length=1, max_length=100)
    payload_json: Optional[Any] = None
    status: str = Field(min_length=1, max_length=50)


class NotificationResponse(CamelModel):
    id: str
    user_id: str
    channel: Channel
    template_key: str
    payload_json: Optional[Any] = None
    sent_at: Optional[datetime] = None
    status: str
