"""
Notification events raised by new submissions
"""
from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from enum import Enum

class ConnectionStatus(str, Enum):
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    ERROR = "error"

class NotificationEvent(BaseModel):
    # Absent for live-only events the backend has not persisted yet
    id: Optional[int] = None
    message: str
    created_at: Optional[datetime] = None
    submission_id: Optional[int] = None
    is_read: bool = False

    class Config:
        extra = "allow"
