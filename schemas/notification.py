# schemas/notification.py
from datetime import datetime
from typing import Optional, List, Dict, Any
from pydantic import BaseModel


class NotificationResponse(BaseModel):
     id: str
     type: str
     title: str
     message: str
     is_read: bool
     metadata: Optional[Dict[str, Any]] = None
     created_at: datetime


class NotificationListResponse(BaseModel):
     notifications: List[NotificationResponse]
     unread_count: int
