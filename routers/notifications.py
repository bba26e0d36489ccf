# routers/notifications.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import RequestContext, get_request_context
from models import Notification
from schemas.notification import NotificationListResponse, NotificationResponse
from services import notification_service

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


def _to_response(notification: Notification) -> NotificationResponse:
     return NotificationResponse(
          id=notification.id,
          type=notification.type,
          title=notification.title,
          message=notification.message,
          is_read=notification.is_read,
          metadata=notification.meta,
          created_at=notification.created_at,
     )


@router.get("", response_model=NotificationListResponse)
def list_notifications(
     unread_only: bool = Query(False),
     limit: int = Query(50, ge=1, le=200),
     db: Session = Depends(get_session),
     ctx: RequestContext = Depends(get_request_context),
):
     notifications = notification_service.list_notifications(db, ctx, unread_only=unread_only, limit=limit)
     return NotificationListResponse(
          notifications=[_to_response(n) for n in notifications],
          unread_count=notification_service.unread_count(db, ctx),
     )


@router.post("/read-all")
def mark_all_read(
     db: Session = Depends(get_session),
     ctx: RequestContext = Depends(get_request_context),
):
     updated = notification_service.mark_all_read(db, ctx)
     return {"updated": updated}


@router.post("/{notification_id}/read", response_model=NotificationResponse)
def mark_read(
     notification_id: str,
     db: Session = Depends(get_session),
     ctx: RequestContext = Depends(get_request_context),
):
     return _to_response(notification_service.mark_read(db, ctx, notification_id))


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
     notification_id: str,
     db: Session = Depends(get_session),
     ctx: RequestContext = Depends(get_request_context),
):
     notification_service.delete_notification(db, ctx, notification_id)
