# services/notification_service.py
"""
Notification feed operations for the current practice.
"""
from typing import List

from sqlalchemy.orm import Session

from dependencies import RequestContext
from models import Notification
from services.audit_service import ACTION_NOTIFICATION_DELETED, AuditRecorder
from services.errors import NotificationNotFound


def _scoped(db: Session, ctx: RequestContext):
     return db.query(Notification).filter(Notification.practice_id == ctx.practice_id)


def list_notifications(db: Session, ctx: RequestContext, unread_only: bool = False, limit: int = 50) -> List[Notification]:
     query = _scoped(db, ctx)
     if unread_only:
          query = query.filter(Notification.is_read.is_(False))
     return query.order_by(Notification.created_at.desc()).limit(limit).all()


def unread_count(db: Session, ctx: RequestContext) -> int:
     return _scoped(db, ctx).filter(Notification.is_read.is_(False)).count()


def get_notification(db: Session, ctx: RequestContext, notification_id: str) -> Notification:
     notification = _scoped(db, ctx).filter(Notification.id == notification_id).first()
     if notification is None:
          raise NotificationNotFound()
     return notification


def mark_read(db: Session, ctx: RequestContext, notification_id: str) -> Notification:
     notification = get_notification(db, ctx, notification_id)
     notification.is_read = True
     db.flush()
     return notification


def mark_all_read(db: Session, ctx: RequestContext) -> int:
     """Mark every unread notification of the practice as read; returns how many changed."""
     return (
          _scoped(db, ctx)
          .filter(Notification.is_read.is_(False))
          .update({Notification.is_read: True}, synchronize_session=False)
     )


def delete_notification(db: Session, ctx: RequestContext, notification_id: str, audit: AuditRecorder = None) -> None:
     notification = get_notification(db, ctx, notification_id)
     db.delete(notification)
     db.flush()
     (audit or AuditRecorder()).try_record(
          db,
          ACTION_NOTIFICATION_DELETED,
          "notification",
          resource_id=notification_id,
          practice_id=ctx.practice_id,
          user_id=ctx.user_id,
          metadata={"type": notification.type},
     )
