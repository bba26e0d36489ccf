# models/notification.py
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from .base import Base, new_id, utcnow


class Notification(Base):
     """
     In-app notification shown in a practice's notification feed.
     Users may mark it read or delete it; nothing else mutates it.
     """
     __tablename__ = "notifications"

     id = Column(String(64), primary_key=True, default=new_id)
     practice_id = Column(
          String(64),
          ForeignKey("practices.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     type = Column(String(50), nullable=False)  # payment_received, payment_failed, ...
     title = Column(String(255), nullable=False)
     message = Column(Text, nullable=False)
     is_read = Column(Boolean, default=False, nullable=False)
     meta = Column("metadata", JSON, nullable=True)
     created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

     # Relationships
     practice = relationship("Practice", back_populates="notifications")

     def __repr__(self):
          return f"<Notification(id={self.id}, type='{self.type}', is_read={self.is_read})>"
