# models/audit_log.py
"""
AuditLog model - append-only compliance trail.

System actions (webhook processing) carry no user_id; payment events that
cannot be tied to an invoice carry no practice_id either.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, JSON
from .base import Base, new_id, utcnow


class AuditLog(Base):
     __tablename__ = "audit_logs"

     id = Column(String(64), primary_key=True, default=new_id)
     practice_id = Column(String(64), ForeignKey("practices.id", ondelete="SET NULL"), nullable=True, index=True)
     user_id = Column(String(64), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
     action = Column(String(100), nullable=False, index=True)
     resource_type = Column(String(50), nullable=False)
     resource_id = Column(String(255), nullable=True)
     meta = Column("metadata", JSON, nullable=True)
     ip_address = Column(String(64), nullable=True)
     user_agent = Column(String(500), nullable=True)
     created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

     def __repr__(self):
          return f"<AuditLog(id={self.id}, action='{self.action}', resource={self.resource_type}:{self.resource_id})>"
