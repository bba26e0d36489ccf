# models/practice.py
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from .base import Base, new_id, utcnow


class Practice(Base):
     """
     Practice model - the tenant. Every invoice, notification and user
     belongs to exactly one practice.
     """
     __tablename__ = "practices"

     id = Column(String(64), primary_key=True, default=new_id)
     name = Column(String(255), nullable=False)
     email = Column(String(255), nullable=True)
     phone = Column(String(50), nullable=True)

     # Payment processor customer, created on first payment
     stripe_customer_id = Column(String(255), nullable=True, unique=True)

     status = Column(String(50), default="active", nullable=False)  # active, suspended

     # Timestamps
     created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
     updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

     # Relationships
     users = relationship("User", back_populates="practice")
     invoices = relationship("Invoice", back_populates="practice")
     notifications = relationship("Notification", back_populates="practice", cascade="all, delete-orphan")

     def __repr__(self):
          return f"<Practice(id={self.id}, name='{self.name}')>"
