# models/user.py
import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .base import Base, new_id, utcnow


class UserRole(str, enum.Enum):
     """Role of a portal user inside their practice."""
     ADMIN = "admin"
     STAFF = "staff"


class User(Base):
     """
     User model - links an identity-provider subject to a practice.
     Credentials live with the identity provider, never in this table.
     """
     __tablename__ = "users"

     id = Column(String(64), primary_key=True, default=new_id)
     auth_user_id = Column(String(64), unique=True, nullable=False, index=True)
     practice_id = Column(
          String(64),
          ForeignKey("practices.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     email = Column(String(255), nullable=False)
     first_name = Column(String(100), nullable=True)
     last_name = Column(String(100), nullable=True)
     role = Column(
          Enum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
          default=UserRole.STAFF,
          nullable=False
     )
     last_login_at = Column(DateTime(timezone=True), nullable=True)
     created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

     # Relationships
     practice = relationship("Practice", back_populates="users")

     def __repr__(self):
          return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"
