# models/base.py
import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
     """Timezone-aware current time used for every timestamp column."""
     return datetime.now(timezone.utc)


def new_id() -> str:
     return str(uuid.uuid4())


class Base(DeclarativeBase):
     """
     Base class for all SQLAlchemy models.
     Each model names its table explicitly with ``__tablename__``.
     """
