# database.py
"""
SQLAlchemy database connection and session management.

This module provides:
- Engine construction from the configured DATABASE_URL
- Session factory bound to that engine
- Session helpers for FastAPI routes and for background code

The engine and session factory are created once by main.create_app and kept
on ``app.state``; nothing here is initialised at import time.

Usage:
     from database import get_session

     # In FastAPI routes:
     @router.get("/items")
     def get_items(db: Session = Depends(get_session)):
          return db.query(Item).all()
"""
import logging
from contextlib import contextmanager
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False) -> Engine:
     """
     Create the SQLAlchemy engine.

     SQLite URLs get ``check_same_thread=False`` (FastAPI runs sync routes in a
     thread pool) and foreign key enforcement; other backends use a pooled
     engine.
     """
     if database_url.startswith("sqlite"):
          engine = create_engine(
               database_url,
               connect_args={"check_same_thread": False},
               echo=echo,
          )

          @event.listens_for(engine, "connect")
          def _on_connect(dbapi_connection, connection_record):
               # Let SQLAlchemy emit BEGIN itself so SAVEPOINTs behave
               dbapi_connection.isolation_level = None
               cursor = dbapi_connection.cursor()
               cursor.execute("PRAGMA foreign_keys=ON")
               cursor.close()

          @event.listens_for(engine, "begin")
          def _on_begin(conn):
               conn.exec_driver_sql("BEGIN")

          return engine

     return create_engine(
          database_url,
          pool_size=5,
          max_overflow=10,
          pool_timeout=30,
          pool_recycle=1800,  # Recycle connections after 30 minutes
          pool_pre_ping=True,
          echo=echo,
     )


def build_session_factory(engine: Engine) -> sessionmaker:
     """Session factory used for every request and webhook delivery."""
     return sessionmaker(
          bind=engine,
          autocommit=False,
          autoflush=False,
          expire_on_commit=False,
     )


def get_session(request: Request) -> Generator[Session, None, None]:
     """
     FastAPI dependency that provides a database session.

     Commits when the route returns, rolls back if it raises.

     Yields:
          Session: SQLAlchemy database session
     """
     session = request.app.state.session_factory()
     try:
          yield session
          session.commit()
     except Exception:
          session.rollback()
          raise
     finally:
          session.close()


@contextmanager
def session_scope(session_factory: sessionmaker) -> Generator[Session, None, None]:
     """
     Context manager for database sessions (for use outside FastAPI routes).

     Usage:
          with session_scope(factory) as db:
               db.add(row)

     Yields:
          Session: SQLAlchemy database session, committed on clean exit
     """
     session = session_factory()
     try:
          yield session
          session.commit()
     except Exception:
          session.rollback()
          raise
     finally:
          session.close()


def init_db(engine: Engine) -> None:
     """
     Initialize database tables.

     Creates all tables defined in the models if they don't exist.
     For production, use Alembic migrations instead.
     """
     from models import Base
     Base.metadata.create_all(bind=engine)


def check_connection(engine: Engine) -> bool:
     """
     Test database connectivity.

     Returns:
          bool: True if connection successful, False otherwise
     """
     try:
          with engine.connect() as conn:
               conn.execute(text("SELECT 1"))
          return True
     except Exception:
          logger.exception("Database connection check failed")
          return False
