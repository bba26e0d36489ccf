# utils/logging_config.py
"""
Logging setup for the API process.

Every module logs through ``logging.getLogger(__name__)``; this only wires
the root handler and level once per process.
"""
import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: str = "INFO") -> None:
     """Attach a stderr handler to the root logger and set its level."""
     global _configured
     root = logging.getLogger()
     root.setLevel(level.upper())
     if _configured:
          return

     handler = logging.StreamHandler(sys.stderr)
     handler.setFormatter(logging.Formatter(LOG_FORMAT))
     root.addHandler(handler)

     # Uvicorn installs its own handlers; keep access logs but avoid duplicates
     logging.getLogger("uvicorn.access").propagate = False
     _configured = True
