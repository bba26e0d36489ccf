# config.py
"""
Application settings loaded from the environment.

Values come from process environment variables, optionally seeded from a
local .env file. Settings are built once at start-up (see main.create_app)
and handed to the components that need them.
"""
import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load .env
load_dotenv()


def _env(name: str, default: str = "") -> str:
     return os.getenv(name, default).strip()


def _env_list(name: str) -> List[str]:
     return [item.strip() for item in os.getenv(name, "").split(",") if item.strip()]


class Settings(BaseModel):
     """Runtime configuration for the lab portal backend."""

     environment: str = "development"
     app_url: str = "http://localhost:3000"
     log_level: str = "INFO"

     # Database
     database_url: str = "sqlite:///./labportal.db"
     sql_echo: bool = False

     # Payment processor (Stripe)
     stripe_secret_key: str = ""
     stripe_webhook_secret: str = ""
     stripe_currency: str = "usd"

     # Identity provider (session cookies + JWT access tokens)
     idp_url: str = ""
     idp_anon_key: str = ""
     idp_jwt_secret: str = ""
     idp_jwt_audience: str = "authenticated"

     cors_origins: List[str] = Field(default_factory=list)

     @property
     def is_production(self) -> bool:
          return self.environment == "production"

     @classmethod
     def from_env(cls) -> "Settings":
          """Build settings from environment variables."""
          return cls(
               environment=_env("ENVIRONMENT", "development"),
               app_url=_env("APP_URL", "http://localhost:3000"),
               log_level=_env("LOG_LEVEL", "INFO"),
               database_url=_env("DATABASE_URL", "sqlite:///./labportal.db"),
               sql_echo=_env("SQL_ECHO", "false").lower() == "true",
               stripe_secret_key=_env("STRIPE_SECRET_KEY"),
               stripe_webhook_secret=_env("STRIPE_WEBHOOK_SECRET"),
               stripe_currency=_env("STRIPE_CURRENCY", "usd"),
               idp_url=_env("IDP_URL"),
               idp_anon_key=_env("IDP_ANON_KEY"),
               idp_jwt_secret=_env("IDP_JWT_SECRET"),
               cors_origins=_env_list("CORS_ORIGINS"),
          )

     def validate_required(self) -> List[str]:
          """
          Return the names of required settings that are missing.

          The identity provider secret is always required; payment secrets
          are only mandatory in production.
          """
          missing = []
          if not self.idp_jwt_secret:
               missing.append("IDP_JWT_SECRET")
          if self.is_production:
               for name, value in (
                    ("STRIPE_SECRET_KEY", self.stripe_secret_key),
                    ("STRIPE_WEBHOOK_SECRET", self.stripe_webhook_secret),
                    ("IDP_URL", self.idp_url),
               ):
                    if not value:
                         missing.append(name)
          return missing
