# middleware/auth_gate.py
"""
Authorization gate.

Runs before every route:
- resolves the caller from the identity provider's session cookies,
  refreshing an expired access token when a refresh token is present;
- maps the principal to a portal user and practice (RequestContext);
- redirects unauthenticated page requests to /login (401 for /api);
- redirects signed-in users away from the login/signup pages.

Refreshed session cookies are copied onto whatever response is returned.
Row-level scoping is done by the services, using the context set here.
"""
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.orm import sessionmaker
from starlette.concurrency import run_in_threadpool

from clients.identity_provider import IdentityProviderClient, TokenPair
from database import session_scope
from dependencies import RequestContext
from models import User

logger = logging.getLogger(__name__)

ACCESS_COOKIE = "sb-access-token"
REFRESH_COOKIE = "sb-refresh-token"
REFRESH_COOKIE_MAX_AGE = 60 * 60 * 24 * 30

LOGIN_PATH = "/login"
HOME_PATH = "/"

# Reachable without a session; signed-in users are sent home (except /auth callbacks)
PUBLIC_PATHS = ("/login", "/signup", "/forgot-password", "/auth", "/invite")

# Never gated: payment processor callbacks, liveness checks, API docs
EXEMPT_PATHS = ("/webhooks", "/health", "/docs", "/redoc", "/openapi.json")


def _matches(path: str, prefixes) -> bool:
     return any(path == p or path.startswith(p + "/") for p in prefixes)


def is_public_path(path: str) -> bool:
     return _matches(path, PUBLIC_PATHS)


def is_exempt_path(path: str) -> bool:
     return _matches(path, EXEMPT_PATHS)


def is_api_path(path: str) -> bool:
     return _matches(path, ("/api",))


@dataclass(frozen=True)
class Principal:
     """Authenticated identity-provider subject."""
     sub: str
     email: Optional[str] = None


@dataclass
class ResolvedSession:
     principal: Optional[Principal] = None
     context: Optional[RequestContext] = None
     refreshed: Optional[TokenPair] = None


class SessionResolver:
     """Turns session cookies into a Principal, refreshing expired tokens."""

     def __init__(
          self,
          jwt_secret: str,
          identity_client: Optional[IdentityProviderClient] = None,
          audience: str = "authenticated",
     ):
          self._jwt_secret = jwt_secret
          self._identity_client = identity_client
          self._audience = audience

     def decode(self, token: str) -> Principal:
          claims = jwt.decode(token, self._jwt_secret, algorithms=["HS256"], audience=self._audience)
          subject = claims.get("sub")
          if not subject:
               raise JWTError("Token has no subject")
          return Principal(sub=subject, email=claims.get("email"))

     def resolve(self, cookies: Mapping[str, str]) -> ResolvedSession:
          if not self._jwt_secret:
               logger.error("IDP_JWT_SECRET is not configured; all sessions rejected")
               return ResolvedSession()

          access_token = cookies.get(ACCESS_COOKIE)
          refresh_token = cookies.get(REFRESH_COOKIE)

          if access_token:
               try:
                    return ResolvedSession(principal=self.decode(access_token))
               except ExpiredSignatureError:
                    logger.debug("Access token expired")
               except JWTError as e:
                    logger.info("Rejected session token: %s", e)
                    return ResolvedSession()

          if refresh_token and self._identity_client is not None:
               tokens = self._identity_client.refresh_session(refresh_token)
               if tokens is not None:
                    try:
                         return ResolvedSession(principal=self.decode(tokens.access_token), refreshed=tokens)
                    except JWTError as e:
                         logger.warning("Identity provider returned an unusable token: %s", e)

          return ResolvedSession()


class AuthorizationGate:
     """HTTP middleware; register with ``app.middleware("http")(gate)``."""

     def __init__(self, resolver: SessionResolver, session_factory: sessionmaker, secure_cookies: bool = False):
          self._resolver = resolver
          self._session_factory = session_factory
          self._secure_cookies = secure_cookies

     def _load_context(self, principal: Principal) -> Optional[RequestContext]:
          with session_scope(self._session_factory) as db:
               user = db.query(User).filter(User.auth_user_id == principal.sub).first()
               if user is None or not user.practice_id:
                    return None
               return RequestContext(
                    auth_user_id=principal.sub,
                    user_id=user.id,
                    practice_id=user.practice_id,
                    role=user.role,
               )

     def _resolve(self, cookies: Mapping[str, str]) -> ResolvedSession:
          resolved = self._resolver.resolve(cookies)
          if resolved.principal is not None:
               resolved.context = self._load_context(resolved.principal)
          return resolved

     def _apply_cookies(self, response, resolved: ResolvedSession) -> None:
          tokens = resolved.refreshed
          if tokens is None:
               return
          response.set_cookie(
               ACCESS_COOKIE,
               tokens.access_token,
               max_age=tokens.expires_in,
               httponly=True,
               secure=self._secure_cookies,
               samesite="lax",
          )
          response.set_cookie(
               REFRESH_COOKIE,
               tokens.refresh_token,
               max_age=REFRESH_COOKIE_MAX_AGE,
               httponly=True,
               secure=self._secure_cookies,
               samesite="lax",
          )

     async def __call__(self, request: Request, call_next):
          path = request.url.path
          if is_exempt_path(path):
               return await call_next(request)

          resolved = await run_in_threadpool(self._resolve, dict(request.cookies))
          request.state.principal = resolved.principal
          request.state.context = resolved.context

          public = is_public_path(path)
          if resolved.principal is None and not public:
               if is_api_path(path):
                    response = JSONResponse(status_code=401, content={"error": "Not authenticated"})
               else:
                    response = RedirectResponse(url=LOGIN_PATH)
          elif resolved.principal is not None and public and not path.startswith("/auth"):
               response = RedirectResponse(url=HOME_PATH)
          elif resolved.context is None and is_api_path(path):
               logger.warning("Principal %s has no linked practice", resolved.principal.sub)
               response = JSONResponse(status_code=403, content={"error": "User profile not found"})
          else:
               response = await call_next(request)

          self._apply_cookies(response, resolved)
          return response
