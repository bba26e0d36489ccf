# clients/identity_provider.py
"""
Identity provider client.

The provider issues sessions (login, signup, password reset happen there);
this backend only refreshes an expired access token on behalf of the browser.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import requests

logger = logging.getLogger(__name__)


@dataclass
class TokenPair:
     access_token: str
     refresh_token: str
     expires_in: int = 3600


class IdentityProviderClient:

     def __init__(self, base_url: str, anon_key: str, timeout: int = 10):
          self._base_url = base_url.rstrip("/")
          self._anon_key = anon_key
          self._timeout = timeout
          self._http = requests.Session()

     @property
     def configured(self) -> bool:
          return bool(self._base_url)

     def refresh_session(self, refresh_token: str) -> Optional[TokenPair]:
          """
          Exchange a refresh token for a new token pair.

          Returns None when the provider rejects the token or cannot be
          reached; the caller then treats the request as unauthenticated.
          """
          if not self.configured:
               return None

          try:
               response = self._http.post(
                    f"{self._base_url}/auth/v1/token",
                    params={"grant_type": "refresh_token"},
                    json={"refresh_token": refresh_token},
                    headers={"apikey": self._anon_key, "Content-Type": "application/json"},
                    timeout=self._timeout,
               )
          except requests.RequestException as e:
               logger.warning("Session refresh failed: %s", e)
               return None

          if response.status_code != 200:
               logger.info("Identity provider rejected refresh token (%s)", response.status_code)
               return None

          try:
               data = response.json()
          except ValueError:
               logger.warning("Identity provider returned a non-JSON refresh response")
               return None
          if not isinstance(data, dict) or not data.get("access_token") or not data.get("refresh_token"):
               return None
          return TokenPair(
               access_token=data["access_token"],
               refresh_token=data["refresh_token"],
               expires_in=int(data.get("expires_in") or 3600),
          )

     def close(self) -> None:
          self._http.close()
