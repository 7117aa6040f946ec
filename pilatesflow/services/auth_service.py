"""
External auth provider client.

Identity is owned by the hosted auth provider; this API only turns an access
token issued there into the user's email, then keeps email/role/plan in its
own session cookie.
"""

import os
import logging
from typing import Optional, Dict, Any

import requests

logger = logging.getLogger(__name__)


def _timeout_seconds() -> float:
    try:
        return float(os.getenv("AUTH_PROVIDER_TIMEOUT", "10"))
    except Exception:
        return 10.0


class AuthProviderClient:
    def __init__(self, base_url: Optional[str] = None, anon_key: Optional[str] = None):
        self.base_url = (base_url if base_url is not None else os.getenv("AUTH_PROVIDER_URL", "")).rstrip("/")
        self.anon_key = anon_key if anon_key is not None else os.getenv("AUTH_PROVIDER_ANON_KEY", "")

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    def fetch_user(self, access_token: str) -> Optional[Dict[str, Any]]:
        if not self.configured or not access_token:
            return None
        url = f"{self.base_url}/auth/v1/user"
        headers = {"Authorization": f"Bearer {access_token}"}
        if self.anon_key:
            headers["apikey"] = self.anon_key
        try:
            resp = requests.get(url, headers=headers, timeout=_timeout_seconds())
        except requests.RequestException as e:
            logger.error(f"Error contacting auth provider: {e}")
            return None
        if resp.status_code >= 400:
            logger.warning(f"Auth provider rejected token: HTTP {resp.status_code}")
            return None
        try:
            data = resp.json() if resp.content else {}
        except ValueError as e:
            logger.error(f"Invalid auth provider response: {e}")
            return None
        return data if isinstance(data, dict) else None

    def resolve_email(self, access_token: str) -> Optional[str]:
        """Email of the user owning ``access_token``; ``None`` when it cannot be resolved."""
        user = self.fetch_user(access_token)
        if not user:
            return None
        email = str(user.get("email") or "").strip().lower()
        return email or None
