"""Caller identity resolution.

Session authentication happens upstream: the auth proxy forwards the
logged-in user in a header. Admin access is granted either to users listed
in ``ADMIN_USERS`` or to requests carrying the admin API key. Anonymous
callers get a fingerprint identity derived from their address and agent.
"""

import hashlib
import secrets
from dataclasses import dataclass

from fastapi import Request

from app.core.config import settings

FINGERPRINT_PREFIX = "u-"


def get_content_hash(content: str) -> str:
    """Short, reproducible content hash: first 8 hex chars of the MD5 digest."""
    return hashlib.md5(content.encode("utf-8")).hexdigest()[:8]


def fingerprint_identity(client_address: str, client_agent: str) -> str:
    """Derive the pseudo-user-id of an anonymous caller."""
    return FINGERPRINT_PREFIX + get_content_hash(f"{client_address}|{client_agent}")


@dataclass(frozen=True)
class IdentityContext:
    """Who is calling. ``caller_identity`` is empty for anonymous callers."""

    caller_identity: str = ""
    is_admin: bool = False
    client_address: str = ""
    client_agent: str = ""

    @property
    def is_anonymous(self) -> bool:
        return not self.caller_identity

    @property
    def fingerprint(self) -> str:
        return fingerprint_identity(self.client_address, self.client_agent)

    @property
    def effective_user(self) -> str:
        """Session user, or the fingerprint identity when anonymous."""
        return self.caller_identity or self.fingerprint


def get_client_ip(request: Request) -> str:
    """Extract the client IP, respecting X-Forwarded-For behind a reverse proxy."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()
    client = request.client
    return client.host if client else "unknown"


def _has_admin_key(request: Request) -> bool:
    if not settings.ADMIN_API_KEY:
        return False
    api_key = request.headers.get(settings.API_KEY_HEADER)
    if api_key is None:
        return False
    return secrets.compare_digest(api_key, settings.ADMIN_API_KEY)


async def get_identity(request: Request) -> IdentityContext:
    """FastAPI dependency building the IdentityContext of the current request."""
    caller = (request.headers.get(settings.SESSION_USER_HEADER) or "").strip()
    is_admin = _has_admin_key(request) or (caller != "" and caller in settings.admin_users)
    return IdentityContext(
        caller_identity=caller,
        is_admin=is_admin,
        client_address=get_client_ip(request),
        client_agent=request.headers.get("User-Agent", ""),
    )
