from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Header, HTTPException, Query, status

from .settings import get_settings


# PUBLIC_INTERFACE
def get_api_key_dependency():
    """
    Return a FastAPI dependency callable that enforces a shared API key only
    when ENABLE_API_KEY_AUTH is enabled in settings. When disabled, the
    dependency is a no-op.

    Behavior:
    - If settings.enable_api_key_auth is False (default): returns a dependency that does nothing.
    - If True: compares the x-api-key header with API_KEY.
      If the key is missing or wrong, raises 401.

    Usage:
        from .auth import get_api_key_dependency
        router = APIRouter(dependencies=[Depends(get_api_key_dependency())])
    """
    settings = get_settings()

    # If key auth is disabled, return a no-op dependency
    if not settings.enable_api_key_auth:
        async def _noop() -> None:  # noqa: D401 - trivial
            """No-op dependency (auth disabled)."""
            return None

        return _noop

    expected_key: Optional[str] = settings.api_key

    async def _enforce(x_api_key: Optional[str] = Header(default=None)) -> None:
        """
        Enforce the shared API key when enabled.

        Raises:
            HTTPException(401) if the key is missing, not configured or invalid.
        """
        if not x_api_key:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

        if not expected_key:
            # Misconfiguration: auth enabled but no key provided
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Server authentication not configured",
            )

        if not secrets.compare_digest(x_api_key, expected_key):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")

    return _enforce


# PUBLIC_INTERFACE
async def get_owner_email(
    x_user_email: Optional[str] = Header(default=None),
    email: Optional[str] = Query(default=None, description="Owner email, when no X-User-Email header is sent"),
) -> str:
    """
    Resolve the task owner for the current request.

    The identity comes from the X-User-Email header set by the session layer
    in front of this service, falling back to an ``email`` query parameter.

    Raises:
        HTTPException(401) when neither is present.
    """
    owner = (x_user_email or email or "").strip()
    if not owner:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return owner
