"""
API key check for routes that change server state.
"""
from typing import Optional

from fastapi import Header, HTTPException, Request, status


def get_api_key(request: Request) -> Optional[str]:
    """Configured API key, or None when the API runs open (local use)."""
    return request.app.state.settings.api_key or None


def verify_api_key_header(
    request: Request, x_api_key: Optional[str] = Header(None)
) -> Optional[str]:
    """Verify API key from x-api-key header when one is configured."""
    expected_key = get_api_key(request)
    if expected_key is None:
        return None

    if not x_api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "unauthorized", "hint": "Missing x-api-key header"},
        )

    if x_api_key != expected_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "unauthorized", "hint": "Invalid API key"},
        )

    return x_api_key
