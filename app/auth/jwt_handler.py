from typing import Optional
from app.core.security import verify_token, ACCESS_TOKEN_TYPE, REFRESH_TOKEN_TYPE

def _decode_typed_token(token: str, expected_type: str) -> Optional[dict]:
    payload = verify_token(token)
    if payload is None:
        return None

    # Check token type
    if payload.get("type") != expected_type:
        return None

    # jose enforces exp when present; tokens without one are rejected here
    if payload.get("exp") is None:
        return None

    return payload

def decode_access_token(token: str) -> Optional[dict]:
    """Decode and validate access token"""
    return _decode_typed_token(token, ACCESS_TOKEN_TYPE)

def decode_refresh_token(token: str) -> Optional[dict]:
    """Decode and validate refresh token"""
    return _decode_typed_token(token, REFRESH_TOKEN_TYPE)
