# =============================================================================
# lib/tokens.py - Workspace Invite Tokens
# =============================================================================
# Invite tokens are opaque, URL-safe random strings. A workspace gets one at
# creation and keeps it: tokens do not expire and are never rotated.
# =============================================================================

import secrets

# Minimum entropy per token
MIN_TOKEN_BYTES = 24


def create_invite_token(num_bytes: int = MIN_TOKEN_BYTES) -> str:
    """
    Generate a URL-safe invite token.

    Uses the OS CSPRNG and base64url encoding without padding, so 24 bytes
    give a 32-character token.

    Raises:
        ValueError: If fewer than 24 random bytes are requested
    """
    if num_bytes < MIN_TOKEN_BYTES:
        raise ValueError(f"Invite tokens need at least {MIN_TOKEN_BYTES} random bytes")
    return secrets.token_urlsafe(num_bytes)


def invite_path(token: str) -> str:
    """Client route that redeems a token."""
    return f"/join?token={token}"
