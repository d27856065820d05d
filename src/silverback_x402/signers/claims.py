"""Claim issuance: secure nonces and a monotonic-backed unix clock."""

import secrets
import time
from typing import Optional

from ..schemas.bases import ClaimSet, MAX_CLAIM_WINDOW_SECONDS

# Wall-clock reading taken once at import; later readings advance it by the
# monotonic clock so that system clock steps cannot shrink or stretch a window.
_WALL_ANCHOR: float = time.time()
_MONOTONIC_ANCHOR: float = time.monotonic()


def current_timestamp() -> int:
    """Current unix time in whole seconds, advanced monotonically."""
    return int(_WALL_ANCHOR + (time.monotonic() - _MONOTONIC_ANCHOR))


def new_nonce(nbytes: int = 16) -> str:
    """Return ``nbytes`` of CSPRNG output as lowercase hex (128 bits by default)."""
    if nbytes < 16:
        raise ValueError("nonces must carry at least 128 bits")
    return secrets.token_hex(nbytes)


def issue_claims(
    *,
    subject: str,
    audience: str,
    lifetime: int = MAX_CLAIM_WINDOW_SECONDS,
    nonce_bytes: int = 16,
    now: Optional[int] = None,
) -> ClaimSet:
    """
    Build a fresh claim set valid from now for ``lifetime`` seconds.

    Args:
        subject: Identity the token speaks for.
        audience: Resource the token is bound to.
        lifetime: Window length in seconds, 1..120.
        nonce_bytes: Nonce size; 32 for EIP-3009 bytes32 nonces.
        now: Override for the current timestamp.

    Returns:
        ClaimSet with a single-use nonce.

    Raises:
        ValueError: If ``lifetime`` is outside (0, 120].
    """
    if lifetime <= 0 or lifetime > MAX_CLAIM_WINDOW_SECONDS:
        raise ValueError(
            f"lifetime must be between 1 and {MAX_CLAIM_WINDOW_SECONDS} seconds, got {lifetime}"
        )
    issued_at = current_timestamp() if now is None else now
    return ClaimSet(
        subject=subject,
        audience=audience,
        not_before=issued_at,
        expires_at=issued_at + lifetime,
        nonce=new_nonce(nonce_bytes),
    )
