"""Signer authentication shared by every instruction."""

from src.rc_common.errors import SignerMismatchError


def require_signer(role: str, expected: str, signer: str) -> None:
    """Raise AuthorizationError unless `signer` is the wallet allowed to act as `role`."""
    if signer != expected:
        raise SignerMismatchError(role, expected, signer)
