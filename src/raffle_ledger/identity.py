from __future__ import annotations

from typing import Iterable, List

import base58

from .errors import InvalidIdentity
from .project_constants import IDENTITY_BYTES


def decode_identity(identity: str) -> bytes:
    """
    Decode a base58 address into its raw public key bytes.
    Raises InvalidIdentity for anything that is not a 32-byte, non-zero key.
    """
    if not isinstance(identity, str) or not identity.strip():
        raise InvalidIdentity(f"Identity must be a non-empty string, got {identity!r}")
    try:
        raw = base58.b58decode(identity.strip())
    except ValueError as e:
        raise InvalidIdentity(f"Identity {identity!r} is not base58: {e}") from e

    if len(raw) != IDENTITY_BYTES:
        raise InvalidIdentity(
            f"Identity {identity!r} decodes to {len(raw)} bytes, expected {IDENTITY_BYTES}"
        )
    if not any(raw):
        raise InvalidIdentity("The zero address cannot be an identity.")
    return raw


def normalize_identity(identity: str) -> str:
    # Re-encoding strips stray whitespace and leading-zero ambiguity.
    return base58.b58encode(decode_identity(identity)).decode("ascii")


def normalize_identities(identities: Iterable[str]) -> List[str]:
    return [normalize_identity(i) for i in identities]


def is_valid_identity(identity: str) -> bool:
    try:
        decode_identity(identity)
    except InvalidIdentity:
        return False
    return True
