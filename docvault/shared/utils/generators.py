"""ID and token generators (CUID for rows, random hex for share links)."""

import secrets

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_share_token(num_bytes: int = 32) -> str:
    """Return an unguessable hex token for an anonymous share link.

    Args:
        num_bytes: Bytes of randomness; must be at least 8 (64 bits).

    Returns:
        Hex string of length 2 * num_bytes.
    """
    if num_bytes < 8:
        raise ValueError("Share tokens need at least 64 bits of entropy")
    return secrets.token_hex(num_bytes)
