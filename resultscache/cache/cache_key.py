"""Cache key generation logic."""
import base64
import uuid


def generate_cache_key() -> str:
    """
    Generate a fresh key for a stored result.

    The key is the URL-safe base64 encoding of a random 128-bit UUID with the
    trailing padding removed, so it is always 22 characters long.

    Returns:
        Cache key string

    Example:
        >>> generate_cache_key()
        "3q2-7wAAQACAAAAAAAAAAA"
    """
    return base64.urlsafe_b64encode(uuid.uuid4().bytes).rstrip(b"=").decode("ascii")
