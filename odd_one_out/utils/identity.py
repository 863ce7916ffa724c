"""Generates anonymous user identities."""
import secrets


def generate_user_id() -> str:
    """Generate a 32-character hexadecimal user id.

    Returns:
        A cryptographically secure hex string.
    """
    return secrets.token_hex(16)
