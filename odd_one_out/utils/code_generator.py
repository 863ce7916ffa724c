"""Generates 6-character join codes players can read aloud and type."""
import random

# No 0/O or 1/I so codes survive being read off a screen
JOIN_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
JOIN_CODE_LENGTH = 6


def generate_game_code(length: int = JOIN_CODE_LENGTH) -> str:
    """Generate a random join code from the unambiguous alphabet.

    Args:
        length: Number of characters in the code. Defaults to 6.

    Returns:
        A random uppercase code.
    """
    return "".join(random.choices(JOIN_CODE_ALPHABET, k=length))
