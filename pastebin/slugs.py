"""
Slug generation.
"""
import random
import secrets
import string
from typing import Optional

from pastebin.errors import InvalidLength

ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
MIN_LENGTH = 3


class SlugGenerator:
    """Draws short random identifiers from a fixed 62-character alphabet."""

    def __init__(self, rng: Optional[random.Random] = None):
        # Slugs act as read tokens
        self.rng = rng or secrets.SystemRandom()

    def generate(self, length: int) -> str:
        """
        Generate a slug.

        Args:
            length: Number of characters, at least MIN_LENGTH

        Returns:
            Random slug; uniqueness is not guaranteed here

        Raises:
            InvalidLength: If length is too small
        """
        if length < MIN_LENGTH:
            raise InvalidLength(f"slug length must be >= {MIN_LENGTH}, got {length}")
        return "".join(self.rng.choice(ALPHABET) for _ in range(length))
