"""Short code generation utilities."""

import math
import secrets
import string
from typing import Optional


class ShortCodeGenerator:
    """Generate random fixed-length short codes.

    Values come from the ``secrets`` module, so they are not predictable from
    previously issued codes.
    """

    HEX_CHARS = string.digits + "abcdef"
    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.ascii_letters + string.digits

    ALPHABETS = {
        "hex": HEX_CHARS,
        "base62": BASE62_CHARS,
    }

    def __init__(self, default_length: int = 7, alphabet: str = "hex"):
        """Initialize short code generator.

        Args:
            default_length: Length of generated codes
            alphabet: Name of the alphabet, "hex" or "base62"

        Raises:
            ValueError: If the length is not positive or the alphabet is unknown
        """
        if default_length < 1:
            raise ValueError(f"Short code length must be positive (given: {default_length})")
        if alphabet not in self.ALPHABETS:
            raise ValueError(
                f"Unknown alphabet '{alphabet}' (expected one of: {', '.join(self.ALPHABETS)})"
            )

        self.default_length = default_length
        self.alphabet = alphabet
        self.chars = self.ALPHABETS[alphabet]

    def generate(self, length: Optional[int] = None) -> str:
        """Generate a random short code.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Random short code
        """
        length = length or self.default_length

        if self.alphabet == "hex":
            return secrets.token_hex(math.ceil(length / 2))[:length]

        return "".join(secrets.choice(self.chars) for _ in range(length))

    def is_valid_format(self, code: str) -> bool:
        """Check that a code has the configured length and alphabet."""
        return (
            isinstance(code, str)
            and len(code) == self.default_length
            and all(c in self.chars for c in code)
        )
