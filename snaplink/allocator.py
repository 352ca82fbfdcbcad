"""Short code allocation with bounded collision retries."""

import logging
from typing import Awaitable, Callable, Optional

from .exceptions import CapacityExhaustedError
from .shortcode import ShortCodeGenerator

ExistsCheck = Callable[[str], Awaitable[bool]]


class CodeAllocator:
    """Pick a short code that the store does not know yet.

    The existence check only narrows the window for collisions. Two callers may
    still be handed the same code; the store's unique constraint decides.
    """

    def __init__(
        self,
        generator: Optional[ShortCodeGenerator] = None,
        max_attempts: int = 10,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize allocator.

        Args:
            generator: Source of candidate codes (anything with ``generate()``)
            max_attempts: Number of candidates checked before giving up
            logger: Optional logger
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1 (given: {max_attempts})")

        self.generator = generator or ShortCodeGenerator()
        self.max_attempts = max_attempts
        self.logger = logger or logging.getLogger(__name__)

    async def allocate(self, exists: ExistsCheck) -> str:
        """Return the first candidate for which ``exists`` reports False.

        Args:
            exists: Async predicate backed by persisted state

        Returns:
            An unused short code

        Raises:
            CapacityExhaustedError: If all ``max_attempts`` candidates collided
            StoreError: Propagated unchanged from ``exists``
        """
        for attempt in range(1, self.max_attempts + 1):
            code = self.generator.generate()

            if not await exists(code):
                if attempt > 1:
                    self.logger.debug(f"Allocated code after {attempt} attempts: {code}")
                return code

            self.logger.debug(f"Collision on candidate {code} (attempt {attempt}/{self.max_attempts})")

        self.logger.error(
            f"Could not generate a unique short code after {self.max_attempts} attempts"
        )
        raise CapacityExhaustedError(self.max_attempts)
