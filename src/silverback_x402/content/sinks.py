"""
Posting Sinks

A posting sink takes one pre-formatted post and performs one outbound post,
reporting only success or failure.
"""

import logging
from typing import List, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

MAX_POST_LENGTH = 280


@runtime_checkable
class PostingSink(Protocol):
    async def post(self, text: str) -> bool:
        """Publish ``text``; True on success."""
        ...


class LoggingSink:
    """
    Dry-run sink: logs posts instead of publishing them.

    Posts that are empty or longer than ``max_length`` are refused.

    Attributes:
        posted: Accepted posts, oldest first.
    """

    def __init__(self, max_length: int = MAX_POST_LENGTH):
        self.max_length = max_length
        self.posted: List[str] = []

    async def post(self, text: str) -> bool:
        if not text.strip() or len(text) > self.max_length:
            logger.warning("Refusing post of %d characters (limit %d)", len(text), self.max_length)
            return False
        self.posted.append(text)
        logger.info("Post (dry run): %s", text)
        return True
