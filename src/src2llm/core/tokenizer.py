"""
Exact token counting using OpenAI's tiktoken library.

The processing report always carries the cheap character heuristic from
:mod:`src2llm.core.stats`; this counter is used on request to show a real
tokenizer figure next to it.
"""

import logging
from typing import Any, Optional

import tiktoken


logger = logging.getLogger(__name__)


class TokenCounter:
    """
    Counts tokens in text with a tiktoken encoding.

    Failure to load the encoding (for example when the encoding files
    cannot be downloaded) leaves the counter unavailable instead of
    aborting the run.
    """

    def __init__(self, encoding_name: str = "cl100k_base"):
        """
        Initialize the token counter.

        Args:
            encoding_name: The name of the tiktoken encoding to use.
                         Default is cl100k_base (used by GPT-4).
        """
        self.encoding_name = encoding_name
        self.encoder: Optional[Any] = None

        try:
            self.encoder = tiktoken.get_encoding(encoding_name)
        except Exception as e:
            logger.warning(f"Failed to initialize token encoder '{encoding_name}': {e}")

    @property
    def is_available(self) -> bool:
        """Check if token counting is available."""
        return self.encoder is not None

    def count(self, text: str) -> Optional[int]:
        """
        Count tokens in the given text.

        Returns:
            Number of tokens, or None if counting is unavailable.
        """
        if not self.is_available:
            return None
        if not text:
            return 0
        # Bundled sources may legitimately contain special-token text
        return len(self.encoder.encode(text, disallowed_special=()))
