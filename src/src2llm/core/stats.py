"""
Aggregate statistics for a finished bundle.

Sizes are counted in UTF-8 bytes. The token estimate is a character-count
heuristic, not a tokenizer: ``len()`` counts code points, so text heavy in
non-ASCII characters is not inflated the way a byte count would inflate it.
"""

import math

from .models import PackageBundle, ProcessingStats


CHARS_PER_TOKEN = 3.5

_SIZE_UNITS = ['Bytes', 'KB', 'MB', 'GB']


def estimate_tokens(text: str) -> int:
    """Estimate model tokens as ``ceil(len(text) / 3.5)``."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def total_source_size(bundle: PackageBundle) -> int:
    """Sum of the UTF-8 byte lengths of every stored file."""
    return sum(record.size for record in bundle.records())


def compute_stats(bundle: PackageBundle, encoded: str, output_file_size: int) -> ProcessingStats:
    """
    Derive the run statistics.

    Args:
        bundle: The frozen bundle.
        encoded: The encoded output text.
        output_file_size: Size in bytes of the artifact as persisted.

    Returns:
        ProcessingStats for the run.
    """
    return ProcessingStats(
        total_files=len(bundle),
        total_source_size=total_source_size(bundle),
        output_file_size=output_file_size,
        estimated_tokens=estimate_tokens(encoded),
    )


def format_bytes(size: int) -> str:
    """Human readable size: ``0 Bytes``, ``512 Bytes``, ``1.5 KB``."""
    if size <= 0:
        return '0 Bytes'
    exponent = 0
    while exponent < len(_SIZE_UNITS) - 1 and size >= 1024 ** (exponent + 1):
        exponent += 1
    value = round(size / 1024 ** exponent, 2)
    if value == int(value):
        value = int(value)
    return f"{value} {_SIZE_UNITS[exponent]}"


def format_number(value: int) -> str:
    """Thousands separators: ``1234567`` -> ``1,234,567``."""
    return f"{value:,}"
