"""Assembly of hunks into a bounded diff blob for prompt interpolation."""

import random
from collections.abc import Sequence

from git_suggest.models import Hunk


def build_diff(
    hunks: Sequence[Hunk], limit: int, rng: random.Random | None = None
) -> str:
    """Format, shuffle and truncate hunks into a single string.

    Each hunk becomes ``"<file_path> - <diff>"``. The lines are shuffled so the
    model sees no stable file ordering, joined with newlines and cut to the
    first ``limit`` characters. The cut is not line aware.

    Args:
        hunks: Hunks to include
        limit: Maximum number of characters to return
        rng: Randomness source, the module-level generator if None

    Returns:
        The assembled diff text

    Raises:
        ValueError: If limit is negative
    """
    if limit < 0:
        raise ValueError(f"Diff length limit must not be negative: {limit}")

    lines = [f"{hunk.file_path} - {hunk.diff}" for hunk in hunks]
    (rng or random).shuffle(lines)
    return "\n".join(lines)[:limit]
