"""Turns stored history rows into model context."""
import logging
from typing import Iterable, List

from models.conversation import ContextPair, Turn

logger = logging.getLogger(__name__)


def build_context_pairs(turns_newest_first: Iterable[Turn]) -> List[ContextPair]:
    """
    Build oldest-first context pairs from newest-first turns.

    Each turn maps to exactly one pair. Turns missing either side of the
    exchange are dropped. The window size is decided by the caller that
    fetched the turns; no truncation happens here.

    Args:
        turns_newest_first: Turns as returned by the store

    Returns:
        List of ContextPair in chronological order
    """
    pairs: List[ContextPair] = []
    dropped = 0

    for turn in reversed(list(turns_newest_first)):
        if not turn.user_input or not turn.assistant_raw:
            dropped += 1
            continue
        pairs.append(ContextPair(user=turn.user_input, assistant=turn.assistant_raw))

    if dropped:
        logger.warning(f"Dropped {dropped} incomplete turn(s) from context window")

    return pairs
