"""Word pair service — seeding and drawing from the stored pool."""
import logging
from typing import Iterable

from ..extensions import db
from ..models.word_pair import WordPair
from ..utils.word_pairs import DEFAULT_WORD_PAIRS, WordPairEntry, pick_word_pair

logger = logging.getLogger(__name__)


def load_pool() -> list[WordPairEntry]:
    """Return every stored word pair as plain entries."""
    rows = db.session.execute(db.select(WordPair).order_by(WordPair.id)).scalars().all()
    return [WordPairEntry(r.group_word, r.odd_word, r.category) for r in rows]


def draw_word_pair() -> WordPairEntry:
    """Pick a random pair from the stored pool.

    Raises:
        PoolExhaustedError: If no word pairs have been seeded.
    """
    return pick_word_pair(load_pool())


def seed_word_pairs(pairs: Iterable[WordPairEntry] = DEFAULT_WORD_PAIRS) -> int:
    """Insert the given pairs if the pool is empty.

    Args:
        pairs: Entries to load. Defaults to the built-in pool.

    Returns:
        Number of rows inserted (0 if the pool was already populated).
    """
    existing = db.session.execute(
        db.select(db.func.count()).select_from(WordPair)
    ).scalar() or 0
    if existing:
        return 0

    count = 0
    for entry in pairs:
        if entry.group_word == entry.odd_word:
            logger.warning("Skipping word pair with identical words: %s", entry.group_word)
            continue
        db.session.add(
            WordPair(group_word=entry.group_word, odd_word=entry.odd_word, category=entry.category)
        )
        count += 1
    db.session.commit()
    logger.info("Seeded %d word pairs", count)
    return count
