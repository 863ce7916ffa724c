"""Default word pool and random word pair picker for rounds."""
import random
from typing import NamedTuple, Optional, Sequence

from ..errors import PoolExhaustedError


class WordPairEntry(NamedTuple):
    """A group word, the odd player's word, and an optional category."""

    group_word: str
    odd_word: str
    category: Optional[str] = None


DEFAULT_WORD_PAIRS: list[WordPairEntry] = [
    WordPairEntry("Coffee", "Tea", "Drinks"),
    WordPairEntry("Beer", "Wine", "Drinks"),
    WordPairEntry("Lemonade", "Orange Juice", "Drinks"),
    WordPairEntry("Pizza", "Burger", "Food"),
    WordPairEntry("Sushi", "Ramen", "Food"),
    WordPairEntry("Pancakes", "Waffles", "Food"),
    WordPairEntry("Apple", "Pear", "Food"),
    WordPairEntry("Cat", "Dog", "Animals"),
    WordPairEntry("Lion", "Tiger", "Animals"),
    WordPairEntry("Dolphin", "Shark", "Animals"),
    WordPairEntry("Owl", "Eagle", "Animals"),
    WordPairEntry("Beach", "Pool", "Places"),
    WordPairEntry("Library", "Bookstore", "Places"),
    WordPairEntry("Hospital", "Pharmacy", "Places"),
    WordPairEntry("Airport", "Train Station", "Places"),
    WordPairEntry("Guitar", "Violin", "Music"),
    WordPairEntry("Piano", "Organ", "Music"),
    WordPairEntry("Drums", "Tambourine", "Music"),
    WordPairEntry("Soccer", "Rugby", "Sports"),
    WordPairEntry("Tennis", "Badminton", "Sports"),
    WordPairEntry("Skiing", "Snowboarding", "Sports"),
    WordPairEntry("Doctor", "Nurse", "Jobs"),
    WordPairEntry("Chef", "Baker", "Jobs"),
    WordPairEntry("Pilot", "Astronaut", "Jobs"),
    WordPairEntry("Car", "Motorcycle", "Transport"),
    WordPairEntry("Bicycle", "Scooter", "Transport"),
    WordPairEntry("Boat", "Submarine", "Transport"),
    WordPairEntry("Summer", "Spring", "Seasons"),
    WordPairEntry("Rain", "Snow", "Weather"),
    WordPairEntry("Sunrise", "Sunset", "Nature"),
    WordPairEntry("Mountain", "Volcano", "Nature"),
    WordPairEntry("Laptop", "Tablet", "Technology"),
    WordPairEntry("Email", "Letter", "Technology"),
    WordPairEntry("Movie", "Play", "Entertainment"),
    WordPairEntry("Birthday", "Wedding", "Events"),
    WordPairEntry("Vampire", "Zombie", "Fantasy"),
    WordPairEntry("Wizard", "Witch", "Fantasy"),
    WordPairEntry("Castle", "Palace", "Buildings"),
    WordPairEntry("Toothbrush", "Comb", "Household"),
    WordPairEntry("Pillow", "Blanket", "Household"),
]


def pick_word_pair(pool: Sequence[WordPairEntry]) -> WordPairEntry:
    """Return a word pair chosen uniformly at random from the pool.

    Args:
        pool: The candidate word pairs.

    Returns:
        One entry of the pool.

    Raises:
        PoolExhaustedError: If the pool is empty.
    """
    if not pool:
        raise PoolExhaustedError()
    return random.choice(pool)
