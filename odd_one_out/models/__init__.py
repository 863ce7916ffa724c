"""Re-exports all models to ensure Alembic detects them."""
from .game import Game
from .player import Player
from .round import Round
from .clue import Clue
from .vote import Vote
from .word_pair import WordPair

__all__ = ["Game", "Player", "Round", "Clue", "Vote", "WordPair"]
