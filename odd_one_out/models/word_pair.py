"""Word pair model."""
from sqlalchemy import String, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from ..extensions import db


class WordPair(db.Model):
    """A group word and the near-miss word dealt to the odd player."""

    __tablename__ = "word_pairs"
    __table_args__ = (UniqueConstraint("group_word", "odd_word", name="uq_word_pair"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    group_word: Mapped[str] = mapped_column(String(100), nullable=False)
    odd_word: Mapped[str] = mapped_column(String(100), nullable=False)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)

    def __repr__(self) -> str:
        return f"<WordPair {self.group_word}/{self.odd_word}>"
