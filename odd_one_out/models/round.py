"""Round model."""
from datetime import datetime
from sqlalchemy import String, Boolean, Integer, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..extensions import db


class Round(db.Model):
    """A single round within a game.

    The dealt words and odd player never change. The scoring summary is
    written once, in the transaction that reveals the round.
    """

    __tablename__ = "rounds"
    __table_args__ = (
        UniqueConstraint("game_id", "round_number", name="uq_game_round_number"),
        CheckConstraint("round_number >= 1", name="ck_rounds_round_number"),
        CheckConstraint("group_word <> odd_word", name="ck_rounds_distinct_words"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    game_id: Mapped[int] = mapped_column(Integer, ForeignKey("games.id"), nullable=False, index=True)
    round_number: Mapped[int] = mapped_column(Integer, nullable=False)
    group_word: Mapped[str] = mapped_column(String(100), nullable=False)
    odd_word: Mapped[str] = mapped_column(String(100), nullable=False)
    odd_player_id: Mapped[int] = mapped_column(Integer, ForeignKey("players.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    correct_votes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_votes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    odd_player_escaped: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    scored_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    game: Mapped["Game"] = relationship(  # type: ignore[name-defined]
        "Game", back_populates="rounds"
    )
    odd_player: Mapped["Player"] = relationship(  # type: ignore[name-defined]
        "Player", foreign_keys=[odd_player_id], lazy="select"
    )
    clues: Mapped[list["Clue"]] = relationship(  # type: ignore[name-defined]
        "Clue", back_populates="round", lazy="select"
    )
    votes: Mapped[list["Vote"]] = relationship(  # type: ignore[name-defined]
        "Vote", back_populates="round", lazy="select"
    )

    def word_for(self, player_id: int) -> str:
        """Return the word the given player was dealt this round."""
        return self.odd_word if player_id == self.odd_player_id else self.group_word

    def __repr__(self) -> str:
        return f"<Round game={self.game_id} number={self.round_number}>"
