"""Player model."""
from datetime import datetime
from sqlalchemy import String, Boolean, Integer, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..extensions import db


class Player(db.Model):
    """A user's seat in a game session."""

    __tablename__ = "players"
    __table_args__ = (
        UniqueConstraint("game_id", "user_id", name="uq_game_user"),
        CheckConstraint("score >= 0", name="ck_players_score"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    game_id: Mapped[int] = mapped_column(Integer, ForeignKey("games.id"), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(String(50), nullable=False)
    score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # set once at creation; exactly one per game
    is_host: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    joined_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    game: Mapped["Game"] = relationship(  # type: ignore[name-defined]
        "Game", back_populates="players"
    )
    clues: Mapped[list["Clue"]] = relationship(  # type: ignore[name-defined]
        "Clue", back_populates="player", lazy="select"
    )
    votes: Mapped[list["Vote"]] = relationship(  # type: ignore[name-defined]
        "Vote", foreign_keys="Vote.voter_id", back_populates="voter", lazy="select"
    )

    def __repr__(self) -> str:
        return f"<Player name={self.display_name} score={self.score} host={self.is_host}>"
