"""Clue model."""
from datetime import datetime
from sqlalchemy import String, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..extensions import db


class Clue(db.Model):
    """A one-line hint a player gives about their word."""

    __tablename__ = "clues"
    __table_args__ = (UniqueConstraint("round_id", "player_id", name="uq_round_player_clue"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    round_id: Mapped[int] = mapped_column(Integer, ForeignKey("rounds.id"), nullable=False, index=True)
    player_id: Mapped[int] = mapped_column(Integer, ForeignKey("players.id"), nullable=False)
    clue_text: Mapped[str] = mapped_column(String(200), nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    round: Mapped["Round"] = relationship(  # type: ignore[name-defined]
        "Round", back_populates="clues"
    )
    player: Mapped["Player"] = relationship(  # type: ignore[name-defined]
        "Player", back_populates="clues"
    )

    def __repr__(self) -> str:
        return f"<Clue round={self.round_id} player={self.player_id}>"
