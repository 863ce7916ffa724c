"""Vote model."""
from datetime import datetime
from sqlalchemy import Integer, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..extensions import db


class Vote(db.Model):
    """A player's guess at who the odd player is."""

    __tablename__ = "votes"
    __table_args__ = (
        UniqueConstraint("round_id", "voter_id", name="uq_round_voter_vote"),
        CheckConstraint("voter_id <> suspect_id", name="ck_votes_no_self_vote"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    round_id: Mapped[int] = mapped_column(Integer, ForeignKey("rounds.id"), nullable=False, index=True)
    voter_id: Mapped[int] = mapped_column(Integer, ForeignKey("players.id"), nullable=False)
    suspect_id: Mapped[int] = mapped_column(Integer, ForeignKey("players.id"), nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    round: Mapped["Round"] = relationship(  # type: ignore[name-defined]
        "Round", back_populates="votes"
    )
    voter: Mapped["Player"] = relationship(  # type: ignore[name-defined]
        "Player", foreign_keys=[voter_id], back_populates="votes"
    )
    suspect: Mapped["Player"] = relationship(  # type: ignore[name-defined]
        "Player", foreign_keys=[suspect_id], lazy="select"
    )

    def __repr__(self) -> str:
        return f"<Vote round={self.round_id} voter={self.voter_id} suspect={self.suspect_id}>"
