"""Game model."""
import enum
from datetime import datetime
from sqlalchemy import String, DateTime, Enum, Integer, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..extensions import db


class GamePhase(str, enum.Enum):
    """Game lifecycle phases."""

    LOBBY = "lobby"
    CLUE = "clue"
    VOTING = "voting"
    REVEAL = "reveal"
    FINISHED = "finished"


class GameMode(str, enum.Enum):
    """Whether the odd player is told about their role."""

    CLASSIC = "classic"
    BLIND = "blind"


class Game(db.Model):
    """Represents a single game session."""

    __tablename__ = "games"
    __table_args__ = (
        CheckConstraint("current_round >= 0", name="ck_games_current_round"),
        CheckConstraint("total_rounds >= 1", name="ck_games_total_rounds"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(6), unique=True, nullable=False, index=True)
    # user id of the creator, not a player id
    host_id: Mapped[str] = mapped_column(String(64), nullable=False)
    mode: Mapped[GameMode] = mapped_column(
        Enum(GameMode, values_callable=lambda e: [v.value for v in e]),
        nullable=False,
        default=GameMode.CLASSIC,
    )
    phase: Mapped[GamePhase] = mapped_column(
        Enum(GamePhase, values_callable=lambda e: [v.value for v in e]),
        nullable=False,
        default=GamePhase.LOBBY,
    )
    # 0 only while in the lobby
    current_round: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_rounds: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    players: Mapped[list["Player"]] = relationship(  # type: ignore[name-defined]
        "Player", back_populates="game", lazy="select", order_by="Player.id"
    )
    rounds: Mapped[list["Round"]] = relationship(  # type: ignore[name-defined]
        "Round", back_populates="game", lazy="select", order_by="Round.round_number"
    )

    def __repr__(self) -> str:
        return f"<Game code={self.code} phase={self.phase} round={self.current_round}/{self.total_rounds}>"
