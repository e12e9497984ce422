"""Models for characters, player registrations and race progress."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from umacrown.config import jst_now_naive
from umacrown.models.database import Base
from umacrown.models.race import Race
from umacrown.rotation.types import CharacterProfile, Grade


class Character(Base):
    """A trainable character and its innate aptitude grades (letters G..S)."""

    __tablename__ = "characters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))

    turf: Mapped[str] = mapped_column(String(1), default="D")
    dirt: Mapped[str] = mapped_column(String(1), default="D")
    sprint: Mapped[str] = mapped_column(String(1), default="D")
    mile: Mapped[str] = mapped_column(String(1), default="D")
    medium: Mapped[str] = mapped_column(String(1), default="D")
    long: Mapped[str] = mapped_column(String(1), default="D")

    front_runner: Mapped[str] = mapped_column(String(1), default="D")
    pace_chaser: Mapped[str] = mapped_column(String(1), default="D")
    late_surger: Mapped[str] = mapped_column(String(1), default="D")
    end_closer: Mapped[str] = mapped_column(String(1), default="D")

    def to_profile(self) -> CharacterProfile:
        return CharacterProfile(
            character_id=self.id,
            name=self.name,
            turf=Grade.parse(self.turf),
            dirt=Grade.parse(self.dirt),
            sprint=Grade.parse(self.sprint),
            mile=Grade.parse(self.mile),
            medium=Grade.parse(self.medium),
            long=Grade.parse(self.long),
            front_runner=Grade.parse(self.front_runner),
            pace_chaser=Grade.parse(self.pace_chaser),
            late_surger=Grade.parse(self.late_surger),
            end_closer=Grade.parse(self.end_closer),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "turf": self.turf,
            "dirt": self.dirt,
            "sprint": self.sprint,
            "mile": self.mile,
            "medium": self.medium,
            "long": self.long,
            "front_runner": self.front_runner,
            "pace_chaser": self.pace_chaser,
            "late_surger": self.late_surger,
            "end_closer": self.end_closer,
        }


class RegisteredCharacter(Base):
    """A character a player is working towards all-crown with."""

    __tablename__ = "registered_characters"
    __table_args__ = (
        UniqueConstraint("user_id", "character_id", name="uq_registered_user_character"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    character_id: Mapped[int] = mapped_column(ForeignKey("characters.id"))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=jst_now_naive)

    character: Mapped["Character"] = relationship("Character", lazy="joined")


class CompletedRace(Base):
    """A race a player's character has already won."""

    __tablename__ = "completed_races"
    __table_args__ = (
        Index("ix_completed_user_character", "user_id", "character_id"),
        UniqueConstraint("user_id", "character_id", "race_id", name="uq_completed_race"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64))
    character_id: Mapped[int] = mapped_column(ForeignKey("characters.id"))
    race_id: Mapped[int] = mapped_column(ForeignKey("races.id"))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=jst_now_naive)


class ScenarioRace(Base):
    """A career objective race fixed by a character's own scenario."""

    __tablename__ = "scenario_races"
    __table_args__ = (Index("ix_scenario_races_character", "character_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    character_id: Mapped[int] = mapped_column(ForeignKey("characters.id"))
    race_id: Mapped[int] = mapped_column(ForeignKey("races.id"))
    race_number: Mapped[int] = mapped_column(Integer)
    random_group: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    # None=first eligible stage, False=classic, True=senior
    senior: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    race: Mapped["Race"] = relationship("Race", lazy="joined")
