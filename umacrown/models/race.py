"""Model for the static race catalog."""

from typing import Optional

from sqlalchemy import Boolean, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from umacrown.models.database import Base
from umacrown.rotation.types import Distance, RaceRecord, Surface


class Race(Base):
    """A race on the career calendar."""

    __tablename__ = "races"
    __table_args__ = (
        Index("ix_races_rank", "rank"),
        Index("ix_races_timing", "month", "second_half"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    surface: Mapped[int] = mapped_column(Integer)  # 0=turf, 1=dirt
    distance: Mapped[int] = mapped_column(Integer)  # 1=sprint .. 4=long
    distance_meters: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    num_fans: Mapped[int] = mapped_column(Integer, default=0)
    rank: Mapped[int] = mapped_column(Integer)  # 1=G1, 2=G2, 3=G3, 4+=open/listed
    month: Mapped[int] = mapped_column(Integer)
    second_half: Mapped[bool] = mapped_column(Boolean, default=False)
    junior: Mapped[bool] = mapped_column(Boolean, default=False)
    classic: Mapped[bool] = mapped_column(Boolean, default=False)
    senior: Mapped[bool] = mapped_column(Boolean, default=False)
    bc_final: Mapped[bool] = mapped_column(Boolean, default=False)
    larc: Mapped[bool] = mapped_column(Boolean, default=False)

    def to_record(self) -> RaceRecord:
        """Immutable planner view of this row."""
        return RaceRecord(
            race_id=self.id,
            name=self.name,
            surface=Surface(self.surface),
            distance=Distance(self.distance),
            rank=self.rank,
            junior=self.junior,
            classic=self.classic,
            senior=self.senior,
            month=self.month,
            second_half=self.second_half,
            is_primary_final=self.bc_final,
            is_secondary_exclusive=self.larc,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "surface": self.surface,
            "distance": self.distance,
            "distance_meters": self.distance_meters,
            "num_fans": self.num_fans,
            "rank": self.rank,
            "month": self.month,
            "second_half": self.second_half,
            "junior": self.junior,
            "classic": self.classic,
            "senior": self.senior,
            "bc_final": self.bc_final,
            "larc": self.larc,
        }
