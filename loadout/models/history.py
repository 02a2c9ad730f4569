"""
Historical load models - what was mounted where, per mission.

Weapons and launchers live in two sibling tables. A mission's rows in
both are replaced as a whole on every loadout save, so a position never
appears in both for the same mission.

These tables may be missing on older databases;
loadout.services.mission_weapons.ensure_history_tables creates them.
"""

from sqlalchemy import String, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from loadout.models.base import Base


class HistoricalLoad(Base):
    """A weapon mounted on a position for a mission."""

    __tablename__ = 'historical_load'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    mission_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey('mission.id'),
        nullable=False,
        index=True,
    )

    position: Mapped[str] = mapped_column(String(20), nullable=False)

    weapon_part_number: Mapped[str] = mapped_column(String(50), nullable=False)

    serial_number: Mapped[str] = mapped_column(String(50), nullable=False)

    def __repr__(self) -> str:
        return f'<HistoricalLoad mission={self.mission_id} {self.position} {self.weapon_part_number}/{self.serial_number}>'


class HistoricalLauncher(Base):
    """A launcher mounted on a position for a mission."""

    __tablename__ = 'historical_launcher'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    mission_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey('mission.id'),
        nullable=False,
        index=True,
    )

    position: Mapped[str] = mapped_column(String(20), nullable=False)

    launcher_part_number: Mapped[str] = mapped_column(String(50), nullable=False)

    serial_number: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    def __repr__(self) -> str:
        return f'<HistoricalLauncher mission={self.mission_id} {self.position} {self.launcher_part_number}/{self.serial_number}>'
