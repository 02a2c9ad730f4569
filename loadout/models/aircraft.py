"""
Aircraft model - airframes that fly missions.

Identified only by serial number. Missions and recorded post-flight data
reference it with ON UPDATE CASCADE, so renaming a serial number carries
over to every reference.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from loadout.models.base import Base


class Aircraft(Base):
    """Airframe keyed by serial number."""

    __tablename__ = 'aircraft'

    serial_number: Mapped[str] = mapped_column(
        String(50),
        primary_key=True,
        comment='Airframe serial number'
    )

    def __repr__(self) -> str:
        return f'<Aircraft {self.serial_number}>'

    def to_dict(self) -> dict:
        return {'serial_number': self.serial_number}
