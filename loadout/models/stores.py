"""
Store catalog models - launchers and weapons by part number.

Position assignments reference these by part number plus a free-text
serial number; there is no foreign key from the historical tables, so
retiring a part number never rewrites mission history.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import String, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from loadout.models.base import Base


def _as_float(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


class Launcher(Base):
    """
    Launcher part.

    Fields:
        part_number: Manufacturer part number (primary key)
        name: Nomenclature
        manufacturer_code: Manufacturer/CAGE code
        operational_life_hours: Rated flight hours before retirement
    """

    __tablename__ = 'launcher'

    part_number: Mapped[str] = mapped_column(String(50), primary_key=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    manufacturer_code: Mapped[str] = mapped_column(String(50), nullable=False)

    operational_life_hours: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment='Rated operational life in flight hours'
    )

    def __repr__(self) -> str:
        return f'<Launcher {self.part_number} {self.name}>'

    def to_dict(self) -> dict:
        return {
            'part_number': self.part_number,
            'name': self.name,
            'manufacturer_code': self.manufacturer_code,
            'operational_life_hours': _as_float(self.operational_life_hours),
        }


class Weapon(Base):
    """Weapon part. Mass is optional."""

    __tablename__ = 'weapon'

    part_number: Mapped[str] = mapped_column(String(50), primary_key=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    manufacturer_code: Mapped[str] = mapped_column(String(50), nullable=False)

    mass: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 2),
        nullable=True,
        comment='Mass in kg'
    )

    def __repr__(self) -> str:
        return f'<Weapon {self.part_number} {self.name}>'

    def to_dict(self) -> dict:
        return {
            'part_number': self.part_number,
            'name': self.name,
            'manufacturer_code': self.manufacturer_code,
            'mass': _as_float(self.mass),
        }
