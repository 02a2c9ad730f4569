"""
Launcher fatigue index.

The index is a simulated wear proxy used in fatigue reports:

    index = min(1.0, (flight_hours / hours_scale) * random_factor)

with random_factor drawn uniformly from [factor_min, factor_max) and the
result rounded half-up to two decimals. It is not derived from sensor
data. Callers depend only on the FatigueModel protocol so a real model
can replace SimulatedFatigueModel.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Protocol

import numpy as np

from loadout.analytics.life_status import LauncherLifeStatus, LauncherLifeStatusRepository
from loadout.config import config
from loadout.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal('0.01')


def compute_fatigue_index(
    flight_hours: float,
    random_factor: float,
    hours_scale: float = 10000.0,
) -> Decimal:
    """Fatigue index in [0, 1], rounded half-up to 2 decimals."""
    if flight_hours is None or flight_hours < 0:
        raise ValidationError('Flight hours cannot be negative', field='flight_hours')
    if hours_scale <= 0:
        raise ValidationError('Hours scale must be positive', field='hours_scale')

    raw = min(1.0, (float(flight_hours) / hours_scale) * random_factor)
    return Decimal(raw).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


class FatigueModel(Protocol):
    """Anything that turns flight hours into a fatigue index."""

    def fatigue_index(self, flight_hours: float) -> Decimal:
        ...


class SimulatedFatigueModel:
    """Fatigue index with a uniformly drawn wear factor."""

    def __init__(
        self,
        hours_scale: float = 10000.0,
        factor_min: float = 0.8,
        factor_max: float = 1.2,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ):
        if factor_min > factor_max:
            raise ValueError('factor_min must not exceed factor_max')
        self.hours_scale = hours_scale
        self.factor_min = factor_min
        self.factor_max = factor_max
        self._rng = rng or np.random.default_rng(seed)

    @classmethod
    def from_config(cls) -> 'SimulatedFatigueModel':
        return cls(
            hours_scale=config.fatigue.hours_scale,
            factor_min=config.fatigue.factor_min,
            factor_max=config.fatigue.factor_max,
            seed=config.fatigue.seed,
        )

    def draw_factor(self) -> float:
        return float(self._rng.uniform(self.factor_min, self.factor_max))

    def fatigue_index(self, flight_hours: float) -> Decimal:
        factor = self.draw_factor()
        index = compute_fatigue_index(flight_hours, factor, self.hours_scale)
        logger.debug(f'Fatigue index {index} for {flight_hours:.2f} h (factor {factor:.3f})')
        return index


@dataclass
class FatigueReport:
    """Fatigue figures for one launcher serial."""
    serial_number: str
    flight_hours: float
    fatigue_index: Decimal
    life_status: Optional[LauncherLifeStatus] = None
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            'serial_number': self.serial_number,
            'flight_hours': self.flight_hours,
            'fatigue_index': float(self.fatigue_index),
            'life_status': self.life_status.to_dict() if self.life_status else None,
            'generated_at': self.generated_at.isoformat(),
        }


class FatigueMonitor:
    """Builds fatigue reports from life status and a fatigue model."""

    def __init__(
        self,
        repository: Optional[LauncherLifeStatusRepository] = None,
        model: Optional[FatigueModel] = None,
    ):
        self.repository = repository or LauncherLifeStatusRepository()
        self.model = model or SimulatedFatigueModel.from_config()

    def report(self, serial_number: str, flight_hours: Optional[float] = None) -> FatigueReport:
        """
        Build a report for a launcher serial.

        Flight hours default to the launcher's recorded total. Raises
        NotFoundError if no hours are given and the serial has no
        recorded missions.
        """
        status = self.repository.get(serial_number)
        if flight_hours is None:
            if status is None:
                raise NotFoundError('Launcher life status', serial_number)
            flight_hours = status.total_flight_hours

        index = self.model.fatigue_index(flight_hours)
        if not Decimal('0') <= index <= Decimal('1'):
            raise ValidationError(f'Fatigue index {index} is outside [0, 1]', field='fatigue_index')

        logger.info(f'Fatigue report for launcher {serial_number}: index {index}')
        return FatigueReport(
            serial_number=serial_number,
            flight_hours=float(flight_hours),
            fatigue_index=index,
            life_status=status,
        )
