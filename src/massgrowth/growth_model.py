"""
Growth Model Base
=================
Shared machinery for the per-mass-type growth calculators.

Each calculator applies a chain of multiplicative modifiers to a literature
base rate, then converts the rate into a projected size. Sizes are maximal
diameters in cm; volumes use the sphere approximation V = (4/3) pi (d/2)^3.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from .config import GrowthConfig, DEFAULT_CONFIG, CalculationMode, EvidenceBase
from .models import ClinicalInput, GrowthResult
from .random_source import RandomSource, NumpyRandomSource

logger = logging.getLogger(__name__)


def sphere_volume(diameter_cm: float) -> float:
    """Volume (mL) of a sphere with the given diameter (cm)."""
    return (4 / 3) * np.pi * (diameter_cm / 2) ** 3


def sphere_diameter(volume: float) -> float:
    """Diameter (cm) of a sphere with the given volume (mL)."""
    return 2 * np.cbrt((3 * volume) / (4 * np.pi))


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return float(min(max(value, low), high))


class GrowthCalculator:
    """
    Base class for a mass-type growth calculator.

    Subclasses implement ``calculate(case)``. Inputs are assumed validated
    (see ``InputValidator``); the engine runs validation first.
    """

    mass_type = None

    def __init__(
        self,
        config: GrowthConfig = None,
        random_source: Optional[RandomSource] = None,
        evidence: Optional[EvidenceBase] = None
    ):
        self.config = config or DEFAULT_CONFIG
        self.random_source = random_source or NumpyRandomSource()
        self._evidence = evidence

    @property
    def evidence(self) -> EvidenceBase:
        if self._evidence is None:
            self._evidence = EvidenceBase()
        return self._evidence

    def calculate(self, case: ClinicalInput) -> GrowthResult:
        raise NotImplementedError

    # -------------------------------------------------------------------------
    # Randomness
    # -------------------------------------------------------------------------

    @staticmethod
    def is_probabilistic(case: ClinicalInput) -> bool:
        return case.calculation_mode == CalculationMode.PROBABILISTIC

    def draw(self) -> float:
        """One uniform draw in [0, 1)."""
        return float(self.random_source.random())

    def uniform(self, bounds: Tuple[float, float]) -> float:
        low, high = bounds
        return low + self.draw() * (high - low)

    def bernoulli(self, percent: float) -> bool:
        """True with the given probability (%)."""
        return self.draw() * 100 < percent

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------

    def _log_factor(self, name: str, value: float):
        logger.debug(f"{self.mass_type.value}: {name} x{value:.3f}")

    def _log_result(self, result: GrowthResult):
        logger.info(
            f"{self.mass_type.value}: {result.projection_months} months, "
            f"final {result.final_size:.2f} cm ({result.total_growth:+.2f} cm), "
            f"{result.behavior}"
        )
