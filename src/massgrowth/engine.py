"""
Growth Engine
=============
Entry point for growth projections.

Usage:
    engine = GrowthEngine()
    case = ClinicalInput(current_size=3.0, age=35, projection_months=12)
    result = engine.calculate(MassType.FIBROID, case)
    trajectory = engine.project_multi_horizon(MassType.FIBROID, case)

The engine validates the case, dispatches to the calculator for the mass
type and returns an immutable ``GrowthResult``. It holds no per-case state:
the mass type is always an explicit argument.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pandas as pd

from .config import GrowthConfig, DEFAULT_CONFIG, EvidenceBase, MassType
from .models import ClinicalInput, GrowthResult, HorizonResult, MassTypeLike
from .validation import InputValidator, InvalidInputError
from .random_source import RandomSource, NumpyRandomSource
from .growth_model import GrowthCalculator
from .endometrioma_model import EndometriomaCalculator
from .fibroid_model import FibroidCalculator
from .simple_cyst_model import SimpleCystCalculator
from .complex_cyst_model import ComplexCystCalculator
from .adenomyosis_model import AdenomyosisCalculator

logger = logging.getLogger(__name__)


CALCULATORS = {
    MassType.ENDOMETRIOMA: EndometriomaCalculator,
    MassType.FIBROID: FibroidCalculator,
    MassType.SIMPLE_CYST: SimpleCystCalculator,
    MassType.COMPLEX_CYST: ComplexCystCalculator,
    MassType.ADENOMYOSIS: AdenomyosisCalculator,
}


@dataclass
class CalculationOutcome:
    """Result of ``GrowthEngine.evaluate``: a result or the reasons there is none."""
    success: bool
    result: Optional[GrowthResult] = None
    errors: List[str] = field(default_factory=list)


class GrowthEngine:
    """
    Projects benign gynecologic mass growth.

    Args:
        config: Coefficient tables (defaults to literature values)
        evidence: Citation and classification tables (defaults to bundled YAML)
        random_source: Uniform draws for probabilistic mode
    """

    def __init__(
        self,
        config: Optional[GrowthConfig] = None,
        evidence: Optional[EvidenceBase] = None,
        random_source: Optional[RandomSource] = None
    ):
        self.config = config or DEFAULT_CONFIG
        self.evidence = evidence or EvidenceBase()
        self.random_source = random_source or NumpyRandomSource()

        self._calculators: Dict[MassType, GrowthCalculator] = {
            mass_type: cls(self.config, self.random_source, self.evidence)
            for mass_type, cls in CALCULATORS.items()
        }
        logger.info(f"GrowthEngine initialised (evidence v{self.evidence.version})")

    def calculator_for(self, mass_type: MassTypeLike) -> GrowthCalculator:
        return self._calculators[MassType(mass_type)]

    def calculate(self, mass_type: MassTypeLike, case: ClinicalInput) -> GrowthResult:
        """
        Run a single projection.

        Raises:
            InvalidInputError: age, horizon, size or subtype missing/out of range
        """
        mass_type = MassType(mass_type)
        validator = InputValidator(self.config.adenomyosis.default_jz_thickness_mm)
        validator.validate_all(mass_type, case)
        validator.raise_for_failures()

        logger.info(
            f"Calculating {mass_type.value} ({case.calculation_mode.value}) "
            f"over {case.projection_months} months"
        )
        return self._calculators[mass_type].calculate(case)

    def evaluate(self, mass_type: MassTypeLike, case: ClinicalInput) -> CalculationOutcome:
        """Like ``calculate`` but never raises; failures are returned as messages."""
        try:
            return CalculationOutcome(success=True, result=self.calculate(mass_type, case))
        except InvalidInputError as e:
            return CalculationOutcome(
                success=False,
                errors=[r.message for r in e.failures]
            )
        except ValueError as e:
            # Unknown mass type or categorical value
            return CalculationOutcome(success=False, errors=[str(e)])
        except Exception as e:
            logger.exception(f"Calculation failed for {mass_type}")
            return CalculationOutcome(
                success=False,
                errors=[f"Error calculating growth rate: {e}"]
            )

    def project_multi_horizon(
        self,
        mass_type: MassTypeLike,
        case: ClinicalInput,
        horizons: Optional[List[int]] = None
    ) -> List[HorizonResult]:
        """
        Re-run the calculator at each horizon (default 3, 6, 12, 24, 36 months).

        Each horizon is an independent calculation; in probabilistic mode
        each one draws fresh randomness.
        """
        horizons = horizons or list(self.config.projection_horizons)
        trajectory = []
        for months in horizons:
            result = self.calculate(mass_type, case.with_horizon(months))
            trajectory.append(HorizonResult(
                months=months,
                final_size=result.final_size,
                total_growth=result.total_growth,
                growth_velocity_cm_year=result.growth_velocity_cm_year,
                behavior=result.behavior,
            ))
        return trajectory

    def projection_frame(
        self,
        mass_type: MassTypeLike,
        case: ClinicalInput,
        horizons: Optional[List[int]] = None
    ) -> pd.DataFrame:
        """Multi-horizon trajectory as a DataFrame indexed by month."""
        trajectory = self.project_multi_horizon(mass_type, case, horizons)
        df = pd.DataFrame([h.to_dict() for h in trajectory])
        return df.set_index("months")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def create_engine(random_source: Optional[RandomSource] = None) -> GrowthEngine:
    """Factory function to create an engine with the default evidence base."""
    return GrowthEngine(random_source=random_source)


def calculate(
    mass_type: MassTypeLike,
    case: ClinicalInput,
    random_source: Optional[RandomSource] = None
) -> GrowthResult:
    return create_engine(random_source).calculate(mass_type, case)


def project_multi_horizon(
    mass_type: MassTypeLike,
    case: ClinicalInput,
    random_source: Optional[RandomSource] = None
) -> List[HorizonResult]:
    return create_engine(random_source).project_multi_horizon(mass_type, case)


def quick_calculate(
    mass_type: MassTypeLike,
    current_size: float,
    age: int,
    projection_months: int = 12,
    **kwargs
) -> GrowthResult:
    """
    Quick deterministic projection with minimal inputs.

    Extra keyword arguments are passed through to ``ClinicalInput``.
    """
    case = ClinicalInput(
        current_size=current_size,
        age=age,
        projection_months=projection_months,
        **kwargs
    )
    return GrowthEngine().calculate(mass_type, case)


# =============================================================================
# EXAMPLE USAGE
# =============================================================================

if __name__ == "__main__":
    from .reporting import explain_result

    logging.basicConfig(level=logging.INFO)

    engine = GrowthEngine()

    print("\n" + "=" * 60)
    print("EXAMPLE 1: 3 cm intramural fibroid, age 35, 12 months")
    print("=" * 60)

    case1 = ClinicalInput(current_size=3.0, age=35, projection_months=12)
    result1 = engine.calculate(MassType.FIBROID, case1)
    print(explain_result(MassType.FIBROID, case1, result1))

    print("\n" + "=" * 60)
    print("EXAMPLE 2: 4.5 cm endometrioma after first surgery, dienogest")
    print("=" * 60)

    case2 = ClinicalInput(
        current_size=4.5,
        age=32,
        projection_months=24,
        previous_surgery="first",
        treatment="dienogest",
        bilateral=True,
    )
    result2 = engine.calculate(MassType.ENDOMETRIOMA, case2)
    print(explain_result(MassType.ENDOMETRIOMA, case2, result2))

    print("\nTrajectory:")
    print(engine.projection_frame(MassType.ENDOMETRIOMA, case2))
