"""
Growth Engine - Unit Tests
==========================
Validation, dispatch, multi-horizon projection and convenience functions.
"""

import pytest
import pandas as pd
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from massgrowth.config import MassType, CalculationMode
from massgrowth.models import ClinicalInput, GrowthResult
from massgrowth.random_source import SequenceRandomSource
from massgrowth.validation import InputValidator, InvalidInputError, ValidationSeverity
from massgrowth.engine import (
    GrowthEngine, create_engine, calculate, project_multi_horizon, quick_calculate,
)


@pytest.fixture(scope="module")
def engine():
    return GrowthEngine()


class TestValidation:
    """Test input Chain-of-Verification"""

    def test_valid_case_passes(self):
        validator = InputValidator()
        case = ClinicalInput(current_size=3.0, age=35, projection_months=12)
        results = validator.validate_all(MassType.FIBROID, case)
        assert not any(r.severity == ValidationSeverity.FAIL for r in results)
        validator.raise_for_failures()

    @pytest.mark.parametrize("kwargs,failed", [
        ({"current_size": 3.0, "projection_months": 12}, "Input: Age"),
        ({"current_size": 3.0, "age": 150, "projection_months": 12}, "Input: Age"),
        ({"current_size": 3.0, "age": 35, "projection_months": 0}, "Input: Projection"),
        ({"current_size": 3.0, "age": 35, "projection_months": 241}, "Input: Projection"),
        ({"current_size": float("nan"), "age": 35, "projection_months": 12}, "Input: Size"),
        ({"current_size": -1.0, "age": 35, "projection_months": 12}, "Input: Size"),
        ({"current_size": 3.0, "age": 35, "projection_months": 12, "figo_type": 9}, "Input: FIGO"),
    ])
    def test_fibroid_failures(self, kwargs, failed):
        validator = InputValidator()
        validator.validate_all(MassType.FIBROID, ClinicalInput(**kwargs))
        with pytest.raises(InvalidInputError) as excinfo:
            validator.raise_for_failures()
        assert failed in [r.name for r in excinfo.value.failures]

    def test_longest_horizon_accepted(self):
        validator = InputValidator()
        case = ClinicalInput(current_size=3.0, age=35, projection_months=InputValidator.MAX_HORIZON_MONTHS)
        results = validator.validate_all(MassType.FIBROID, case)
        by_name = {r.name: r for r in results}
        assert by_name["Input: Projection"].severity == ValidationSeverity.PASS
        validator.raise_for_failures()

    def test_complex_cyst_requires_subtype(self):
        validator = InputValidator()
        validator.validate_all(
            MassType.COMPLEX_CYST,
            ClinicalInput(current_size=3.0, age=35, projection_months=12, cyst_type=""),
        )
        with pytest.raises(InvalidInputError):
            validator.raise_for_failures()

    def test_adenomyosis_volume_or_size(self):
        validator = InputValidator()
        validator.validate_all(MassType.ADENOMYOSIS, ClinicalInput(age=35, projection_months=12))
        with pytest.raises(InvalidInputError):
            validator.raise_for_failures()

    def test_missing_jz_is_warning(self):
        validator = InputValidator()
        validator.validate_all(
            MassType.ADENOMYOSIS, ClinicalInput(age=35, projection_months=12, uterine_volume=150)
        )
        summary = validator.get_summary()
        assert summary["total"] == 4
        assert summary["passed"] == 3
        assert summary["warnings"] == 1
        assert summary["failed"] == 0
        validator.raise_for_failures()

    def test_markers_reported_for_cysts(self):
        validator = InputValidator()
        results = validator.validate_all(
            MassType.SIMPLE_CYST,
            ClinicalInput(current_size=3.0, age=35, projection_months=12, ca125=-5),
        )
        by_name = {r.name: r.severity for r in results}
        assert by_name["Marker: CA125"] == ValidationSeverity.WARNING
        assert by_name["Marker: HE4"] == ValidationSeverity.INFO


class TestGrowthEngine:
    """Test engine dispatch"""

    def test_calculate_dispatches_by_type(self, engine):
        case = ClinicalInput(current_size=3.0, age=35, projection_months=12)
        result = engine.calculate("fibroid", case)
        assert isinstance(result, GrowthResult)
        assert result.mass_type == MassType.FIBROID

    def test_zero_horizon_rejected(self, engine):
        case = ClinicalInput(current_size=3.0, age=35, projection_months=0)
        with pytest.raises(InvalidInputError):
            engine.calculate(MassType.ENDOMETRIOMA, case)

    def test_long_horizon_rejected(self, engine):
        """Horizons past the maximum fail validation before any growth is compounded"""
        case = ClinicalInput(current_size=3.0, age=35, projection_months=10000)
        with pytest.raises(InvalidInputError) as excinfo:
            engine.calculate(MassType.FIBROID, case)
        assert [r.name for r in excinfo.value.failures] == ["Input: Projection"]

    def test_evaluate_long_horizon(self, engine):
        case = ClinicalInput(current_size=3.0, age=35, projection_months=10000)
        outcome = engine.evaluate(MassType.ADENOMYOSIS, case)
        assert outcome.success is False
        assert "Projection period must not exceed 240 months" in outcome.errors

    def test_null_mode_defaults_to_deterministic(self, engine):
        case = ClinicalInput(current_size=3.0, age=35, projection_months=12, calculation_mode=None)
        assert case.calculation_mode == CalculationMode.DETERMINISTIC
        expected = engine.calculate(MassType.FIBROID, ClinicalInput(current_size=3.0, age=35, projection_months=12))
        assert engine.calculate(MassType.FIBROID, case) == expected

    @pytest.mark.parametrize("status", [None, ""])
    def test_blank_menopausal_status_with_markers(self, engine, status):
        case = ClinicalInput(
            current_size=3.0, age=35, projection_months=12,
            menopausal_status=status, ca125=40, he4=60,
        )
        result = engine.calculate(MassType.SIMPLE_CYST, case)
        premenopausal = engine.calculate(
            MassType.SIMPLE_CYST,
            ClinicalInput(current_size=3.0, age=35, projection_months=12,
                          menopausal_status="pre", ca125=40, he4=60),
        )
        assert result.roma_score is not None
        assert result.roma_score == premenopausal.roma_score

    def test_deterministic_is_repeatable(self, engine):
        case = ClinicalInput(current_size=5.0, age=42, projection_months=18, cyst_type="mucinous")
        assert engine.calculate(MassType.COMPLEX_CYST, case) == engine.calculate(MassType.COMPLEX_CYST, case)

    def test_evaluate_success(self, engine):
        case = ClinicalInput(current_size=3.0, age=35, projection_months=12)
        outcome = engine.evaluate(MassType.FIBROID, case)
        assert outcome.success is True
        assert outcome.errors == []

    def test_evaluate_invalid_input(self, engine):
        case = ClinicalInput(current_size=3.0, projection_months=12)
        outcome = engine.evaluate(MassType.FIBROID, case)
        assert outcome.success is False
        assert outcome.result is None
        assert "Please enter a valid age" in outcome.errors

    def test_evaluate_unknown_mass_type(self, engine):
        case = ClinicalInput(current_size=3.0, age=35, projection_months=12)
        outcome = engine.evaluate("polyp", case)
        assert outcome.success is False
        assert "polyp" in outcome.errors[0]

    def test_adenomyosis_without_jz(self, engine):
        case = ClinicalInput(age=38, projection_months=12, adenomyosis_type="diffuse", uterine_volume=180)
        result = engine.calculate(MassType.ADENOMYOSIS, case)
        assert result.final_jz_thickness == pytest.approx(16 * 1.18)


class TestMultiHorizon:
    """Test trajectory projection"""

    def test_default_horizons(self, engine):
        case = ClinicalInput(current_size=3.0, age=35, projection_months=12)
        trajectory = engine.project_multi_horizon(MassType.FIBROID, case)
        assert [h.months for h in trajectory] == [3, 6, 12, 24, 36]
        sizes = [h.final_size for h in trajectory]
        assert sizes == sorted(sizes)

    def test_horizon_matches_single_calculation(self, engine):
        case = ClinicalInput(current_size=4.0, age=30, projection_months=12)
        trajectory = engine.project_multi_horizon(MassType.ENDOMETRIOMA, case, horizons=[12])
        single = engine.calculate(MassType.ENDOMETRIOMA, case)
        assert trajectory[0].final_size == single.final_size
        assert trajectory[0].behavior == single.behavior

    def test_case_not_mutated(self, engine):
        case = ClinicalInput(current_size=3.0, age=35, projection_months=12)
        engine.project_multi_horizon(MassType.FIBROID, case)
        assert case.projection_months == 12

    def test_probabilistic_draws_per_horizon(self):
        source = SequenceRandomSource([0.6])
        engine = GrowthEngine(random_source=source)
        case = ClinicalInput(
            current_size=4.0, age=30, projection_months=12,
            calculation_mode=CalculationMode.PROBABILISTIC,
        )
        trajectory = engine.project_multi_horizon(MassType.ENDOMETRIOMA, case)
        assert source.draws == 5
        assert all(h.total_growth == 0 for h in trajectory)

    def test_projection_frame(self, engine):
        case = ClinicalInput(current_size=3.0, age=35, projection_months=12)
        df = engine.projection_frame(MassType.FIBROID, case)
        assert isinstance(df, pd.DataFrame)
        assert df.index.name == "months"
        assert list(df.index) == [3, 6, 12, 24, 36]
        assert "final_size" in df.columns
        assert (df["final_size"] > 0).all()


class TestConvenienceFunctions:
    """Test module-level helpers"""

    def test_quick_calculate(self):
        result = quick_calculate(MassType.FIBROID, current_size=3.0, age=35)
        assert result.final_size == pytest.approx(3.447, abs=0.01)

    def test_quick_calculate_kwargs(self):
        result = quick_calculate("complex-cyst", current_size=3.0, age=30, cyst_type="dermoid")
        assert result.final_size == pytest.approx(3.18)

    def test_calculate_and_project(self):
        case = ClinicalInput(current_size=2.0, age=30, projection_months=12)
        assert calculate(MassType.SIMPLE_CYST, case).final_size == 0
        assert len(project_multi_horizon(MassType.SIMPLE_CYST, case)) == 5

    def test_create_engine(self):
        assert isinstance(create_engine(), GrowthEngine)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
