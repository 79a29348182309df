"""
Configuration & Models - Unit Tests
===================================
Domain enums, helper bands, evidence base loading and input coercion.
"""

import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from massgrowth.config import (
    MassType, CalculationMode, MenopausalStatus, Treatment, SurgeryHistory, MyomectomyHistory,
    AdenomyosisType, Severity,
    FibroidCount, EvidenceBase, GrowthConfig, DEFAULT_CONFIG,
    get_recurrence_bucket, get_fibroid_size_band, get_myomectomy_bucket, get_orads_category,
)
from massgrowth.models import ClinicalInput, has_value


class TestEnums:
    """Test categorical parsing"""

    def test_display_names(self):
        assert MassType.FIBROID.display_name == "Uterine Fibroid"
        assert MassType("simple-cyst").display_name == "Ovarian Simple Cyst"

    def test_blank_values_default(self):
        assert Treatment("") == Treatment.NONE
        assert AdenomyosisType("") == AdenomyosisType.UNSPECIFIED
        assert Severity("") == Severity.NONE
        assert CalculationMode("") == CalculationMode.DETERMINISTIC
        assert CalculationMode(None) == CalculationMode.DETERMINISTIC
        assert MenopausalStatus("") == MenopausalStatus.PRE
        assert MenopausalStatus(None) == MenopausalStatus.PRE

    def test_legacy_surgery_values(self):
        assert SurgeryHistory("yes") == SurgeryHistory.FIRST
        assert SurgeryHistory("no") == SurgeryHistory.NONE
        assert MyomectomyHistory("no") == MyomectomyHistory.NONE

    def test_unknown_value_rejected(self):
        with pytest.raises(ValueError):
            Treatment("aspirin")


class TestHelpers:
    """Test band and bucket helpers"""

    @pytest.mark.parametrize("months,index", [(3, 0), (12, 0), (13, 1), (24, 1), (36, 2), (60, 3), (61, 4), (240, 4)])
    def test_recurrence_bucket(self, months, index):
        assert get_recurrence_bucket(months) == index

    @pytest.mark.parametrize("size,band", [(0.5, "<1"), (1.0, "1-2"), (2.0, "2-5"), (4.9, "2-5"), (5.0, ">=5")])
    def test_fibroid_size_band(self, size, band):
        assert get_fibroid_size_band(size) == band

    def test_myomectomy_bucket(self):
        assert get_myomectomy_bucket(12) == "<=12"
        assert get_myomectomy_bucket(24) == "<=36"
        assert get_myomectomy_bucket(100) == ">96"

    @pytest.mark.parametrize("risk,label", [(0, "O-RADS 2"), (5, "O-RADS 2"), (5.1, "O-RADS 3"),
                                            (10.5, "O-RADS 4"), (25, "O-RADS 5")])
    def test_orads_category(self, risk, label):
        assert get_orads_category(risk) == label
        assert get_orads_category(risk, EvidenceBase()) == label


class TestEvidenceBase:
    """Test YAML evidence loading"""

    @pytest.fixture(scope="class")
    def evidence(self):
        return EvidenceBase()

    def test_version(self, evidence):
        assert evidence.version == "8.0"

    def test_reference_lookup(self, evidence):
        ref = evidence.get_reference("fibroid", "race")
        assert ref.pmid == "12516827"
        assert ref.key == "fibroid.race"
        assert evidence.get_reference("fibroid", "missing") is None

    def test_figo_table(self, evidence):
        assert evidence.get_figo(0).description == "Pedunculated intracavitary"
        assert evidence.get_figo(8).location == "other"
        assert evidence.get_figo(9) is None

    def test_orads_sorted(self, evidence):
        categories = evidence.orads_categories()
        assert [c.category for c in categories] == [5, 4, 3, 2]

    def test_custom_yaml(self, tmp_path):
        path = tmp_path / "evidence.yaml"
        path.write_text("metadata:\n  version: test\nreferences: {}\n")
        evidence = EvidenceBase(path)
        assert evidence.version == "test"
        assert evidence.orads_categories() == []


class TestConfig:
    """Test parameter defaults"""

    def test_defaults_are_independent(self):
        custom = GrowthConfig()
        custom.fibroid.race_multipliers["white"] = 1.0
        assert DEFAULT_CONFIG.fibroid.race_multipliers["white"] == 0.9

    def test_projection_horizons(self):
        assert DEFAULT_CONFIG.projection_horizons == (3, 6, 12, 24, 36)


class TestClinicalInput:
    """Test input record coercion"""

    def test_string_values_coerced(self):
        case = ClinicalInput(treatment="dienogest", fibroid_count="4+", figo_type="3")
        assert case.treatment == Treatment.DIENOGEST
        assert case.fibroid_count == FibroidCount.FOUR_PLUS
        assert case.figo_type == 3

    def test_blank_optional_values(self):
        case = ClinicalInput(cyst_type="", lesion_location="", figo_type="")
        assert case.cyst_type is None
        assert case.lesion_location is None
        assert case.figo_type is None

    @pytest.mark.parametrize("blank", [None, ""])
    def test_blank_mode_and_status_default(self, blank):
        case = ClinicalInput(calculation_mode=blank, menopausal_status=blank)
        assert case.calculation_mode == CalculationMode.DETERMINISTIC
        assert case.menopausal_status == MenopausalStatus.PRE

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError):
            ClinicalInput(menopausal_status="late")

    def test_with_horizon_copies(self):
        case = ClinicalInput(current_size=3.0, age=35, projection_months=12, pcos=True)
        other = case.with_horizon(24)
        assert other.projection_months == 24
        assert other.pcos is True
        assert case.projection_months == 12

    def test_to_dict(self):
        d = ClinicalInput(treatment="gnrh", race="white").to_dict()
        assert d["treatment"] == "gnrh"
        assert d["race"] == "white"

    def test_has_value(self):
        assert has_value(0.0)
        assert not has_value(None)
        assert not has_value(float("nan"))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
