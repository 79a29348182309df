"""
Clinical Reporting - Unit Tests
===============================
Recommendations, warnings, patient summaries and references.
"""

import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from massgrowth.config import MassType
from massgrowth.models import ClinicalInput
from massgrowth.engine import GrowthEngine
from massgrowth.reporting import (
    SUMMARY_FILLER,
    ClinicalRecommendations,
    explain_result,
    generate_clinical_recommendations,
    generate_clinical_summary,
    generate_recommendations,
    generate_warnings,
    get_references,
)


@pytest.fixture(scope="module")
def engine():
    return GrowthEngine()


@pytest.fixture
def fibroid_case():
    return ClinicalInput(
        current_size=3.0,
        age=30,
        projection_months=36,
        fibroid_count="4+",
        previous_myomectomy="laparoscopic",
        race="african-american",
    )


class TestClinicalSummary:
    """Test patient-facing key takeaways"""

    def test_fibroid_summary(self, engine, fibroid_case):
        result = engine.calculate(MassType.FIBROID, fibroid_case)
        summary = generate_clinical_summary(MassType.FIBROID, fibroid_case, result)
        assert len(summary) == 3
        assert summary[0].startswith("• Multiple fibroids")
        assert summary[1].startswith("• Post-surgical recurrence")
        assert summary[2].startswith("• African American")

    def test_padded_to_three(self, engine):
        case = ClinicalInput(current_size=2.0, age=30, projection_months=12)
        result = engine.calculate(MassType.SIMPLE_CYST, case)
        summary = generate_clinical_summary(MassType.SIMPLE_CYST, case, result)
        assert len(summary) == 3
        assert summary[0].startswith("• 70-80% of functional cysts")
        assert summary[1] == "• Cysts <3cm typically don't require follow-up per guidelines"
        assert summary[2] == SUMMARY_FILLER

    def test_adenomyosis_focal_outer(self, engine):
        case = ClinicalInput(
            age=35, projection_months=12, adenomyosis_type="focal",
            lesion_location="outer", current_size=6.0,
        )
        result = engine.calculate(MassType.ADENOMYOSIS, case)
        summary = generate_clinical_summary(MassType.ADENOMYOSIS, case, result)
        assert summary == [
            "• Moderate progression risk - regular monitoring recommended",
            "• Untreated adenomyosis shows 30.77% progression - consider hormonal therapy",
            "• Focal outer myometrium involvement - highest progression risk, close monitoring needed",
        ]

    @pytest.mark.parametrize("mass_type,case", [
        (MassType.ENDOMETRIOMA, ClinicalInput(current_size=4.0, age=22, projection_months=12,
                                              previous_surgery="first")),
        (MassType.COMPLEX_CYST, ClinicalInput(current_size=4.0, age=30, projection_months=12,
                                              cyst_type="hemorrhagic", pcos=True)),
    ])
    def test_always_three_bullets(self, engine, mass_type, case):
        result = engine.calculate(mass_type, case)
        summary = generate_clinical_summary(mass_type, case, result)
        assert len(summary) == 3
        assert all(line.startswith("• ") for line in summary)


class TestRecommendationsAndWarnings:
    """Test management recommendations and red flags"""

    def test_fibroid_warnings(self, engine, fibroid_case):
        result = engine.calculate(MassType.FIBROID, fibroid_case)
        warnings = generate_warnings(MassType.FIBROID, fibroid_case, result)
        assert warnings == [
            "≥4 fibroids associated with higher growth rates and recurrence risk",
            "High post-surgical recurrence risk - close monitoring required",
        ]

    def test_fibroid_recommendations(self, engine, fibroid_case):
        result = engine.calculate(MassType.FIBROID, fibroid_case)
        recs = generate_recommendations(MassType.FIBROID, fibroid_case, result)
        assert "High recurrence risk - consider long-term medical management" in recs
        assert any(r.startswith("African American") for r in recs)

    def test_simple_cyst_pcos(self, engine):
        case = ClinicalInput(current_size=4.0, age=28, projection_months=12, pcos=True)
        result = engine.calculate(MassType.SIMPLE_CYST, case)
        recs = generate_recommendations(MassType.SIMPLE_CYST, case, result)
        assert recs[0] == "Follow-up ultrasound in 6-12 months to confirm resolution"
        assert "Consider hormonal therapy to suppress functional cyst formation in PCOS" in recs

    def test_young_endometrioma_warning(self, engine):
        case = ClinicalInput(current_size=3.0, age=19, projection_months=12)
        result = engine.calculate(MassType.ENDOMETRIOMA, case)
        warnings = generate_warnings(MassType.ENDOMETRIOMA, case, result)
        assert any("Adolescent" in w for w in warnings)

    def test_no_warnings_for_quiet_case(self, engine):
        case = ClinicalInput(current_size=3.0, age=35, projection_months=12)
        result = engine.calculate(MassType.FIBROID, case)
        assert generate_warnings(MassType.FIBROID, case, result) == []


class TestClinicalRecommendations:
    """Test size thresholds, subtype notes and follow-up"""

    def test_large_dermoid(self, engine):
        case = ClinicalInput(current_size=7.0, age=30, projection_months=12, cyst_type="dermoid")
        result = engine.calculate(MassType.COMPLEX_CYST, case)
        out = generate_clinical_recommendations(MassType.COMPLEX_CYST, case, result)
        assert isinstance(out, ClinicalRecommendations)
        assert out.recommendations[0] == "Size ≥7cm: Routine follow-up recommended for all patients"
        assert "Consider surgery for large dermoids due to torsion risk" in out.recommendations
        assert out.recommendations[-1] == "Close monitoring: follow-up every 2-3 months"
        assert out.risk_stratification == ["IOTA Score: 2 (Low risk)", "O-RADS Category: O-RADS 3"]
        assert out.warnings == []

    def test_surgical_threshold(self, engine):
        case = ClinicalInput(current_size=11.0, age=42, projection_months=12)
        result = engine.calculate(MassType.FIBROID, case)
        out = generate_clinical_recommendations(MassType.FIBROID, case, result)
        assert "Size ≥10cm: Surgical consideration threshold reached" in out.warnings

    def test_endometrioma_recurrence_line(self, engine):
        case = ClinicalInput(current_size=3.0, age=30, projection_months=24, previous_surgery="first")
        result = engine.calculate(MassType.ENDOMETRIOMA, case)
        out = generate_clinical_recommendations(MassType.ENDOMETRIOMA, case, result)
        assert "Recurrence risk: 29.0% at 24 months" in out.recommendations
        assert "Long-term continuous OC reduces recurrence by 90%" in out.recommendations
        assert out.recommendations[-1] == "Standard follow-up: 3-6 months initially, then annually if stable"
        assert out.risk_stratification == []

    def test_measurement_variability(self, engine):
        case = ClinicalInput(current_size=4.0, age=60, projection_months=12, menopausal_status="post")
        result = engine.calculate(MassType.SIMPLE_CYST, case)
        out = generate_clinical_recommendations(MassType.SIMPLE_CYST, case, result)
        assert "Measurement variability: ±0.74cm" in out.recommendations
        assert "Change is within measurement variability - may not represent true growth" in out.recommendations


class TestReferences:
    """Test citation selection"""

    def test_fibroid_references(self, engine, fibroid_case):
        result = engine.calculate(MassType.FIBROID, fibroid_case)
        refs = get_references(MassType.FIBROID, fibroid_case, result, engine.evidence)
        assert [r.pmid for r in refs] == ["23674421", "26196297", "12516827"]
        assert refs[2].format().startswith("PMID 12516827: Marshall LM")

    def test_complex_cyst_with_markers(self, engine):
        case = ClinicalInput(current_size=4.0, age=55, projection_months=12, cyst_type="dermoid",
                             ca125=40, he4=60, menopausal_status="post")
        result = engine.calculate(MassType.COMPLEX_CYST, case)
        keys = [r.key for r in get_references(MassType.COMPLEX_CYST, case, result, engine.evidence)]
        assert keys == [
            "complex_cyst.dermoid", "complex_cyst.orads",
            "malignancy_risk.roma", "malignancy_risk.rmi",
        ]

    def test_diffuse_adenomyosis(self, engine):
        case = ClinicalInput(age=40, projection_months=12, adenomyosis_type="diffuse", uterine_volume=160)
        result = engine.calculate(MassType.ADENOMYOSIS, case)
        keys = [r.key for r in get_references(MassType.ADENOMYOSIS, case, result, engine.evidence)]
        assert "adenomyosis.jz_thickness" in keys


class TestExplainResult:
    """Test text report"""

    def test_fibroid_report(self, engine):
        case = ClinicalInput(current_size=3.0, age=35, projection_months=12)
        result = engine.calculate(MassType.FIBROID, case)
        report = explain_result(MassType.FIBROID, case, result, engine.evidence)
        assert report.startswith("UTERINE FIBROID GROWTH PROJECTION")
        assert "KEY TAKEAWAYS:" in report
        assert "FIGO: Type 4" in report
        assert "EVIDENCE:" in report

    def test_cystadenoma_rate_reported(self, engine):
        case = ClinicalInput(current_size=4.0, age=60, projection_months=24,
                             menopausal_status="post", cystadenoma_type="serous")
        result = engine.calculate(MassType.SIMPLE_CYST, case)
        report = explain_result(MassType.SIMPLE_CYST, case, result, engine.evidence)
        assert "Projected size at 24 months: 4.00 cm" in report
        assert "Cystadenoma literature growth rate: 0.51 cm/year" in report

    def test_adenomyosis_report_uses_volume(self, engine):
        case = ClinicalInput(age=40, projection_months=12, uterine_volume=160)
        result = engine.calculate(MassType.ADENOMYOSIS, case)
        report = explain_result(MassType.ADENOMYOSIS, case, result, engine.evidence)
        assert "Projected uterine volume" in report
        assert "Progression" in report


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
