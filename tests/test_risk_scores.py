"""
Malignancy Risk Scores - Unit Tests
===================================
ROMA, RMI and IOTA Simple Rules.
"""

import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from massgrowth.config import MenopausalStatus, RiskCategory, IOTAClassification
from massgrowth.models import IOTAFeatures, RMIFeatures
from massgrowth.risk_scores import roma_score, rmi_score, iota_simple_rules


class TestROMA:
    """Test Risk of Ovarian Malignancy Algorithm"""

    def test_premenopausal_low(self):
        """Low HE4 stays under the 7.4% cutoff"""
        result = roma_score(ca125=35, he4=40, menopausal_status=MenopausalStatus.PRE)
        assert result is not None
        assert result.score < 7.4
        assert result.risk_category == RiskCategory.LOW
        assert result.cutoff == 7.4

    def test_premenopausal_high(self):
        """High HE4 crosses the premenopausal cutoff"""
        result = roma_score(ca125=35, he4=150, menopausal_status="pre")
        assert result.score > 50
        assert result.risk_category == RiskCategory.HIGH
        assert "gynecologic oncologist" in result.interpretation

    def test_postmenopausal_uses_post_cutoff(self):
        """Postmenopausal score compared against 25.3%"""
        result = roma_score(ca125=35, he4=40, menopausal_status=MenopausalStatus.POST)
        assert result.cutoff == 25.3
        assert result.risk_category == RiskCategory.LOW
        assert result.sensitivity == "94.4%"

    def test_perimenopausal_uses_post_coefficients(self):
        """Perimenopausal women are scored like postmenopausal women"""
        peri = roma_score(ca125=80, he4=90, menopausal_status=MenopausalStatus.PERI)
        post = roma_score(ca125=80, he4=90, menopausal_status=MenopausalStatus.POST)
        assert peri.predictive_index == post.predictive_index
        assert peri.score == post.score

    def test_rounding(self):
        """Score to 1 dp, predictive index to 3 dp"""
        result = roma_score(ca125=35, he4=40, menopausal_status=MenopausalStatus.PRE)
        assert result.score == round(result.score, 1)
        assert result.predictive_index == round(result.predictive_index, 3)

    @pytest.mark.parametrize("ca125,he4", [
        (None, 50),
        (35, None),
        (float("nan"), 50),
        (35, 0),
        (-1, 50),
    ])
    def test_missing_markers(self, ca125, he4):
        """Missing, NaN or non-positive markers give no score"""
        assert roma_score(ca125, he4, MenopausalStatus.PRE) is None


class TestRMI:
    """Test Risk of Malignancy Index"""

    def test_bilateral_ascites_postmenopausal(self):
        """Two features, postmenopausal, CA-125 50: 3 x 3 x 50 = 450"""
        features = RMIFeatures(bilateral=True, ascites=True)
        result = rmi_score(features, MenopausalStatus.POST, ca125=50)
        assert result.u_score == 2
        assert result.u_value == 3
        assert result.m_value == 3
        assert result.score == 450
        assert result.display_score == 450
        assert result.risk_category == RiskCategory.HIGH

    def test_no_features_scores_zero(self):
        """No ultrasound features gives U = 0"""
        result = rmi_score(RMIFeatures(), MenopausalStatus.PRE, ca125=100)
        assert result.u_value == 0
        assert result.score == 0
        assert result.risk_category == RiskCategory.LOW

    def test_single_feature_intermediate(self):
        """One feature, premenopausal: score equals CA-125"""
        result = rmi_score(RMIFeatures(multilocular=True), MenopausalStatus.PRE, ca125=220)
        assert result.u_value == 1
        assert result.m_value == 1
        assert result.score == 220
        assert result.risk_category == RiskCategory.INTERMEDIATE

    def test_perimenopausal_m_value(self):
        """Only postmenopausal status scores M = 3"""
        result = rmi_score(RMIFeatures(solid_areas=True), MenopausalStatus.PERI, ca125=30)
        assert result.m_value == 1

    def test_missing_ca125(self):
        """RMI needs CA-125"""
        assert rmi_score(RMIFeatures(bilateral=True), MenopausalStatus.POST, None) is None
        assert rmi_score(RMIFeatures(bilateral=True), MenopausalStatus.POST, 0) is None


class TestIOTA:
    """Test IOTA Simple Rules"""

    def test_unilocular_is_benign(self):
        """B-features only: benign"""
        result = iota_simple_rules(IOTAFeatures(unilocular=True))
        assert result.classification == IOTAClassification.BENIGN
        assert result.risk_level == RiskCategory.LOW
        assert result.b_features["B1"] is True
        assert result.b_count == 1

    def test_m_features_only_malignant(self):
        """M-features only: malignant"""
        result = iota_simple_rules(IOTAFeatures(ascites=True, high_blood_flow=True))
        assert result.classification == IOTAClassification.MALIGNANT
        assert result.m_count == 2
        assert result.recommendation == "Refer to gynecologic oncologist"

    def test_mixed_features_inconclusive(self):
        """Both B and M features: inconclusive"""
        result = iota_simple_rules(IOTAFeatures(unilocular=True, ascites=True))
        assert result.classification == IOTAClassification.INCONCLUSIVE

    def test_no_features_inconclusive(self):
        """No features at all: inconclusive"""
        result = iota_simple_rules(IOTAFeatures())
        assert result.classification == IOTAClassification.INCONCLUSIVE
        assert result.b_count == 0 and result.m_count == 0

    def test_solid_component_size_threshold(self):
        """B2 needs a solid component under 7 mm"""
        small = iota_simple_rules(IOTAFeatures(solid_component=True, solid_component_size=5))
        large = iota_simple_rules(IOTAFeatures(solid_component=True, solid_component_size=9))
        assert small.b_features["B2"] is True
        assert large.b_features["B2"] is False

    def test_papillary_and_size_thresholds(self):
        """M3 needs 4+ papillary projections, M4 a tumor of 10 cm or more"""
        result = iota_simple_rules(IOTAFeatures(
            papillary_projections=4,
            irregular_multilocular_solid=True,
            size=10,
        ))
        assert result.m_features["M3"] is True
        assert result.m_features["M4"] is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
