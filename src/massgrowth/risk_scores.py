"""
Malignancy Risk Scores
======================
Adnexal mass malignancy scoring used alongside the cyst growth models:

- ROMA (Moore et al. 2009): logistic model on HE4 and CA-125
- RMI (Jacobs et al. 1990): ultrasound score x menopausal score x CA-125
- IOTA Simple Rules (Timmerman et al. 2008): B/M feature rules

Each scorer returns ``None`` when the markers it needs are missing, so the
calculators can embed them unconditionally.
"""

import logging
from typing import Optional

import numpy as np

from .config import MenopausalStatus, RiskCategory, IOTAClassification
from .models import (
    ROMAResult, RMIResult, IOTAAssessment, IOTAFeatures, RMIFeatures, has_value
)

logger = logging.getLogger(__name__)


# ROMA coefficients: (intercept, ln HE4, ln CA-125)
ROMA_PREMENOPAUSAL = (-12.0, 2.38, 0.0626)
ROMA_POSTMENOPAUSAL = (-8.09, 1.04, 0.732)

ROMA_CUTOFFS = {"pre": 7.4, "post": 25.3}
ROMA_PERFORMANCE = {"pre": ("92.3%", "76.0%"), "post": ("94.4%", "74.2%")}

ROMA_INTERPRETATION = {
    RiskCategory.HIGH: "Elevated risk of epithelial ovarian cancer - consider referral to gynecologic oncologist",
    RiskCategory.LOW: "Low risk of epithelial ovarian cancer - routine management appropriate",
}

RMI_HIGH = 250
RMI_INTERMEDIATE = 200

RMI_INTERPRETATION = {
    RiskCategory.HIGH: "High risk of malignancy - urgent referral to gynecologic oncologist recommended",
    RiskCategory.INTERMEDIATE: "Intermediate risk - consider specialist consultation and further evaluation",
    RiskCategory.LOW: "Low risk of malignancy - routine management with follow-up imaging appropriate",
}

IOTA_RECOMMENDATION = {
    IOTAClassification.MALIGNANT: "Refer to gynecologic oncologist",
    IOTAClassification.BENIGN: "Conservative management or routine surgery",
    IOTAClassification.INCONCLUSIVE: "Apply subjective assessment or ADNEX model",
}


def _positive(value: Optional[float]) -> bool:
    return has_value(value) and value > 0


def roma_score(
    ca125: Optional[float],
    he4: Optional[float],
    menopausal_status: MenopausalStatus
) -> Optional[ROMAResult]:
    """
    Risk of Ovarian Malignancy Algorithm.

    Premenopausal women use the premenopausal coefficients; every other
    status (peri or post) uses the postmenopausal ones.

    Returns:
        ROMAResult, or None when either marker is missing or non-positive.
    """
    if not (_positive(ca125) and _positive(he4)):
        return None

    status = "pre" if MenopausalStatus(menopausal_status) == MenopausalStatus.PRE else "post"
    intercept, b_he4, b_ca125 = ROMA_PREMENOPAUSAL if status == "pre" else ROMA_POSTMENOPAUSAL

    predictive_index = intercept + b_he4 * np.log(he4) + b_ca125 * np.log(ca125)
    score = np.exp(predictive_index) / (1 + np.exp(predictive_index)) * 100

    cutoff = ROMA_CUTOFFS[status]
    category = RiskCategory.HIGH if score >= cutoff else RiskCategory.LOW
    sensitivity, specificity = ROMA_PERFORMANCE[status]

    logger.debug(f"ROMA {status}: PI={predictive_index:.3f}, score={score:.1f}%")

    return ROMAResult(
        score=round(float(score), 1),
        predictive_index=round(float(predictive_index), 3),
        risk_category=category,
        cutoff=cutoff,
        sensitivity=sensitivity,
        specificity=specificity,
        interpretation=ROMA_INTERPRETATION[category]
    )


def rmi_score(
    features: Optional[RMIFeatures],
    menopausal_status: MenopausalStatus,
    ca125: Optional[float]
) -> Optional[RMIResult]:
    """
    Risk of Malignancy Index: RMI = U x M x CA-125.

    U is 0, 1 or 3 for 0, 1 or 2+ ultrasound features; M is 3 for
    postmenopausal women and 1 otherwise.
    """
    if not _positive(ca125):
        return None

    u_score = features.count() if features is not None else 0
    if u_score == 0:
        u_value = 0
    elif u_score == 1:
        u_value = 1
    else:
        u_value = 3

    m_value = 3 if MenopausalStatus(menopausal_status) == MenopausalStatus.POST else 1
    rmi = u_value * m_value * ca125

    if rmi >= RMI_HIGH:
        category = RiskCategory.HIGH
    elif rmi >= RMI_INTERMEDIATE:
        category = RiskCategory.INTERMEDIATE
    else:
        category = RiskCategory.LOW

    logger.debug(f"RMI: U={u_value} (features={u_score}), M={m_value}, CA-125={ca125} -> {rmi:.0f}")

    return RMIResult(
        score=float(rmi),
        u_score=u_score,
        u_value=u_value,
        m_value=m_value,
        ca125=ca125,
        risk_category=category,
        sensitivity="70-87%",
        specificity="89-97%",
        interpretation=RMI_INTERPRETATION[category]
    )


def iota_simple_rules(features: IOTAFeatures) -> IOTAAssessment:
    """
    IOTA Simple Rules.

    Malignant when only M-features are present, benign when only
    B-features are present, inconclusive otherwise (including none).
    """
    f = features
    b_features = {
        "B1": bool(f.unilocular),
        "B2": bool(f.solid_component and has_value(f.solid_component_size) and f.solid_component_size < 7),
        "B3": bool(f.acoustic_shadows),
        "B4": bool(f.smooth_multilocular and has_value(f.locule_count) and f.locule_count < 10),
        "B5": bool(f.no_blood_flow),
    }
    m_features = {
        "M1": bool(f.irregular_solid_tumor),
        "M2": bool(f.ascites),
        "M3": bool((f.papillary_projections or 0) >= 4),
        "M4": bool(f.irregular_multilocular_solid and has_value(f.size) and f.size >= 10),
        "M5": bool(f.high_blood_flow),
    }

    b_count = sum(b_features.values())
    m_count = sum(m_features.values())

    if m_count > 0 and b_count == 0:
        classification, risk = IOTAClassification.MALIGNANT, RiskCategory.HIGH
    elif b_count > 0 and m_count == 0:
        classification, risk = IOTAClassification.BENIGN, RiskCategory.LOW
    else:
        classification, risk = IOTAClassification.INCONCLUSIVE, RiskCategory.INTERMEDIATE

    return IOTAAssessment(
        b_features=b_features,
        m_features=m_features,
        b_count=b_count,
        m_count=m_count,
        classification=classification,
        risk_level=risk,
        recommendation=IOTA_RECOMMENDATION[classification]
    )
