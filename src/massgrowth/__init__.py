"""
Mass Growth Estimator
=====================
Project growth of benign gynecologic masses from published natural-history data.
"""

from .config import (
    GrowthConfig,
    EvidenceBase,
    MassType,
    CalculationMode,
    MenopausalStatus,
    Treatment,
    RiskCategory,
    DEFAULT_CONFIG,
)

from .models import (
    ClinicalInput,
    GrowthResult,
    HorizonResult,
    IOTAFeatures,
    MUSAFeatures,
    RMIFeatures,
)

from .risk_scores import roma_score, rmi_score, iota_simple_rules
from .random_source import NumpyRandomSource, SequenceRandomSource
from .validation import InvalidInputError

from .engine import (
    GrowthEngine,
    CalculationOutcome,
    create_engine,
    calculate,
    project_multi_horizon,
    quick_calculate,
)

from .reporting import (
    explain_result,
    generate_clinical_summary,
    generate_clinical_recommendations,
    generate_recommendations,
    generate_warnings,
    get_references,
)

__version__ = "1.0.0"
