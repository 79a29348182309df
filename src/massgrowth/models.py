"""
Mass Growth Estimator - Data Models
===================================
Input and output records for the growth calculators.

``ClinicalInput`` is a superset record: each calculator reads the fields
relevant to its mass type and ignores the rest. Categorical fields accept
either the enum member or its string value, and are normalised to the enum
in ``__post_init__``.
"""

from dataclasses import dataclass, field, fields, is_dataclass
from typing import Optional, Dict, Any, Union
from enum import Enum
import math

from .config import (
    MassType, CalculationMode, MenopausalStatus, Treatment, SurgeryHistory,
    MyomectomyHistory, Race, FibroidLocation, FibroidCount, CystadenomaType,
    ComplexCystType, AdenomyosisType, LesionLocation, LesionCount, Severity,
    RiskCategory, IOTAClassification, FIGOClass,
)


# ============================================================
# HELPERS
# ============================================================

def has_value(value: Optional[float]) -> bool:
    """True when an optional numeric input was supplied (None and NaN are absent)."""
    if value is None:
        return False
    try:
        return not math.isnan(value)
    except TypeError:
        return False


def _coerce(enum_cls, value):
    if value is None or isinstance(value, enum_cls):
        return value
    return enum_cls(value)


def _serialise(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value):
        return {f.name: _serialise(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, dict):
        return {k: _serialise(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialise(v) for v in value]
    return value


# ============================================================
# ULTRASOUND FEATURE SETS
# ============================================================

@dataclass
class IOTAFeatures:
    """IOTA Simple Rules ultrasound features (B1-B5, M1-M5)."""
    # Benign features
    unilocular: bool = False
    solid_component: bool = False
    solid_component_size: Optional[float] = None  # mm
    acoustic_shadows: bool = False
    smooth_multilocular: bool = False
    locule_count: Optional[float] = None
    no_blood_flow: bool = False

    # Malignant features
    irregular_solid_tumor: bool = False
    ascites: bool = False
    papillary_projections: int = 0
    irregular_multilocular_solid: bool = False
    size: Optional[float] = None  # cm
    high_blood_flow: bool = False


@dataclass
class MUSAFeatures:
    """MUSA consensus sonographic features of adenomyosis."""
    # Direct
    myometrial_cysts: bool = False
    hyperechoic_islands: bool = False
    fan_shadowing: bool = False
    echogenic_lines: bool = False
    translesional_vascularity: bool = False
    irregular_jz: bool = False
    interrupted_jz: bool = False

    # Indirect
    asymmetric_thickening: bool = False
    globular_uterus: bool = False


@dataclass
class RMIFeatures:
    """Ultrasound findings scored by the Risk of Malignancy Index."""
    multilocular: bool = False
    solid_areas: bool = False
    bilateral: bool = False
    ascites: bool = False
    metastases: bool = False

    def count(self) -> int:
        return sum([
            bool(self.multilocular),
            bool(self.solid_areas),
            bool(self.bilateral),
            bool(self.ascites),
            bool(self.metastases),
        ])


# ============================================================
# INPUT RECORD
# ============================================================

@dataclass
class ClinicalInput:
    """Input case for a growth projection"""
    current_size: Optional[float] = None  # cm
    age: Optional[int] = None
    projection_months: Optional[int] = None
    calculation_mode: CalculationMode = CalculationMode.DETERMINISTIC

    # Shared
    treatment: Treatment = Treatment.NONE
    menopausal_status: MenopausalStatus = MenopausalStatus.PRE
    pregnant: bool = False
    bilateral: bool = False
    pcos: bool = False

    # Endometrioma
    previous_surgery: SurgeryHistory = SurgeryHistory.NONE
    previous_endometriosis_diagnosis: bool = False
    deep_endometriosis: bool = False
    adenomyosis: bool = False
    fsh: Optional[float] = None
    lh: Optional[float] = None
    total_cholesterol: Optional[float] = None
    ldl: Optional[float] = None

    # Fibroid
    race: Race = Race.OTHER
    figo_type: Optional[int] = None
    fibroid_location: FibroidLocation = FibroidLocation.INTRAMURAL
    fibroid_count: FibroidCount = FibroidCount.SINGLE
    previous_myomectomy: MyomectomyHistory = MyomectomyHistory.NONE
    early_menarche: bool = False
    nulliparity: bool = False
    obesity: bool = False
    family_history: bool = False

    # Adnexal cysts
    cystadenoma_type: Optional[CystadenomaType] = None
    cyst_type: Optional[ComplexCystType] = None
    ca125: Optional[float] = None
    he4: Optional[float] = None
    ascites: bool = False
    solid_areas: bool = False
    multilocular: bool = False
    metastases: bool = False
    iota_features: Optional[IOTAFeatures] = None

    # Adenomyosis
    adenomyosis_type: AdenomyosisType = AdenomyosisType.UNSPECIFIED
    lesion_location: Optional[LesionLocation] = None
    lesion_count: LesionCount = LesionCount.ONE
    largest_lesion_size: Optional[float] = None
    uterine_involvement: Severity = Severity.NONE
    symptom_severity: Severity = Severity.NONE
    jz_thickness: Optional[float] = None  # mm
    uterine_volume: Optional[float] = None  # mL
    multiparity: bool = False
    previous_uterine_surgery: bool = False
    concurrent_endometriosis: bool = False
    concurrent_fibroids: bool = False
    musa_features: Optional[MUSAFeatures] = None

    def __post_init__(self):
        """Normalise categorical values given as strings"""
        self.calculation_mode = _coerce(CalculationMode, self.calculation_mode) or CalculationMode.DETERMINISTIC
        self.treatment = _coerce(Treatment, self.treatment) or Treatment.NONE
        self.menopausal_status = _coerce(MenopausalStatus, self.menopausal_status) or MenopausalStatus.PRE
        self.previous_surgery = _coerce(SurgeryHistory, self.previous_surgery) or SurgeryHistory.NONE
        self.race = _coerce(Race, self.race) or Race.OTHER
        self.fibroid_location = _coerce(FibroidLocation, self.fibroid_location)
        self.fibroid_count = _coerce(FibroidCount, self.fibroid_count) or FibroidCount.SINGLE
        self.previous_myomectomy = _coerce(MyomectomyHistory, self.previous_myomectomy) or MyomectomyHistory.NONE
        self.cystadenoma_type = _coerce(CystadenomaType, self.cystadenoma_type or None)
        self.cyst_type = _coerce(ComplexCystType, self.cyst_type or None)
        self.adenomyosis_type = _coerce(AdenomyosisType, self.adenomyosis_type) or AdenomyosisType.UNSPECIFIED
        self.lesion_location = _coerce(LesionLocation, self.lesion_location or None)
        self.lesion_count = _coerce(LesionCount, self.lesion_count) or LesionCount.ONE
        self.uterine_involvement = _coerce(Severity, self.uterine_involvement) or Severity.NONE
        self.symptom_severity = _coerce(Severity, self.symptom_severity) or Severity.NONE
        if self.figo_type == "":
            self.figo_type = None
        elif self.figo_type is not None:
            self.figo_type = int(self.figo_type)

    @property
    def has_surgical_history(self) -> bool:
        return self.previous_surgery != SurgeryHistory.NONE

    @property
    def is_untreated(self) -> bool:
        return self.treatment == Treatment.NONE

    def with_horizon(self, months: int) -> "ClinicalInput":
        """Copy of this case with a different projection horizon."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values["projection_months"] = months
        return ClinicalInput(**values)

    def to_dict(self) -> dict:
        return _serialise(self)


# ============================================================
# RISK SCORE OUTPUTS
# ============================================================

@dataclass(frozen=True)
class ROMAResult:
    """Risk of Ovarian Malignancy Algorithm output"""
    score: float  # %
    predictive_index: float
    risk_category: RiskCategory
    cutoff: float
    sensitivity: str
    specificity: str
    interpretation: str

    def to_dict(self) -> dict:
        return _serialise(self)


@dataclass(frozen=True)
class RMIResult:
    """Risk of Malignancy Index output"""
    score: float
    u_score: int  # raw feature count
    u_value: int
    m_value: int
    ca125: float
    risk_category: RiskCategory
    sensitivity: str
    specificity: str
    interpretation: str

    @property
    def display_score(self) -> int:
        return int(round(self.score))

    def to_dict(self) -> dict:
        return _serialise(self)


@dataclass(frozen=True)
class IOTAAssessment:
    """IOTA Simple Rules classification"""
    b_features: Dict[str, bool]
    m_features: Dict[str, bool]
    b_count: int
    m_count: int
    classification: IOTAClassification
    risk_level: RiskCategory
    recommendation: str
    sensitivity: str = "95%"
    specificity: str = "91%"

    def to_dict(self) -> dict:
        return _serialise(self)


@dataclass(frozen=True)
class MUSAAssessment:
    """Summary of MUSA sonographic features"""
    direct_feature_count: int = 0
    indirect_feature_count: int = 0
    total_score: int = 0
    severity: str = "Minimal"
    has_active_vascularity: bool = False


# ============================================================
# GROWTH OUTPUTS
# ============================================================

@dataclass(frozen=True)
class GrowthResult:
    """Output of a single growth calculation"""
    mass_type: MassType
    projection_months: int

    # Core projection (cm)
    monthly_rate: float
    total_growth: float
    final_size: float
    behavior: str
    growth_velocity_cm_year: float
    confidence_interval: float

    # Probabilities (%)
    resolution_probability: Optional[float] = None
    recurrence_probability: Optional[float] = None
    malignancy_risk: Optional[float] = None
    progression_probability: Optional[float] = None

    risk_factors: Dict[str, bool] = field(default_factory=dict)

    # Embedded assessments
    figo_classification: Optional[FIGOClass] = None
    orads_category: Optional[str] = None
    musa_assessment: Optional[MUSAAssessment] = None
    roma_score: Optional[ROMAResult] = None
    rmi_score: Optional[RMIResult] = None
    iota_assessment: Optional[IOTAAssessment] = None

    # Endometrioma
    growth_pattern: Optional[str] = None
    volume_change: Optional[float] = None  # %
    li_model_multiplier: Optional[float] = None
    li_model_enabled: Optional[bool] = None

    # Fibroid
    volume_growth_percent: Optional[float] = None
    post_surgical_recurrence: Optional[bool] = None
    reoperation_risk: Optional[float] = None
    mean_time_between_surgeries: Optional[float] = None  # years
    multiplicity_factor: Optional[float] = None

    # Cysts
    resolution_time_months: Optional[float] = None
    measurement_variability: Optional[float] = None
    pcos_effect: Optional[str] = None
    cystadenoma_growth_cm_year: Optional[float] = None  # reported, not applied to size
    cyst_subtype: Optional[ComplexCystType] = None

    # Adenomyosis
    final_volume: Optional[float] = None
    jz_thickness_change: Optional[float] = None
    final_jz_thickness: Optional[float] = None
    treatment_response: Optional[str] = None
    growth_mechanism: Optional[str] = None
    clinical_pattern: Optional[str] = None
    type_description: Optional[str] = None
    adenomyosis_type: Optional[AdenomyosisType] = None
    uterine_involvement: Optional[Severity] = None

    @property
    def active_risk_factors(self):
        return [name for name, present in self.risk_factors.items() if present]

    def to_dict(self) -> dict:
        return _serialise(self)


@dataclass(frozen=True)
class HorizonResult:
    """One point of a multi-horizon trajectory"""
    months: int
    final_size: float
    total_growth: float
    growth_velocity_cm_year: float
    behavior: str

    def to_dict(self) -> dict:
        return _serialise(self)


# Union accepted wherever a mass type is named
MassTypeLike = Union[MassType, str]
