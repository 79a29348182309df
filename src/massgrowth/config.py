"""
Mass Growth Estimator - Configuration & Domain Types
====================================================

This module defines the core domain types for the benign gynecologic mass
growth estimator. All coefficients are transcribed from published clinical
literature (see evidence_base.yaml for the citations):

- Endometrioma natural history and post-surgical recurrence
- Leiomyoma (fibroid) volume growth dynamics
- Simple and complex adnexal cyst resolution rates
- Adenomyosis progression by phenotype (diffuse vs focal)

Categorical inputs are ``str``-valued enums so that raw form values
("cyclic-ocp", "african-american", ...) can be passed straight through.

Each mass type has a dataclass of modifier tables that can be adjusted
by the caller; ``DEFAULT_CONFIG`` holds the literature values.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Dict, List, Tuple
import logging
import yaml
from pathlib import Path

logger = logging.getLogger(__name__)


# =============================================================================
# MASS TYPES & MODES
# =============================================================================

class MassType(str, Enum):
    """Benign gynecologic mass types with a dedicated growth calculator."""
    ENDOMETRIOMA = "endometrioma"
    FIBROID = "fibroid"
    SIMPLE_CYST = "simple-cyst"
    COMPLEX_CYST = "complex-cyst"
    ADENOMYOSIS = "adenomyosis"

    @property
    def display_name(self) -> str:
        """Human-readable name for reports."""
        return MASS_TYPE_NAMES[self]


MASS_TYPE_NAMES: Dict[MassType, str] = {
    MassType.ENDOMETRIOMA: "Endometrioma",
    MassType.FIBROID: "Uterine Fibroid",
    MassType.SIMPLE_CYST: "Ovarian Simple Cyst",
    MassType.COMPLEX_CYST: "Ovarian Complex Cyst",
    MassType.ADENOMYOSIS: "Adenomyosis",
}


class CalculationMode(str, Enum):
    """
    How literature ranges are turned into a single projection.

    - DETERMINISTIC: literature medians, same input gives the same output
    - PROBABILISTIC: uniform draws from literature ranges (no seed)
    """
    DETERMINISTIC = "deterministic"
    PROBABILISTIC = "probabilistic"

    @classmethod
    def _missing_(cls, value):
        if value in ("", None):
            return cls.DETERMINISTIC
        return None


class MenopausalStatus(str, Enum):
    PRE = "pre"
    PERI = "peri"
    POST = "post"

    @classmethod
    def _missing_(cls, value):
        if value in ("", None):
            return cls.PRE
        return None


# =============================================================================
# TREATMENT & HISTORY
# =============================================================================

class Treatment(str, Enum):
    """
    Treatment regimens across all mass types.

    Not every regimen applies to every mass type; a regimen with no
    evidence for a given mass type leaves its growth unchanged.
    """
    NONE = "none"
    OCP = "ocp"
    CYCLIC_OCP = "cyclic-ocp"
    CONTINUOUS_OCP = "continuous-ocp"
    GNRH = "gnrh"
    DIENOGEST = "dienogest"
    PROGESTIN = "progestin"
    ULIPRISTAL = "ulipristal"
    HRT = "hrt"
    UAE = "uae"    # Uterine artery embolization
    HIFU = "hifu"  # High-intensity focused ultrasound
    LNG_IUD = "levonorgestrel-iud"

    @classmethod
    def _missing_(cls, value):
        if value in ("", None):
            return cls.NONE
        return None


class SurgeryHistory(str, Enum):
    """Prior endometrioma surgery (cystectomy) count."""
    NONE = "none"
    FIRST = "first"
    SECOND = "second"

    @classmethod
    def _missing_(cls, value):
        # Legacy form values
        return {"no": cls.NONE, "yes": cls.FIRST, "": cls.NONE}.get(value)


class MyomectomyHistory(str, Enum):
    NONE = "none"
    LAPAROSCOPIC = "laparoscopic"
    OPEN = "open"

    @classmethod
    def _missing_(cls, value):
        return {"no": cls.NONE, "": cls.NONE}.get(value)


class Race(str, Enum):
    AFRICAN_AMERICAN = "african-american"
    WHITE = "white"
    OTHER = "other"


# =============================================================================
# FIBROID / CYST / ADENOMYOSIS CLASSIFICATION
# =============================================================================

class FibroidLocation(str, Enum):
    INTRAMURAL = "intramural"
    SUBSEROSAL = "subserosal"
    SUBMUCOSAL = "submucosal"


class FibroidCount(str, Enum):
    SINGLE = "single"
    TWO_TO_THREE = "2-3"
    FOUR_PLUS = "4+"


class CystadenomaType(str, Enum):
    """Histologic subtype for a simple-appearing cyst (None = functional)."""
    SEROUS = "serous"
    MUCINOUS = "mucinous"
    BORDERLINE = "borderline"


class ComplexCystType(str, Enum):
    HEMORRHAGIC = "hemorrhagic"
    DERMOID = "dermoid"
    SEROUS = "serous"
    MUCINOUS = "mucinous"
    SEPTATED = "septated"
    ENDOMETRIOMA = "endometrioma"
    OTHER = "other-complex"


class AdenomyosisType(str, Enum):
    """
    Adenomyosis phenotype.

    - DIFFUSE (88% of cases): widespread infiltration, JZ thickening is the
      primary progression marker
    - FOCAL (12% of cases): localized adenomyoma, location drives prognosis
    """
    DIFFUSE = "diffuse"
    FOCAL = "focal"
    UNSPECIFIED = "unspecified"

    @classmethod
    def _missing_(cls, value):
        if value in ("", None):
            return cls.UNSPECIFIED
        return None


class LesionLocation(str, Enum):
    INNER = "inner"
    OUTER = "outer"
    FUNDAL = "fundal"
    POSTERIOR = "posterior"


class LesionCount(str, Enum):
    ONE = "1"
    TWO = "2"
    THREE = "3"
    MULTIPLE = "multiple"


class Severity(str, Enum):
    """Shared grading for myometrial involvement and symptom burden."""
    NONE = "none"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"

    @classmethod
    def _missing_(cls, value):
        if value in ("", None):
            return cls.NONE
        return None


class RiskCategory(str, Enum):
    LOW = "Low"
    INTERMEDIATE = "Intermediate"
    HIGH = "High"


class IOTAClassification(str, Enum):
    BENIGN = "Benign"
    MALIGNANT = "Malignant"
    INCONCLUSIVE = "Inconclusive"


# =============================================================================
# GROWTH PARAMETERS (per mass type)
# =============================================================================

# Recurrence buckets by projection horizon (months, inclusive upper bound).
# None marks the open-ended last bucket.
RECURRENCE_BUCKETS: Tuple[Optional[int], ...] = (12, 24, 36, 60, None)


@dataclass
class EndometriomaParameters:
    """
    Endometrioma natural history and recurrence.

    Median regression -1.7 mm/year; 47% decrease, 31% stable, 22% increase.
    """
    base_rate_cm_year: float = -0.17

    # Probabilistic pattern draw: cumulative thresholds
    pattern_thresholds: Tuple[float, float] = (0.47, 0.78)
    decrease_range: Tuple[float, float] = (0.017, 0.246)  # cm/year, negated
    increase_range: Tuple[float, float] = (0.017, 0.420)  # cm/year

    # Recurrence risk multipliers (OR/HR from cohort studies)
    recurrence_multipliers: Dict[str, float] = field(default_factory=lambda: {
        "previous_diagnosis": 3.245,
        "size_over_5_5": 2.4,
        "size_over_4": 1.8,
        "deep_endometriosis": 1.7,
        "adenomyosis": 1.3,
        "bilateral": 2.5,
    })

    # Cumulative recurrence (%) per RECURRENCE_BUCKETS
    recurrence_table: Dict[Tuple[str, bool], Tuple[float, ...]] = field(default_factory=lambda: {
        # (surgery history, treated)
        ("first", False): (14.0, 29.0, 49.0, 60.0, 70.0),
        ("first", True): (3.7, 6.7, 11.1, 16.7, 25.0),
        ("second", False): (13.7, 13.7, 21.3, 37.5, 50.0),
        ("second", True): (13.7, 13.7, 21.3, 37.5, 50.0),
    })

    # Treatment effects: growth factor by pattern, recurrence factor
    treatment_effects: Dict[str, Dict[str, float]] = field(default_factory=lambda: {
        "dienogest": {"increase": 0.4, "decrease": 1.5, "recurrence": 0.14},
        "continuous-ocp": {"increase": 0.5, "recurrence": 0.06},
        "cyclic-ocp": {"increase": 0.62},
        "progestin": {"increase": 0.7, "recurrence": 0.2},
    })
    gnrh_rate_cm_year: float = -0.3

    # Li et al. biomarker model (AUC 0.825)
    li_model_multipliers: Dict[str, Tuple[float, float]] = field(default_factory=lambda: {
        # marker: (threshold, multiplier)
        "fsh": (25.0, 0.8),
        "lh": (40.0, 0.85),
        "total_cholesterol": (200.0, 1.2),
        "ldl": (130.0, 1.15),
        "age": (40.0, 0.9),
    })

    measurement_variability_cm: float = 0.74
    ci_fraction: float = 0.3
    recurrence_cap: float = 95.0


@dataclass
class FibroidParameters:
    """Leiomyoma volume growth (SWAN / Fibroid Growth Study)."""

    # Size band → (volume % over period, period months)
    size_band_growth: Dict[str, Tuple[float, float]] = field(default_factory=lambda: {
        "<1": (188.0, 18.0),
        "1-2": (100.0, 18.0),
        "2-5": (49.0, 18.0),
        ">=5": (16.8, 12.0),
    })
    probabilistic_2_5_range: Tuple[float, float] = (9.0, 89.0)

    # Post-myomectomy cumulative recurrence (%) by horizon bucket
    myomectomy_recurrence: Dict[str, Dict[str, float]] = field(default_factory=lambda: {
        "<=12": {"laparoscopic": 11.0, "open": 9.5},
        "<=36": {"laparoscopic": 41.6, "open": 31.0},
        "<=60": {"laparoscopic": 57.3, "open": 52.9},
        "<=96": {"laparoscopic": 76.2, "open": 63.4},
        ">96": {"laparoscopic": 80.0, "open": 80.0},
    })
    residual_growth_percent_year: float = 11.0
    young_recurrence_multiplier: float = 1.3  # age < 35

    multiplicity_multipliers: Dict[str, float] = field(default_factory=lambda: {
        "single": 1.0,
        "2-3": 1.2,
        "4+": 1.5,
    })

    race_multipliers: Dict[str, float] = field(default_factory=lambda: {
        "african-american": 1.5,
        "white": 0.9,
        "other": 1.0,
    })

    location_multipliers: Dict[str, float] = field(default_factory=lambda: {
        "submucosal": 1.2,
        "subserosal": 0.9,
        "intramural": 1.0,
    })

    risk_factor_multipliers: Dict[str, float] = field(default_factory=lambda: {
        "early_menarche": 1.2,
        "nulliparity": 1.3,
        "obesity": 1.4,
        "family_history": 1.25,
    })

    pregnancy_growth: Tuple[float, float] = (122.0, 1.75)   # % over months
    gnrh_growth: Tuple[float, float] = (-50.0, 3.5)         # % over months
    spontaneous_regression_probability: float = 0.07
    spontaneous_regression_percent_month: float = -5.0

    # Procedural treatments: (growth factor, recurrence factor)
    procedure_effects: Dict[str, Tuple[float, float]] = field(default_factory=lambda: {
        "uae": (0.3, 0.7),
        "hifu": (0.5, 0.8),
    })

    growth_spurt_percent_3mo: float = 30.0
    reoperation_risk: float = 12.0
    mean_time_between_surgeries_years: float = 7.9
    ci_fraction: float = 0.25
    measurement_variability_cm: float = 0.5
    recurrence_cap: float = 95.0


@dataclass
class SimpleCystParameters:
    """Functional/simple cyst resolution and cystadenoma growth."""

    # Menopausal status → (resolution %, resolution time months)
    resolution: Dict[str, Tuple[float, float]] = field(default_factory=lambda: {
        "pre": (75.0, 2.5),
        "peri": (55.0, 6.0),
        "post": (32.0, 12.0),
    })

    cystadenoma_rates: Dict[str, float] = field(default_factory=lambda: {
        "serous": 0.51,
        "mucinous": 0.83,
    })
    borderline_range: Tuple[float, float] = (0.3, 0.8)

    # Malignancy risk tiers for postmenopausal women over 50
    malignancy_tiers: Dict[str, float] = field(default_factory=lambda: {
        ">5": 15.0,
        ">3": 8.0,
        "<=3": 3.0,
    })

    measurement_variability_cm: float = 0.74


@dataclass
class ComplexCystParameters:
    """Complex adnexal cyst subtype behavior."""

    # Subtype → annual growth (cm/year) median and probabilistic range
    subtype_growth: Dict[str, Dict[str, float]] = field(default_factory=lambda: {
        "dermoid": {"median": 0.18, "low": 0.05, "high": 0.25},
        "serous": {"median": 0.51, "low": 0.3, "high": 0.8},
        "mucinous": {"median": 0.83, "low": 0.5, "high": 1.2},
        "septated": {"median": 0.3},
        "endometrioma": {"median": -0.017},
        "other-complex": {"median": 0.4},
    })

    resolution: Dict[str, float] = field(default_factory=lambda: {
        "hemorrhagic": 87.5,
        "septated": 38.8,
        "endometrioma": 47.0,
        "other-complex": 15.0,
    })

    baseline_malignancy: Dict[str, float] = field(default_factory=lambda: {
        "septated": 0.1,
        "other-complex": 15.0,
    })

    hemorrhagic_resolution_weeks: float = 6.0
    weeks_per_month: float = 4.33
    endometrioma_pattern_thresholds: Tuple[float, float] = (0.47, 0.78)

    malignancy_cap: float = 50.0
    ci_fraction: float = 0.2


@dataclass
class AdenomyosisParameters:
    """Adenomyosis progression by phenotype."""

    # Type → annual volume growth (fraction), progression %, JZ growth (fraction)
    type_baselines: Dict[str, Tuple[float, float, float]] = field(default_factory=lambda: {
        "diffuse": (0.25, 18.0, 0.18),
        "focal": (0.35, 25.0, 0.10),
        "unspecified": (0.30, 21.3, 0.151),
    })

    # Focal lesion location → (growth, progression)
    location_multipliers: Dict[str, Tuple[float, float]] = field(default_factory=lambda: {
        "outer": (1.8, 2.0),
        "fundal": (1.3, 1.4),
        "posterior": (1.2, 1.3),
        "inner": (0.6, 0.5),
    })

    lesion_count_multipliers: Dict[str, Tuple[float, float]] = field(default_factory=lambda: {
        "multiple": (1.3, 1.4),
        "3": (1.3, 1.4),
        "2": (1.15, 1.2),
        "1": (1.0, 1.0),
    })

    # Treatment → (growth, progression); LNG-IUD is keyed by phenotype
    treatment_multipliers: Dict[str, Tuple[float, float]] = field(default_factory=lambda: {
        "levonorgestrel-iud:diffuse": (0.35, 0.5),
        "levonorgestrel-iud:other": (0.50, 0.6),
        "continuous-ocp": (0.40, 0.6),
        "cyclic-ocp": (0.55, 0.75),
        "progestin": (0.50, 0.65),
    })
    gnrh_override: Tuple[float, float, float] = (-0.30, 0.4, -0.10)  # rate, progression factor, JZ rate
    pregnancy_override: Tuple[float, float] = (-0.074, 0.4)

    involvement_multipliers: Dict[str, Tuple[float, float]] = field(default_factory=lambda: {
        "severe:diffuse": (1.5, 1.8),
        "severe:other": (1.7, 2.0),
        "moderate": (1.25, 1.4),
        "mild": (0.7, 0.6),
    })

    symptom_multipliers: Dict[str, Tuple[float, float]] = field(default_factory=lambda: {
        "severe": (1.35, 1.5),
        "moderate": (1.2, 1.3),
        "mild": (1.05, 1.1),
    })

    risk_factor_multipliers: Dict[str, float] = field(default_factory=lambda: {
        "multiparity": 1.2,
        "previous_uterine_surgery": 1.35,
        "concurrent_endometriosis": 1.25,
        "concurrent_endometriosis_diffuse": 1.1,
        "concurrent_fibroids": 1.2,
    })

    # MUSA feature points (direct then indirect)
    musa_direct_points: Dict[str, int] = field(default_factory=lambda: {
        "myometrial_cysts": 2,
        "hyperechoic_islands": 2,
        "fan_shadowing": 1,
        "echogenic_lines": 2,
        "translesional_vascularity": 2,
        "irregular_jz": 1,
        "interrupted_jz": 1,
    })
    musa_indirect_points: Dict[str, int] = field(default_factory=lambda: {
        "asymmetric_thickening": 1,
        "globular_uterus": 1,
    })

    default_jz_thickness_mm: float = 16.0
    jz_diagnostic_threshold_mm: float = 12.0
    progression_cap: float = 95.0
    ci_fraction: float = 0.25


@dataclass
class GrowthConfig:
    """Master configuration for all growth calculators."""
    endometrioma: EndometriomaParameters = field(default_factory=EndometriomaParameters)
    fibroid: FibroidParameters = field(default_factory=FibroidParameters)
    simple_cyst: SimpleCystParameters = field(default_factory=SimpleCystParameters)
    complex_cyst: ComplexCystParameters = field(default_factory=ComplexCystParameters)
    adenomyosis: AdenomyosisParameters = field(default_factory=AdenomyosisParameters)

    # Multi-horizon trajectory (months)
    projection_horizons: Tuple[int, ...] = (3, 6, 12, 24, 36)


# =============================================================================
# EVIDENCE BASE (citations, FIGO, O-RADS)
# =============================================================================

@dataclass
class Reference:
    """A literature citation backing one or more coefficients."""
    key: str
    pmid: str
    citation: str
    values: str

    def format(self) -> str:
        return f"PMID {self.pmid}: {self.citation} - {self.values}"


@dataclass
class FIGOClass:
    """FIGO PALM-COEIN leiomyoma subclassification (types 0-8)."""
    type: int
    name: str
    description: str
    location: str
    risk_level: str


@dataclass
class ORADSCategory:
    """O-RADS US risk category."""
    category: int
    label: str
    risk: str
    min_malignancy_risk: float  # exclusive lower bound (%)


class EvidenceBase:
    """
    Loader and accessor for literature references and classification tables.

    Loads from evidence_base.yaml and provides typed access to:
    - Source citations per mass type
    - FIGO leiomyoma classification
    - O-RADS categories
    """

    REQUIRED_SECTIONS = ("references", "figo", "orads")

    def __init__(self, yaml_path: Optional[Path] = None):
        """
        Load evidence base from YAML file.

        Args:
            yaml_path: Path to evidence_base.yaml. If None, uses default.
        """
        if yaml_path is None:
            yaml_path = Path(__file__).parent / "evidence_base.yaml"

        with open(yaml_path, 'r') as f:
            self._data = yaml.safe_load(f)

        self.version = self._data.get('metadata', {}).get('version', 'unknown')
        self._references = self._data.get('references', {})
        self._figo = self._data.get('figo', {})
        self._orads = self._data.get('orads', [])

        for section in self.REQUIRED_SECTIONS:
            if not self._data.get(section):
                logger.warning(f"Evidence base section '{section}' missing or empty")

        logger.info(f"Evidence base v{self.version} loaded from {yaml_path}")

    def get_reference(self, group: str, key: str) -> Optional[Reference]:
        """Get a citation, e.g. ``get_reference('fibroid', 'race')``."""
        entry = self._references.get(group, {}).get(key)
        if entry is None:
            return None
        return Reference(
            key=f"{group}.{key}",
            pmid=str(entry.get('pmid', '')),
            citation=entry.get('citation', ''),
            values=entry.get('values', ''),
        )

    def get_figo(self, figo_type: int) -> Optional[FIGOClass]:
        """Get the FIGO class for a type number (0-8)."""
        entry = self._figo.get(int(figo_type))
        if entry is None:
            logger.warning(f"Unknown FIGO type {figo_type}")
            return None
        return FIGOClass(
            type=int(figo_type),
            name=entry['name'],
            description=entry['description'],
            location=entry['location'],
            risk_level=entry['risk_level'],
        )

    def orads_categories(self) -> List[ORADSCategory]:
        """O-RADS categories, highest threshold first."""
        categories = [
            ORADSCategory(
                category=c['category'],
                label=c['label'],
                risk=c['risk'],
                min_malignancy_risk=float(c['min_malignancy_risk']),
            )
            for c in self._orads
        ]
        return sorted(categories, key=lambda c: c.min_malignancy_risk, reverse=True)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def get_recurrence_bucket(months: float) -> int:
    """Index into RECURRENCE_BUCKETS for a projection horizon."""
    for i, upper in enumerate(RECURRENCE_BUCKETS):
        if upper is None or months <= upper:
            return i
    return len(RECURRENCE_BUCKETS) - 1


def get_fibroid_size_band(size_cm: float) -> str:
    """Convert fibroid diameter to growth band"""
    if size_cm < 1:
        return "<1"
    elif size_cm < 2:
        return "1-2"
    elif size_cm < 5:
        return "2-5"
    else:
        return ">=5"


def get_myomectomy_bucket(months: float) -> str:
    """Convert projection horizon to post-myomectomy recurrence bucket"""
    if months <= 12:
        return "<=12"
    elif months <= 36:
        return "<=36"
    elif months <= 60:
        return "<=60"
    elif months <= 96:
        return "<=96"
    else:
        return ">96"


def get_orads_category(malignancy_risk: float, evidence: Optional["EvidenceBase"] = None) -> str:
    """Map a malignancy risk (%) to an O-RADS label."""
    if evidence is not None:
        for category in evidence.orads_categories():
            if malignancy_risk > category.min_malignancy_risk:
                return category.label
    if malignancy_risk > 20:
        return "O-RADS 5"
    elif malignancy_risk > 10:
        return "O-RADS 4"
    elif malignancy_risk > 5:
        return "O-RADS 3"
    return "O-RADS 2"


# Default config instance
DEFAULT_CONFIG = GrowthConfig()
