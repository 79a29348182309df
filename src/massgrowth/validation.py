"""
Mass Growth Estimator - Input Validation
========================================
Chain-of-Verification for clinical inputs before a calculation runs.

Each check appends a ``ValidationResult``; any FAIL result stops the
calculation with ``InvalidInputError``. Warnings (e.g. a defaulted
junctional-zone thickness) are logged and the calculation proceeds.
"""

import logging
from typing import Dict, List, Optional
from dataclasses import dataclass
from enum import Enum

from .config import MassType
from .models import ClinicalInput, has_value

logger = logging.getLogger(__name__)


class ValidationSeverity(Enum):
    PASS = "✅ PASS"
    WARNING = "⚠️ WARNING"
    FAIL = "❌ FAIL"
    INFO = "ℹ️ INFO"


@dataclass
class ValidationResult:
    name: str
    severity: ValidationSeverity
    message: str
    expected: Optional[str] = None
    actual: Optional[str] = None


class InvalidInputError(ValueError):
    """Raised when a required input is missing, NaN or out of range."""

    def __init__(self, failures: List[ValidationResult]):
        self.failures = failures
        detail = "; ".join(f"{r.name}: {r.message}" for r in failures)
        super().__init__(f"Invalid clinical input - {detail}")


class InputValidator:
    """Chain-of-Verification for a single clinical case"""

    MIN_AGE = 1
    MAX_AGE = 120
    MAX_HORIZON_MONTHS = 240
    FIGO_TYPES = range(0, 9)

    def __init__(self, default_jz_thickness_mm: float = 16.0):
        self.default_jz_thickness_mm = default_jz_thickness_mm
        self.results: List[ValidationResult] = []

    def validate_all(self, mass_type: MassType, case: ClinicalInput) -> List[ValidationResult]:
        self.results = []
        self._validate_age(case)
        self._validate_horizon(case)
        self._validate_size(mass_type, case)

        if mass_type == MassType.FIBROID:
            self._validate_figo(case)
        elif mass_type == MassType.COMPLEX_CYST:
            self._validate_cyst_type(case)
        elif mass_type == MassType.ADENOMYOSIS:
            self._validate_jz(case)

        if mass_type in (MassType.SIMPLE_CYST, MassType.COMPLEX_CYST):
            self._validate_markers(case)

        return self.results

    def raise_for_failures(self):
        failures = [r for r in self.results if r.severity == ValidationSeverity.FAIL]
        if failures:
            raise InvalidInputError(failures)
        for r in self.results:
            if r.severity == ValidationSeverity.WARNING:
                logger.warning(f"{r.name}: {r.message}")

    def _validate_age(self, case: ClinicalInput):
        ok = has_value(case.age) and self.MIN_AGE <= case.age <= self.MAX_AGE
        self.results.append(ValidationResult(
            name="Input: Age",
            severity=ValidationSeverity.PASS if ok else ValidationSeverity.FAIL,
            message=f"Age {case.age}" if ok else "Please enter a valid age",
            expected=f"{self.MIN_AGE}-{self.MAX_AGE}",
            actual=str(case.age)
        ))

    def _validate_horizon(self, case: ClinicalInput):
        months = case.projection_months
        if not has_value(months) or months <= 0:
            ok, message = False, "Projection period must be greater than 0 months"
        elif months > self.MAX_HORIZON_MONTHS:
            ok, message = False, f"Projection period must not exceed {self.MAX_HORIZON_MONTHS} months"
        else:
            ok, message = True, f"{months} months"
        self.results.append(ValidationResult(
            name="Input: Projection",
            severity=ValidationSeverity.PASS if ok else ValidationSeverity.FAIL,
            message=message,
            expected=f"> 0, <= {self.MAX_HORIZON_MONTHS}",
            actual=str(case.projection_months)
        ))

    def _validate_size(self, mass_type: MassType, case: ClinicalInput):
        size_ok = has_value(case.current_size) and case.current_size > 0

        if mass_type == MassType.ADENOMYOSIS:
            volume_ok = has_value(case.uterine_volume) and case.uterine_volume > 0
            if volume_ok:
                message = f"Uterine volume {case.uterine_volume} mL"
            elif size_ok:
                message = f"No uterine volume, using size {case.current_size} cm"
            else:
                message = "Please enter a valid uterine volume or size"
            self.results.append(ValidationResult(
                name="Input: Volume",
                severity=ValidationSeverity.PASS if (volume_ok or size_ok) else ValidationSeverity.FAIL,
                message=message,
                expected="uterine_volume > 0 or current_size > 0",
                actual=f"{case.uterine_volume} mL / {case.current_size} cm"
            ))
            return

        self.results.append(ValidationResult(
            name="Input: Size",
            severity=ValidationSeverity.PASS if size_ok else ValidationSeverity.FAIL,
            message=f"{case.current_size} cm" if size_ok else "Please enter a valid size",
            expected="> 0 cm",
            actual=str(case.current_size)
        ))

    def _validate_figo(self, case: ClinicalInput):
        if case.figo_type is None:
            self.results.append(ValidationResult(
                name="Input: FIGO",
                severity=ValidationSeverity.INFO,
                message="FIGO type not given, inferred from location"
            ))
            return
        ok = case.figo_type in self.FIGO_TYPES
        self.results.append(ValidationResult(
            name="Input: FIGO",
            severity=ValidationSeverity.PASS if ok else ValidationSeverity.FAIL,
            message=f"Type {case.figo_type}" if ok else "FIGO type must be between 0 and 8",
            expected="0-8",
            actual=str(case.figo_type)
        ))

    def _validate_cyst_type(self, case: ClinicalInput):
        ok = case.cyst_type is not None
        self.results.append(ValidationResult(
            name="Input: Cyst type",
            severity=ValidationSeverity.PASS if ok else ValidationSeverity.FAIL,
            message=case.cyst_type.value if ok else "Please select the complex cyst subtype"
        ))

    def _validate_jz(self, case: ClinicalInput):
        if has_value(case.jz_thickness) and case.jz_thickness > 0:
            self.results.append(ValidationResult(
                name="Input: JZ thickness",
                severity=ValidationSeverity.PASS,
                message=f"{case.jz_thickness} mm"
            ))
        else:
            self.results.append(ValidationResult(
                name="Input: JZ thickness",
                severity=ValidationSeverity.WARNING,
                message=f"JZ thickness not provided, assuming {self.default_jz_thickness_mm:g} mm",
                expected="> 0 mm"
            ))

    def _validate_markers(self, case: ClinicalInput):
        for marker in ("ca125", "he4"):
            value = getattr(case, marker)
            if not has_value(value):
                self.results.append(ValidationResult(
                    name=f"Marker: {marker.upper()}",
                    severity=ValidationSeverity.INFO,
                    message="Not provided, dependent score skipped"
                ))
            elif value <= 0:
                self.results.append(ValidationResult(
                    name=f"Marker: {marker.upper()}",
                    severity=ValidationSeverity.WARNING,
                    message=f"Non-positive value {value} ignored",
                    expected="> 0",
                    actual=str(value)
                ))

    def get_summary(self) -> Dict:
        return {
            "total": len(self.results),
            "passed": sum(1 for r in self.results if r.severity == ValidationSeverity.PASS),
            "warnings": sum(1 for r in self.results if r.severity == ValidationSeverity.WARNING),
            "failed": sum(1 for r in self.results if r.severity == ValidationSeverity.FAIL),
            "info": sum(1 for r in self.results if r.severity == ValidationSeverity.INFO),
        }
