"""
Adenomyosis Progression Model
=============================
Type-specific uterine volume growth, junctional zone (JZ) thickening and
progression probability.

Diffuse and focal adenomyosis progress through different mechanisms:
- DIFFUSE (88%): widespread infiltration, global uterine enlargement,
  gradual and consistent progression; JZ thickness is the primary marker
- FOCAL (12%): localized adenomyoma; lesions of the OUTER myometrium carry
  the highest progression risk (P=0.037)

Modifier order: type baseline, focal location and lesion count, treatment,
pregnancy, myometrial involvement, symptom severity, risk factors, age,
JZ thickness, MUSA features.

Sources: PMID 38738458 (21.3% progression at 12 months), PMID 34196202
(type distribution), PMID 30850322 (MUSA consensus), PMID 25681495 (JZ).
"""

import logging
from typing import Tuple

import numpy as np

from .config import (
    MassType, AdenomyosisType, LesionLocation, Severity, Treatment,
)
from .models import ClinicalInput, GrowthResult, MUSAAssessment, MUSAFeatures, has_value
from .growth_model import GrowthCalculator, sphere_volume, sphere_diameter, clamp

logger = logging.getLogger(__name__)


TYPE_PATTERNS = {
    AdenomyosisType.DIFFUSE: (
        "Widespread infiltration with global uterine enlargement",
        "Consistent gradual progression",
    ),
    AdenomyosisType.FOCAL: (
        "Localized adenomyoma with variable expansion",
        "Variable progression based on location",
    ),
    AdenomyosisType.UNSPECIFIED: (
        "Unspecified adenomyosis type",
        "Variable - specify type for accurate prediction",
    ),
}

LOCATION_PATTERNS = {
    LesionLocation.OUTER: (
        "Outer myometrial focal lesion - HIGH progression risk",
        "Aggressive expansion likely",
    ),
    LesionLocation.INNER: (
        "Inner myometrial focal lesion - lower progression risk",
        "Stable or slow progression expected",
    ),
}

TYPE_DESCRIPTIONS = {
    AdenomyosisType.DIFFUSE: (
        "Diffuse adenomyosis (88% of cases): Widespread infiltration with global uterine "
        "enlargement. JZ thickening is the primary progression marker. More consistent but "
        "gradual progression pattern with higher fertility impact."
    ),
    AdenomyosisType.FOCAL: (
        "Focal adenomyosis (12% of cases): Localized adenomyoma with variable expansion. "
        "Location within myometrium is critical - outer myometrium lesions have highest "
        "progression risk."
    ),
    AdenomyosisType.UNSPECIFIED: "Adenomyosis type not specified - results may be less accurate.",
}


class AdenomyosisCalculator(GrowthCalculator):
    """Projects adenomyotic uterine growth and progression."""

    mass_type = MassType.ADENOMYOSIS

    def calculate(self, case: ClinicalInput) -> GrowthResult:
        params = self.config.adenomyosis
        months = case.projection_months
        a_type = case.adenomyosis_type
        diffuse = a_type == AdenomyosisType.DIFFUSE

        # 1. Type baseline
        base_rate, progression, jz_rate = params.type_baselines[a_type.value]
        mechanism, pattern = TYPE_PATTERNS[a_type]

        if a_type == AdenomyosisType.FOCAL:
            if case.lesion_location is not None:
                growth_mult, prog_mult = params.location_multipliers[case.lesion_location.value]
                base_rate *= growth_mult
                progression *= prog_mult
                mechanism, pattern = LOCATION_PATTERNS.get(case.lesion_location, (mechanism, pattern))

            growth_mult, prog_mult = params.lesion_count_multipliers.get(case.lesion_count.value, (1.0, 1.0))
            base_rate *= growth_mult
            progression *= prog_mult

        # 2. Treatment
        if case.treatment == Treatment.GNRH:
            base_rate, prog_factor, jz_rate = params.gnrh_override
            progression *= prog_factor
        else:
            key = case.treatment.value
            if case.treatment == Treatment.LNG_IUD:
                key = f"{key}:diffuse" if diffuse else f"{key}:other"
            if key in params.treatment_multipliers:
                growth_mult, prog_mult = params.treatment_multipliers[key]
                base_rate *= growth_mult
                progression *= prog_mult

        # 3. Pregnancy
        if case.pregnant:
            base_rate, prog_factor = params.pregnancy_override
            progression *= prog_factor

        # 4. Myometrial involvement
        involvement = case.uterine_involvement
        if involvement == Severity.SEVERE:
            key = "severe:diffuse" if diffuse else "severe:other"
            growth_mult, prog_mult = params.involvement_multipliers[key]
        elif involvement in (Severity.MODERATE, Severity.MILD):
            growth_mult, prog_mult = params.involvement_multipliers[involvement.value]
        else:
            growth_mult, prog_mult = 1.0, 1.0
        base_rate *= growth_mult
        progression *= prog_mult

        # 5. Symptom severity
        growth_mult, prog_mult = params.symptom_multipliers.get(case.symptom_severity.value, (1.0, 1.0))
        base_rate *= growth_mult
        progression *= prog_mult

        # 6. Risk factors (growth and progression)
        risk = params.risk_factor_multipliers
        risk_multiplier = 1.0
        if case.multiparity:
            risk_multiplier *= risk["multiparity"]
        if case.previous_uterine_surgery:
            risk_multiplier *= risk["previous_uterine_surgery"]
        if case.concurrent_endometriosis:
            risk_multiplier *= risk["concurrent_endometriosis"]
            if diffuse:
                risk_multiplier *= risk["concurrent_endometriosis_diffuse"]
        if case.concurrent_fibroids:
            risk_multiplier *= risk["concurrent_fibroids"]
        base_rate *= risk_multiplier
        progression *= risk_multiplier
        self._log_factor("risk factors", risk_multiplier)

        # 7. Age
        if 41 <= case.age <= 45:
            base_rate *= 1.25
        elif case.age > 45:
            base_rate *= 0.85
            progression *= 0.7
        elif case.age < 30:
            base_rate *= 1.4 if a_type == AdenomyosisType.FOCAL else 1.1

        # 8. JZ thickness (diffuse only)
        jz_given = has_value(case.jz_thickness) and case.jz_thickness > 0
        if diffuse and jz_given and case.jz_thickness >= params.jz_diagnostic_threshold_mm:
            if case.jz_thickness >= 20:
                base_rate *= 1.35
                jz_rate *= 1.3
            elif case.jz_thickness >= 16:
                base_rate *= 1.2
                jz_rate *= 1.15

        # 9. MUSA features
        musa = self.assess_musa(case.musa_features)
        if case.musa_features is not None:
            if musa.direct_feature_count >= 4:
                base_rate *= 1.3
                progression *= 1.4
            elif musa.direct_feature_count >= 2:
                base_rate *= 1.15
                progression *= 1.2
            if case.musa_features.translesional_vascularity:
                base_rate *= 1.2
            if case.musa_features.interrupted_jz:
                progression *= 1.15
        logger.debug(f"adenomyosis ({a_type.value}): {base_rate:.3f}/year volume, progression {progression:.1f}%")

        final_size, total_growth, final_volume = self._project_volume(case, base_rate)
        monthly_rate = total_growth / months
        annual_growth = monthly_rate * 12

        initial_jz = case.jz_thickness if jz_given else params.default_jz_thickness_mm
        final_jz = initial_jz * (1 + jz_rate) ** (months / 12)

        if annual_growth > 2:
            behavior = "Rapid progression - immediate evaluation needed"
        elif annual_growth > 1:
            behavior = "Moderate progression - close monitoring required"
        elif annual_growth > 0:
            behavior = "Slow progression - routine monitoring"
        else:
            behavior = "Stable/Regressing - favorable pattern"

        result = GrowthResult(
            mass_type=self.mass_type,
            projection_months=months,
            monthly_rate=monthly_rate,
            total_growth=total_growth,
            final_size=final_size,
            behavior=behavior,
            growth_velocity_cm_year=annual_growth,
            confidence_interval=abs(total_growth) * params.ci_fraction,
            progression_probability=clamp(progression * (months / 12), 0, params.progression_cap),
            risk_factors={
                "focal_outer_myometrium": (
                    a_type == AdenomyosisType.FOCAL and case.lesion_location == LesionLocation.OUTER
                ),
                "severe_symptoms": case.symptom_severity == Severity.SEVERE,
                "severe_involvement": involvement == Severity.SEVERE,
                "peak_age": 41 <= case.age <= 45,
                "multiparity": bool(case.multiparity),
                "previous_surgery": bool(case.previous_uterine_surgery),
                "concurrent_endometriosis": bool(case.concurrent_endometriosis),
                "concurrent_fibroids": bool(case.concurrent_fibroids),
            },
            musa_assessment=musa,
            final_volume=final_volume,
            jz_thickness_change=final_jz - initial_jz,
            final_jz_thickness=final_jz,
            treatment_response=self._treatment_response(case.treatment),
            growth_mechanism=mechanism,
            clinical_pattern=pattern,
            type_description=TYPE_DESCRIPTIONS[a_type],
            adenomyosis_type=a_type,
            uterine_involvement=involvement,
        )
        self._log_result(result)
        return result

    def assess_musa(self, features: MUSAFeatures = None) -> MUSAAssessment:
        """Count MUSA direct/indirect features and grade their extent."""
        if features is None:
            return MUSAAssessment()

        params = self.config.adenomyosis
        direct = [name for name in params.musa_direct_points if getattr(features, name)]
        indirect = [name for name in params.musa_indirect_points if getattr(features, name)]
        score = (
            sum(params.musa_direct_points[n] for n in direct)
            + sum(params.musa_indirect_points[n] for n in indirect)
        )

        if score >= 8:
            severity = "Extensive"
        elif score >= 4:
            severity = "Moderate"
        elif score >= 1:
            severity = "Mild"
        else:
            severity = "Minimal"

        return MUSAAssessment(
            direct_feature_count=len(direct),
            indirect_feature_count=len(indirect),
            total_score=score,
            severity=severity,
            has_active_vascularity=bool(features.translesional_vascularity),
        )

    @staticmethod
    def _project_volume(case: ClinicalInput, base_rate: float) -> Tuple[float, float, float]:
        """Final size, total growth and final volume, compounding monthly."""
        growth_factor = max(0.0, 1 + base_rate / 12) ** case.projection_months

        if has_value(case.uterine_volume) and case.uterine_volume > 0:
            current_volume = case.uterine_volume
            final_volume = current_volume * growth_factor
            # Cube root of volume as a diameter equivalent
            final_size = float(np.cbrt(final_volume))
            total_growth = final_size - float(np.cbrt(current_volume))
        else:
            current_volume = sphere_volume(case.current_size)
            final_volume = current_volume * growth_factor
            final_size = float(sphere_diameter(final_volume))
            total_growth = final_size - case.current_size

        return final_size, total_growth, float(final_volume)

    @staticmethod
    def _treatment_response(treatment: Treatment) -> str:
        if treatment == Treatment.NONE:
            return "Unknown"
        if treatment in (Treatment.CONTINUOUS_OCP, Treatment.LNG_IUD):
            return "Good response expected"
        if treatment == Treatment.GNRH:
            return "Temporary response - rebound expected"
        return "Moderate response expected"
