"""
Endometrioma Growth Model
=========================
Natural history of ovarian endometriomas with post-surgical recurrence.

Modifier order:
1. Recurrence risk multipliers (prior diagnosis, size, DIE, adenomyosis, bilateral)
2. Cumulative recurrence by surgical history, treatment and horizon
3. Age adjustment of recurrence
4. Growth pattern (decrease / stable / increase)
5. Hormonal treatment effects
6. Age adjustment of growth and recurrence
7. Li et al. biomarker model (when any lab value is supplied)

Sources: Muzii 2020 (PMID 32215556), Guo 2009 (PMID 33558225),
Vercellini 2018 (PMID 28881472), Li 2019 (PMID 30825145).
"""

import logging

from .config import MassType, Treatment, get_recurrence_bucket
from .models import ClinicalInput, GrowthResult, has_value
from .growth_model import GrowthCalculator, sphere_volume, clamp

logger = logging.getLogger(__name__)


class EndometriomaCalculator(GrowthCalculator):
    """Projects endometrioma size and recurrence risk."""

    mass_type = MassType.ENDOMETRIOMA

    def calculate(self, case: ClinicalInput) -> GrowthResult:
        params = self.config.endometrioma
        mult = params.recurrence_multipliers
        months = case.projection_months
        size = case.current_size

        # 1. Recurrence risk multiplier chain
        recurrence_multiplier = 1.0
        if case.previous_endometriosis_diagnosis:
            recurrence_multiplier *= mult["previous_diagnosis"]
        if size > 5.5:
            recurrence_multiplier *= mult["size_over_5_5"]
        elif size > 4.0:
            recurrence_multiplier *= mult["size_over_4"]
        if case.deep_endometriosis:
            recurrence_multiplier *= mult["deep_endometriosis"]
        if case.adenomyosis:
            recurrence_multiplier *= mult["adenomyosis"]
        if case.bilateral:
            recurrence_multiplier *= mult["bilateral"]
        self._log_factor("recurrence multiplier", recurrence_multiplier)

        # 2. Cumulative recurrence from surgical history
        recurrence = 0.0
        if case.has_surgical_history:
            treated = not case.is_untreated
            table = params.recurrence_table[(case.previous_surgery.value, treated)]
            recurrence = table[get_recurrence_bucket(months)]

        if recurrence > 0:
            recurrence = min(recurrence * recurrence_multiplier, params.recurrence_cap)

        # 3. Age (recurrence)
        if case.age < 25:
            recurrence *= 0.5
        elif case.age > 40:
            recurrence *= 0.4

        # 4. Growth pattern
        if self.is_probabilistic(case):
            low_cut, high_cut = params.pattern_thresholds
            r = self.draw()
            if r < low_cut:
                pattern = "decrease"
                base_rate = -self.uniform(params.decrease_range)
            elif r < high_cut:
                pattern = "stable"
                base_rate = 0.0
            else:
                pattern = "increase"
                base_rate = self.uniform(params.increase_range)
        else:
            # Most likely outcome at the median regression rate
            pattern = "decrease"
            base_rate = params.base_rate_cm_year
        logger.debug(f"endometrioma: pattern={pattern}, base rate {base_rate:.3f} cm/year")

        # 5. Treatment
        effects = params.treatment_effects.get(case.treatment.value, {})
        if case.treatment == Treatment.GNRH:
            base_rate = params.gnrh_rate_cm_year
        elif effects:
            if pattern == "increase" and "increase" in effects:
                base_rate *= effects["increase"]
            if pattern == "decrease" and "decrease" in effects:
                base_rate *= effects["decrease"]
            if case.has_surgical_history and "recurrence" in effects:
                recurrence *= effects["recurrence"]

        # 6. Age (growth and recurrence)
        if case.age < 25:
            if pattern == "increase":
                base_rate *= 1.3
            recurrence *= 1.5
        elif case.age > 40:
            if pattern == "increase":
                base_rate *= 0.5
            recurrence *= 0.4

        # 7. Li et al. model
        li_multiplier, li_enabled = self._li_model(case)
        if li_enabled:
            base_rate *= li_multiplier
            self._log_factor("Li model", li_multiplier)

        monthly_rate = base_rate / 12
        total_growth = monthly_rate * months
        final_size = max(0.0, size + total_growth)

        current_volume = sphere_volume(size)
        volume_change = (sphere_volume(final_size) - current_volume) / current_volume * 100

        if base_rate > 2:
            behavior = "Rapid growth - immediate evaluation needed"
        elif base_rate > 0:
            behavior = "Growing - monitor closely"
        elif base_rate == 0:
            behavior = "Stable - routine monitoring"
        else:
            behavior = "Regressing - favorable pattern"

        confidence_interval = abs(total_growth) * params.ci_fraction + params.measurement_variability_cm

        result = GrowthResult(
            mass_type=self.mass_type,
            projection_months=months,
            monthly_rate=monthly_rate,
            total_growth=total_growth,
            final_size=final_size,
            behavior=behavior,
            growth_velocity_cm_year=base_rate,
            confidence_interval=confidence_interval,
            resolution_probability=30.0 if final_size < 1 else 0.0,
            recurrence_probability=(
                clamp(recurrence, 0, params.recurrence_cap) if case.has_surgical_history else None
            ),
            risk_factors=self._risk_factors(case),
            growth_pattern=pattern,
            volume_change=float(volume_change),
            li_model_multiplier=li_multiplier,
            li_model_enabled=li_enabled,
        )
        self._log_result(result)
        return result

    def _li_model(self, case: ClinicalInput):
        """Biomarker multiplier; enabled when any lab value is present."""
        labs = {
            "fsh": case.fsh,
            "lh": case.lh,
            "total_cholesterol": case.total_cholesterol,
            "ldl": case.ldl,
        }
        if not any(has_value(v) for v in labs.values()):
            return 1.0, False

        thresholds = self.config.endometrioma.li_model_multipliers
        multiplier = 1.0
        for marker, value in labs.items():
            threshold, factor = thresholds[marker]
            if has_value(value) and value > threshold:
                multiplier *= factor

        age_threshold, age_factor = thresholds["age"]
        if case.age > age_threshold:
            multiplier *= age_factor

        return multiplier, True

    @staticmethod
    def _risk_factors(case: ClinicalInput):
        return {
            "previous_diagnosis": bool(case.previous_endometriosis_diagnosis),
            "large_size": case.current_size > 5.5,
            "bilateral": bool(case.bilateral),
            "deep_endometriosis": bool(case.deep_endometriosis),
            "adenomyosis": bool(case.adenomyosis),
            "high_fsh": has_value(case.fsh) and case.fsh > 25,
            "high_lh": has_value(case.lh) and case.lh > 40,
            "high_cholesterol": has_value(case.total_cholesterol) and case.total_cholesterol > 200,
            "high_ldl": has_value(case.ldl) and case.ldl > 130,
            "young_age": case.age < 25,
            "older_age": case.age > 40,
        }
