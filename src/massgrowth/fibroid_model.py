"""
Fibroid (Leiomyoma) Growth Model
================================
Volume growth of uterine leiomyomas compounded monthly on a spherical
volume, then converted back to a diameter.

Growth is expressed as a monthly volume percentage:
- Post-myomectomy residual disease grows ~11%/year
- Otherwise by size band (Peddada 2008): <1cm 188%/18mo, 1-2cm 100%/18mo,
  2-5cm 9-89%/18mo (median 49%), >=5cm 16.8%/12mo

Modifiers (in order): age, race, location, pregnancy, spontaneous
regression (probabilistic only), treatment, risk factors, multiplicity.
"""

import logging
from typing import Optional

from .config import (
    MassType, Treatment, FibroidLocation, FibroidCount, MyomectomyHistory, Race,
    FIGOClass, get_fibroid_size_band, get_myomectomy_bucket,
)
from .models import ClinicalInput, GrowthResult
from .growth_model import GrowthCalculator, sphere_volume, sphere_diameter

logger = logging.getLogger(__name__)

# FIGO type assumed when only a location is known
LOCATION_DEFAULT_FIGO = {
    FibroidLocation.SUBMUCOSAL: 1,
    FibroidLocation.SUBSEROSAL: 6,
    FibroidLocation.INTRAMURAL: 4,
}


class FibroidCalculator(GrowthCalculator):
    """Projects fibroid diameter from compounded volume growth."""

    mass_type = MassType.FIBROID

    def calculate(self, case: ClinicalInput) -> GrowthResult:
        params = self.config.fibroid
        months = case.projection_months
        size = case.current_size

        figo = self._classify_figo(case)
        multiplicity = params.multiplicity_multipliers.get(case.fibroid_count.value, 1.0)

        post_surgical = case.previous_myomectomy != MyomectomyHistory.NONE
        recurrence = 0.0

        if post_surgical:
            bucket = params.myomectomy_recurrence[get_myomectomy_bucket(months)]
            recurrence = bucket[case.previous_myomectomy.value]
            recurrence *= multiplicity
            if case.age < 35:
                recurrence *= params.young_recurrence_multiplier
            recurrence = min(recurrence, params.recurrence_cap)

            volume_growth = params.residual_growth_percent_year / 12
        else:
            band = get_fibroid_size_band(size)
            percent, period = params.size_band_growth[band]
            if band == "2-5" and self.is_probabilistic(case):
                percent = self.uniform(params.probabilistic_2_5_range)
            volume_growth = percent / period
        logger.debug(f"fibroid: base volume growth {volume_growth:.3f}%/month")

        # 1. Age
        if 30 <= case.age <= 40:
            volume_growth *= 1.3
        elif case.age > 45:
            volume_growth *= 0.5
        elif case.age < 25:
            volume_growth *= 1.2

        # 2. Race
        volume_growth *= params.race_multipliers.get(case.race.value, 1.0)

        # 3. Location
        if case.fibroid_location is not None:
            volume_growth *= params.location_multipliers.get(case.fibroid_location.value, 1.0)

        # 4. Pregnancy
        if case.pregnant:
            percent, period = params.pregnancy_growth
            volume_growth = percent / period

        # 5. Spontaneous regression
        if self.is_probabilistic(case) and not post_surgical:
            regresses = self.draw() < params.spontaneous_regression_probability
            if regresses and not case.pregnant and case.is_untreated:
                volume_growth = params.spontaneous_regression_percent_month
                logger.debug("fibroid: spontaneous regression")

        # 6. Treatment
        if case.treatment == Treatment.GNRH:
            percent, period = params.gnrh_growth
            volume_growth = percent / period
        elif case.treatment.value in params.procedure_effects:
            growth_factor, recurrence_factor = params.procedure_effects[case.treatment.value]
            if post_surgical:
                recurrence *= recurrence_factor
            volume_growth *= growth_factor

        # 7. Risk factors
        risk = params.risk_factor_multipliers
        risk_multiplier = 1.0
        if case.early_menarche:
            risk_multiplier *= risk["early_menarche"]
        if case.nulliparity:
            risk_multiplier *= risk["nulliparity"]
        if case.obesity:
            risk_multiplier *= risk["obesity"]
        if case.family_history:
            risk_multiplier *= risk["family_history"]
        volume_growth *= risk_multiplier
        self._log_factor("risk factors", risk_multiplier)

        # 8. Multiplicity
        volume_growth *= multiplicity

        current_volume = sphere_volume(size)
        final_volume = current_volume * (1 + volume_growth / 100) ** months
        final_size = float(sphere_diameter(final_volume))

        total_growth = final_size - size
        monthly_rate = total_growth / months
        annual_growth = monthly_rate * 12
        three_month_growth = (volume_growth / months) * 3

        if three_month_growth > params.growth_spurt_percent_3mo:
            behavior = "Growth spurt - immediate evaluation needed"
        elif annual_growth > 2:
            behavior = "Rapid growth - close monitoring needed"
        elif total_growth > 0:
            behavior = "Growing - routine monitoring"
        else:
            behavior = "Regressing - favorable response"

        reoperation_risk = params.reoperation_risk if (post_surgical and final_size > 5) else 0.0

        result = GrowthResult(
            mass_type=self.mass_type,
            projection_months=months,
            monthly_rate=monthly_rate,
            total_growth=total_growth,
            final_size=final_size,
            behavior=behavior,
            growth_velocity_cm_year=annual_growth,
            confidence_interval=abs(total_growth) * params.ci_fraction + params.measurement_variability_cm,
            resolution_probability=0.0,
            recurrence_probability=max(recurrence, 0.0) if post_surgical else None,
            risk_factors={
                "multiple_fibroids": case.fibroid_count != FibroidCount.SINGLE,
                "early_menarche": bool(case.early_menarche),
                "nulliparity": bool(case.nulliparity),
                "obesity": bool(case.obesity),
                "family_history": bool(case.family_history),
                "young_age": case.age < 35,
                "african_american": case.race == Race.AFRICAN_AMERICAN,
            },
            figo_classification=figo,
            volume_growth_percent=volume_growth * months,
            post_surgical_recurrence=post_surgical,
            reoperation_risk=reoperation_risk,
            mean_time_between_surgeries=(
                params.mean_time_between_surgeries_years if post_surgical else None
            ),
            multiplicity_factor=multiplicity,
        )
        self._log_result(result)
        return result

    def _classify_figo(self, case: ClinicalInput) -> Optional[FIGOClass]:
        """FIGO class from the given type, else inferred from location."""
        if case.figo_type is not None:
            return self.evidence.get_figo(case.figo_type)
        figo_type = LOCATION_DEFAULT_FIGO.get(case.fibroid_location, 4)
        return self.evidence.get_figo(figo_type)
