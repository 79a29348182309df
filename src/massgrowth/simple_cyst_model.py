"""
Simple Ovarian Cyst Model
=========================
Resolution of functional cysts. A cyst that does not resolve is held at its
current size; the literature growth rate of a cystadenoma subtype is
reported alongside the projection but not applied to it.

Resolution by menopausal status (Greenlee 2010, Modesitt 2003):
- Premenopausal: 75% within 2-3 cycles
- Perimenopausal: 55% within 6 months
- Postmenopausal: 32% at 1 year (pro-rated for shorter horizons)
"""

import logging

from .config import MassType, MenopausalStatus, CystadenomaType, Treatment
from .models import ClinicalInput, GrowthResult, RMIFeatures
from .growth_model import GrowthCalculator, clamp
from .risk_scores import roma_score, rmi_score

logger = logging.getLogger(__name__)


class SimpleCystCalculator(GrowthCalculator):
    """Projects resolution or persistence of a simple adnexal cyst."""

    mass_type = MassType.SIMPLE_CYST

    def calculate(self, case: ClinicalInput) -> GrowthResult:
        params = self.config.simple_cyst
        months = case.projection_months
        size = case.current_size
        status = case.menopausal_status
        variability = params.measurement_variability_cm

        roma = roma_score(case.ca125, case.he4, status)
        rmi = rmi_score(
            RMIFeatures(
                multilocular=False,
                solid_areas=False,
                bilateral=case.bilateral,
                ascites=case.ascites,
                metastases=False,
            ),
            status,
            case.ca125,
        )

        # Resolution by menopausal status
        if status == MenopausalStatus.POST:
            full_resolution, resolution_time = params.resolution["post"]
            if months >= 12:
                resolution = full_resolution
            else:
                resolution = full_resolution * (months / 12)
        elif status == MenopausalStatus.PRE:
            resolution, resolution_time = params.resolution["pre"]
        else:
            resolution, resolution_time = params.resolution["peri"]

        # Cystadenoma growth (cm/month)
        base_rate = 0.0
        if case.cystadenoma_type == CystadenomaType.BORDERLINE:
            if self.is_probabilistic(case):
                base_rate = self.uniform(params.borderline_range) / 12
            else:
                base_rate = sum(params.borderline_range) / 2 / 12
        elif case.cystadenoma_type is not None:
            base_rate = params.cystadenoma_rates[case.cystadenoma_type.value] / 12

        # PCOS
        if case.pcos:
            if case.treatment in (Treatment.OCP, Treatment.CONTINUOUS_OCP):
                base_rate *= 0.3
                resolution *= 1.2
            else:
                base_rate *= 0.5
                resolution *= 0.8

        # Size
        if size > 5:
            resolution *= 0.6
        elif size > 3:
            resolution *= 0.8

        # Age
        if case.age > 50 and status == MenopausalStatus.POST:
            resolution *= 0.7
        logger.debug(f"simple-cyst: resolution {resolution:.1f}% over {resolution_time} months")

        fraction = months / resolution_time

        if self.is_probabilistic(case):
            if self.bernoulli(resolution):
                if months >= resolution_time:
                    final_size = 0.0
                    monthly_rate = -size / resolution_time
                else:
                    final_size = size * (1 - fraction)
                    monthly_rate = (final_size - size) / months
            else:
                noise = (self.draw() - 0.5) * variability
                final_size = max(0.0, size + noise)
                monthly_rate = (final_size - size) / months
        else:
            if resolution >= 50:
                if months >= resolution_time:
                    final_size = 0.0
                    monthly_rate = -size / resolution_time
                else:
                    final_size = size * (1 - fraction * (resolution / 100))
                    monthly_rate = (final_size - size) / months
            else:
                final_size = size
                monthly_rate = 0.0

        total_growth = final_size - size

        if abs(total_growth) < variability:
            behavior = "Stable within measurement variability"
        elif total_growth < 0:
            behavior = "Resolving - favorable outcome"
        elif total_growth > 2:
            behavior = "Significant growth - requires evaluation"
        else:
            behavior = "Persistent - continued monitoring needed"

        malignancy = None
        if status == MenopausalStatus.POST:
            malignancy = 0.0
            if case.age > 50:
                tiers = params.malignancy_tiers
                if size > 5:
                    malignancy = tiers[">5"]
                elif size > 3:
                    malignancy = tiers[">3"]
                else:
                    malignancy = tiers["<=3"]

        result = GrowthResult(
            mass_type=self.mass_type,
            projection_months=months,
            monthly_rate=monthly_rate,
            total_growth=total_growth,
            final_size=final_size,
            behavior=behavior,
            growth_velocity_cm_year=monthly_rate * 12,
            confidence_interval=variability,
            resolution_probability=clamp(resolution),
            malignancy_risk=malignancy,
            roma_score=roma,
            rmi_score=rmi,
            resolution_time_months=resolution_time,
            measurement_variability=variability,
            pcos_effect="PCOS alters cyst development patterns" if case.pcos else None,
            cystadenoma_growth_cm_year=base_rate * 12 if case.cystadenoma_type is not None else None,
        )
        self._log_result(result)
        return result
