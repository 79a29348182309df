"""
Clinical Reporting
==================
Plain-language recommendations, warnings and summaries for a growth result.

All functions are pure: they take the mass type, the input case and the
calculated result, and return text. Rendering (HTML, print) is left to the
caller.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .config import (
    MassType, EvidenceBase, Reference, Treatment, MenopausalStatus, FibroidCount,
    MyomectomyHistory, Race, ComplexCystType, AdenomyosisType, LesionLocation, Severity,
)
from .models import ClinicalInput, GrowthResult

SUMMARY_BULLETS = 3
SUMMARY_FILLER = "• Discuss your specific case with your healthcare provider for personalized recommendations"

DISCLAIMER = (
    "This report is generated for educational purposes only based on published research "
    "averages. Individual results vary significantly. Always consult with your healthcare "
    "provider for personalized medical advice and treatment decisions."
)


@dataclass
class ClinicalRecommendations:
    """Structured clinical guidance for a single result"""
    recommendations: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    risk_stratification: List[str] = field(default_factory=list)


def _gt(value: Optional[float], threshold: float) -> bool:
    return value is not None and value > threshold


# =============================================================================
# REFERENCES
# =============================================================================

def get_references(
    mass_type: MassType,
    case: ClinicalInput,
    result: GrowthResult,
    evidence: Optional[EvidenceBase] = None
) -> List[Reference]:
    """Literature citations supporting this result."""
    evidence = evidence or EvidenceBase()
    mass_type = MassType(mass_type)
    keys = []

    if mass_type == MassType.ENDOMETRIOMA:
        keys += [("endometrioma", "growth_rates"), ("endometrioma", "recurrence")]
        if case.treatment != Treatment.NONE:
            keys.append(("endometrioma", "treatment"))
        if result.li_model_enabled:
            keys.append(("endometrioma", "li_model"))

    elif mass_type == MassType.FIBROID:
        keys.append(("fibroid", "growth_rates"))
        if case.previous_myomectomy != MyomectomyHistory.NONE:
            keys.append(("fibroid", "recurrence"))
        if case.race == Race.AFRICAN_AMERICAN:
            keys.append(("fibroid", "race"))

    elif mass_type == MassType.SIMPLE_CYST:
        keys.append(("simple_cyst", "resolution"))
        if case.menopausal_status == MenopausalStatus.POST:
            keys.append(("simple_cyst", "postmenopausal"))

    elif mass_type == MassType.COMPLEX_CYST:
        if case.cyst_type == ComplexCystType.DERMOID:
            keys.append(("complex_cyst", "dermoid"))
        elif case.cyst_type == ComplexCystType.HEMORRHAGIC:
            keys.append(("complex_cyst", "hemorrhagic"))
        keys.append(("complex_cyst", "orads"))
        if result.roma_score is not None or result.rmi_score is not None:
            keys += [("malignancy_risk", "roma"), ("malignancy_risk", "rmi")]
        if result.iota_assessment is not None:
            keys.append(("malignancy_risk", "iota"))

    elif mass_type == MassType.ADENOMYOSIS:
        keys += [("adenomyosis", "progression"), ("adenomyosis", "type_distribution")]
        if case.adenomyosis_type == AdenomyosisType.DIFFUSE:
            keys.append(("adenomyosis", "jz_thickness"))
        if case.musa_features is not None:
            keys.append(("adenomyosis", "musa_consensus"))

    refs = [evidence.get_reference(group, key) for group, key in keys]
    return [r for r in refs if r is not None]


# =============================================================================
# RECOMMENDATIONS & WARNINGS
# =============================================================================

def generate_recommendations(mass_type: MassType, case: ClinicalInput, result: GrowthResult) -> List[str]:
    """Management recommendations by mass type."""
    mass_type = MassType(mass_type)
    recs = []

    if mass_type == MassType.ENDOMETRIOMA:
        if result.final_size >= 4:
            recs.append("Consider surgical evaluation for symptomatic cysts ≥4cm")
            recs.append("Monitor ovarian reserve with AMH if fertility desired")
        if case.treatment == Treatment.NONE and result.growth_pattern == "increase":
            recs.append("Consider dienogest for long-term suppression (preserves AMH better than GnRH)")

    elif mass_type == MassType.FIBROID:
        if result.growth_velocity_cm_year > 2:
            recs.append("Rapid growth warrants close monitoring and possible intervention")
        elif case.current_size > 5:
            recs.append("Large fibroid size - monitor for symptoms. Annual ultrasound recommended")
        else:
            recs.append("Conservative management appropriate. Monitor symptoms and perform annual ultrasound")

        if case.fibroid_count != FibroidCount.SINGLE:
            recs.append("Multiple fibroids require closer monitoring - 60-80% of women have multiple nodules")
            if case.fibroid_count == FibroidCount.FOUR_PLUS:
                recs.append("≥4 fibroids associated with higher growth rates and recurrence risk")

        if case.previous_myomectomy != MyomectomyHistory.NONE:
            recs.append("Post-surgical monitoring: 41.6% recurrence at 3 years (laparoscopic), 31-43% (open)")
            if _gt(result.recurrence_probability, 50):
                recs.append("High recurrence risk - consider long-term medical management")

        if case.treatment == Treatment.UAE:
            recs.append("UAE: 3.1% symptom recurrence at 1 year, 10.5% at 3 years")
        elif case.treatment == Treatment.HIFU:
            recs.append("HIFU: 22.5% recurrence at 2 years, higher with ≥3 fibroids")

        if case.race == Race.AFRICAN_AMERICAN:
            recs.append("African American patients tend to have higher growth rates - closer monitoring recommended")
        if case.early_menarche or case.nulliparity or case.obesity:
            recs.append("Risk factors present - consider preventive measures and close monitoring")

    elif mass_type == MassType.SIMPLE_CYST:
        if case.current_size < 3:
            recs.append("No follow-up needed for cysts <3cm per SRU guidelines")
        elif case.current_size < 5:
            recs.append("Follow-up ultrasound in 6-12 months to confirm resolution")
        else:
            recs.append("Consider repeat ultrasound in 3-6 months or surgical evaluation")

        if case.pcos:
            recs.append("PCOS patients: monitor for multiple small follicles rather than true cysts")
            if case.treatment == Treatment.NONE:
                recs.append("Consider hormonal therapy to suppress functional cyst formation in PCOS")

        if _gt(result.malignancy_risk, 10):
            recs.append("Consider CA-125 and surgical evaluation for high malignancy risk")
        elif _gt(result.malignancy_risk, 5):
            recs.append("Close monitoring recommended with CA-125 assessment")

    elif mass_type == MassType.COMPLEX_CYST:
        if result.growth_velocity_cm_year > 2:
            recs.append("Growth >2cm/year suggests need for surgical intervention")
        else:
            recs.append("Annual ultrasound monitoring recommended. Consider IOTA assessment for risk stratification")

        if case.pcos:
            recs.append("PCOS with complex cysts: 5% prevalence, 10x higher subfertility risk")
            if case.cyst_type == ComplexCystType.ENDOMETRIOMA:
                recs.append("PCOS + endometriosis: coordinate treatment for both conditions")

        orads_recs = {
            "O-RADS 5": "O-RADS 5: High risk - immediate surgical evaluation recommended",
            "O-RADS 4": "O-RADS 4: Intermediate risk - consider surgical evaluation within 3-6 months",
            "O-RADS 3": "O-RADS 3: Low-intermediate risk - close monitoring with repeat imaging in 3-6 months",
        }
        if result.orads_category in orads_recs:
            recs.append(orads_recs[result.orads_category])

        if _gt(result.malignancy_risk, 20):
            recs.append("High malignancy risk - consider referral to gynecologic oncology")
        elif _gt(result.malignancy_risk, 10):
            recs.append("Moderate malignancy risk - CA-125 and close monitoring recommended")

    elif mass_type == MassType.ADENOMYOSIS:
        progression = result.progression_probability or 0.0
        if progression > 50:
            recs.append("High progression risk - consider aggressive treatment and close monitoring")
        elif progression > 25:
            recs.append("Moderate progression risk - regular monitoring and treatment optimization recommended")
        else:
            recs.append("Low progression risk - routine monitoring appropriate")

        if case.treatment == Treatment.NONE and progression > 30:
            recs.append("Untreated adenomyosis shows 30.77% progression - consider continuous OCP or levonorgestrel IUD")
        elif case.treatment == Treatment.GNRH:
            recs.append("GnRH therapy provides temporary relief - plan for maintenance therapy after discontinuation")

        if case.adenomyosis_type == AdenomyosisType.FOCAL and case.lesion_location == LesionLocation.OUTER:
            recs.append("Focal outer myometrium involvement - highest progression risk, close monitoring needed")
        elif case.adenomyosis_type == AdenomyosisType.DIFFUSE:
            recs.append("Diffuse adenomyosis - monitor JZ thickness progression with serial imaging")

        if case.symptom_severity == Severity.SEVERE:
            recs.append("Severe symptoms correlate with rapid progression - consider surgical evaluation")
        elif case.symptom_severity == Severity.MODERATE:
            recs.append("Moderate symptoms - optimize medical therapy and monitor response")

        if case.concurrent_endometriosis:
            recs.append("Concurrent endometriosis - coordinate treatment for both conditions")
        if case.concurrent_fibroids:
            recs.append("Concurrent leiomyomas - consider combined treatment approach")

    return recs


def generate_warnings(mass_type: MassType, case: ClinicalInput, result: GrowthResult) -> List[str]:
    """Red-flag warnings that warrant prompt attention."""
    mass_type = MassType(mass_type)
    warnings = []

    if result.growth_velocity_cm_year > 2:
        warnings.append("Rapid growth rate warrants prompt medical evaluation")

    if mass_type == MassType.FIBROID:
        if case.current_size > 10:
            warnings.append("Very large fibroids may cause significant symptoms and complications")
        if case.fibroid_count == FibroidCount.FOUR_PLUS:
            warnings.append("≥4 fibroids associated with higher growth rates and recurrence risk")
        if case.previous_myomectomy != MyomectomyHistory.NONE and _gt(result.recurrence_probability, 50):
            warnings.append("High post-surgical recurrence risk - close monitoring required")

    if mass_type == MassType.COMPLEX_CYST and case.age > 50:
        warnings.append("Complex cysts in postmenopausal women require careful evaluation for malignancy risk")

    if mass_type == MassType.ENDOMETRIOMA and case.age < 25:
        warnings.append("Adolescent endometriomas have higher recurrence rates and may require specialized care")

    if mass_type == MassType.ADENOMYOSIS:
        if _gt(result.progression_probability, 50):
            warnings.append("High progression risk adenomyosis requires close monitoring and treatment optimization")
        if case.adenomyosis_type == AdenomyosisType.FOCAL and case.lesion_location == LesionLocation.OUTER:
            warnings.append("Focal adenomyosis of outer myometrium has highest progression risk")
        if case.symptom_severity == Severity.SEVERE:
            warnings.append("Severe symptoms in adenomyosis correlate with rapid progression")

    return warnings


# =============================================================================
# PATIENT SUMMARY
# =============================================================================

def generate_clinical_summary(mass_type: MassType, case: ClinicalInput, result: GrowthResult) -> List[str]:
    """Exactly three patient-facing key takeaways."""
    mass_type = MassType(mass_type)
    summary = []

    if mass_type == MassType.ENDOMETRIOMA:
        if case.previous_endometriosis_diagnosis or case.has_surgical_history:
            summary.append("• Previous endometrioma history doubles your recurrence risk - long-term hormonal therapy recommended")
        if case.treatment == Treatment.NONE and result.growth_pattern == "increase":
            summary.append("• Continuous birth control reduces recurrence by 50-80% and should be continued for 18-24 months minimum")
        elif case.treatment in (Treatment.CONTINUOUS_OCP, Treatment.DIENOGEST):
            summary.append("• Your current treatment provides excellent protection - continue for at least 18-24 months")
        if case.age < 25:
            summary.append("• Younger patients have higher recurrence risk - close monitoring and long-term treatment advised")
        elif case.age > 40:
            summary.append("• Age provides natural protection - recurrence risk decreases significantly after age 40")

    elif mass_type == MassType.FIBROID:
        if case.fibroid_count != FibroidCount.SINGLE:
            summary.append("• Multiple fibroids (60-80% of cases) require closer monitoring - higher growth and recurrence risk")
        elif result.growth_velocity_cm_year > 2:
            summary.append("• Rapid growth detected - immediate evaluation needed to rule out concerning changes")
        elif result.total_growth > 0:
            summary.append("• Fibroids typically grow 9-89% over 18 months - annual monitoring recommended")

        if case.previous_myomectomy != MyomectomyHistory.NONE:
            summary.append("• Post-surgical recurrence: 41.6% at 3 years (laparoscopic), 31-43% (open) - long-term monitoring needed")
        elif case.current_size > 5:
            summary.append("• Large fibroids may cause symptoms - discuss treatment options with your doctor")
        else:
            summary.append("• Conservative management appropriate - monitor symptoms and perform annual ultrasound")

        if case.pregnant:
            summary.append("• Pregnancy causes 122% growth in first 7 weeks - monitor for complications")
        elif case.race == Race.AFRICAN_AMERICAN:
            summary.append("• African American patients tend to have higher growth rates - closer monitoring may be needed")
        elif case.early_menarche or case.nulliparity or case.obesity:
            summary.append("• Risk factors present (early menarche, nulliparity, obesity) - consider preventive measures")

    elif mass_type == MassType.SIMPLE_CYST:
        if case.menopausal_status == MenopausalStatus.PRE:
            summary.append("• 70-80% of functional cysts resolve within 2-3 cycles - follow-up confirms resolution")
        elif case.menopausal_status == MenopausalStatus.POST:
            summary.append("• Only 32% resolve at 1 year in postmenopausal women - closer monitoring needed")

        if case.pcos:
            summary.append("• PCOS affects cyst development - multiple small follicles rather than true cysts")
        elif case.current_size < 3:
            summary.append("• Cysts <3cm typically don't require follow-up per guidelines")
        elif case.current_size < 5:
            summary.append("• Follow-up ultrasound in 6-12 months to confirm resolution or stability")
        else:
            summary.append("• Large cysts may require closer monitoring or evaluation")

        if _gt(result.malignancy_risk, 5):
            summary.append("• Elevated malignancy risk - CA-125 testing and closer monitoring recommended")

    elif mass_type == MassType.COMPLEX_CYST:
        if result.orads_category == "O-RADS 5":
            summary.append("• High-risk category - immediate surgical evaluation recommended")
        elif result.orads_category == "O-RADS 4":
            summary.append("• Intermediate-risk category - surgical evaluation within 3-6 months advised")
        elif result.orads_category == "O-RADS 3":
            summary.append("• Low-intermediate risk - close monitoring with repeat imaging in 3-6 months")
        else:
            summary.append("• Low-risk category - routine monitoring appropriate")

        if case.pcos:
            summary.append("• PCOS with complex cysts: 5% prevalence, 10x higher subfertility risk")
        elif result.growth_velocity_cm_year > 2:
            summary.append("• Growth >2cm/year excludes benign etiology - surgical evaluation needed")
        elif case.cyst_type == ComplexCystType.HEMORRHAGIC:
            summary.append("• Hemorrhagic cysts resolve in 87.5% of cases within 6 weeks")
        elif case.cyst_type == ComplexCystType.ENDOMETRIOMA:
            summary.append("• Endometriomas: 47% decrease, 31% stable, 22% increase in size")

        if _gt(result.malignancy_risk, 10):
            summary.append("• Elevated malignancy risk - consider referral to gynecologic oncology")

    elif mass_type == MassType.ADENOMYOSIS:
        progression = result.progression_probability or 0.0
        if progression > 50:
            summary.append("• High progression risk - close monitoring and treatment optimization needed")
        elif progression > 25:
            summary.append("• Moderate progression risk - regular monitoring recommended")
        else:
            summary.append("• Low progression risk - routine monitoring appropriate")

        if case.treatment == Treatment.NONE and progression > 30:
            summary.append("• Untreated adenomyosis shows 30.77% progression - consider hormonal therapy")
        elif case.treatment != Treatment.NONE and result.treatment_response == "Good response expected":
            summary.append("• Current treatment provides good protection - continue as prescribed")

        if result.risk_factors.get("focal_outer_myometrium"):
            summary.append("• Focal outer myometrium involvement - highest progression risk, close monitoring needed")
        elif result.risk_factors.get("severe_symptoms"):
            summary.append("• Severe symptoms correlate with rapid progression - treatment optimization advised")

    while len(summary) < SUMMARY_BULLETS:
        summary.append(SUMMARY_FILLER)

    return summary[:SUMMARY_BULLETS]


# =============================================================================
# CLINICAL RECOMMENDATIONS (size thresholds, follow-up, risk stratification)
# =============================================================================

def generate_clinical_recommendations(
    mass_type: MassType,
    case: ClinicalInput,
    result: GrowthResult
) -> ClinicalRecommendations:
    """Size-threshold guidance, type-specific notes and follow-up interval."""
    mass_type = MassType(mass_type)
    out = ClinicalRecommendations()
    recs, warnings = out.recommendations, out.warnings
    final_size = result.final_size

    # Universal size thresholds
    if final_size >= 10:
        warnings.append("Size ≥10cm: Surgical consideration threshold reached")
    elif final_size >= 7:
        recs.append("Size ≥7cm: Routine follow-up recommended for all patients")
    elif final_size >= 5:
        recs.append("Size ≥5cm: General follow-up threshold (with exceptions for well-characterized cysts)")

    if result.growth_velocity_cm_year > 2:
        warnings.append("Growth >2cm/year: Rapid growth requiring immediate evaluation")

    if mass_type == MassType.ENDOMETRIOMA:
        if final_size >= 4:
            recs.append("Consider surgical evaluation for symptomatic cysts ≥4cm")
            recs.append("Monitor ovarian reserve with AMH if fertility desired")
        if case.treatment == Treatment.NONE and result.growth_pattern == "increase":
            recs.append("Consider dienogest for long-term suppression (preserves AMH better than GnRH)")
            recs.append("Continuous OC can reduce growth by 48%")
        if case.has_surgical_history and result.recurrence_probability is not None:
            recs.append(
                f"Recurrence risk: {result.recurrence_probability:.1f}% at {case.projection_months} months"
            )
            if case.treatment != Treatment.CONTINUOUS_OCP:
                recs.append("Long-term continuous OC reduces recurrence by 90%")
        if case.age < 25:
            recs.append("Younger patients: median 53 months to recurrence vs 22.4 months in older women")

    elif mass_type == MassType.FIBROID:
        three_month_growth = (result.volume_growth_percent / case.projection_months) * 3
        if three_month_growth > 30:
            warnings.append("Volume increase >30% per 3 months defines growth spurt")
        if case.current_size < 1 and final_size > 2:
            recs.append("Small fibroids show dramatic growth (up to 188% over 18 months)")
        if case.treatment == Treatment.GNRH:
            recs.append("GnRH agonists: expect 40-60% volume reduction over 3-4 months")
            warnings.append("Rebound growth occurs immediately upon GnRH discontinuation")
        if case.treatment == Treatment.NONE and result.total_growth > 0 and case.age < 45:
            recs.append("Consider medical management for symptomatic growing fibroids")
        if case.pregnant:
            warnings.append("Pregnancy: expect 122% growth in first 7 weeks")
            recs.append("Monitor for red degeneration and preterm labor risk")
        if case.race == Race.AFRICAN_AMERICAN and case.age < 40:
            recs.append("Higher growth rates expected in young African American women")
        if result.total_growth < 0:
            recs.append("20% of fibroids spontaneously regress without treatment")

    elif mass_type == MassType.SIMPLE_CYST:
        if case.menopausal_status == MenopausalStatus.PRE:
            recs.append("70-80% of functional cysts resolve within 2-3 cycles")
            if case.current_size < 3:
                recs.append("Size <3cm: reporting threshold for premenopausal women")
        elif case.menopausal_status == MenopausalStatus.POST:
            recs.append("Only 32% resolve at 1 year in postmenopausal women")
            if case.current_size >= 1:
                recs.append("Size ≥1cm: reporting threshold for postmenopausal women")
            recs.append("Consider CA-125 for risk stratification")
        if case.pcos:
            recs.append("PCOS: monitor for multiple small follicles (2-9mm) rather than true cysts")
            recs.append("Combined hormonal contraceptives suppress functional cyst formation in PCOS")
        if result.measurement_variability is not None:
            recs.append(f"Measurement variability: ±{result.measurement_variability}cm")
            if abs(result.total_growth) < result.measurement_variability:
                recs.append("Change is within measurement variability - may not represent true growth")
                recs.append("Follow-up intervals should exceed 1 year for accurate growth assessment")

    elif mass_type == MassType.COMPLEX_CYST:
        _complex_cyst_notes(case, result, out)

    # Follow-up interval
    if final_size < 5 and mass_type != MassType.COMPLEX_CYST:
        recs.append("Standard follow-up: 3-6 months initially, then annually if stable")
    elif 5 <= final_size < 7:
        recs.append("Enhanced monitoring: follow-up every 3-6 months")
    elif final_size >= 7:
        recs.append("Close monitoring: follow-up every 2-3 months")

    return out


def _complex_cyst_notes(case: ClinicalInput, result: GrowthResult, out: ClinicalRecommendations):
    recs, warnings = out.recommendations, out.warnings
    cyst_type = case.cyst_type

    if cyst_type == ComplexCystType.HEMORRHAGIC:
        recs.append("Hemorrhagic cysts: 87.5% resolve within 6 weeks")
        recs.append("Conservative management typically sufficient")
        recs.append("Follow-up ultrasound at 6-8 weeks")
    elif cyst_type == ComplexCystType.DERMOID:
        recs.append("Dermoid cysts: 0.18 cm/year growth rate (slowest of all cyst types)")
        recs.append("Growth >2cm/year excludes dermoid diagnosis")
        if result.final_size > 6:
            recs.append("Consider surgery for large dermoids due to torsion risk")
    elif cyst_type == ComplexCystType.SEROUS:
        recs.append("Serous cystadenomas: 0.51 cm/year growth rate")
        recs.append("Conservative management for lesions under 7cm")
    elif cyst_type == ComplexCystType.MUCINOUS:
        recs.append("Mucinous cystadenomas: 0.83 cm/year (62% faster than serous)")
        recs.append("6.3% recurrence rates, particularly in younger patients")
        if result.final_size > 10:
            warnings.append("Large mucinous cysts require careful evaluation for borderline features")
    elif cyst_type == ComplexCystType.ENDOMETRIOMA:
        recs.append("Endometriomas: 47% decrease, 31% stable, 22% increase in size")
        recs.append("Conservative management effective for asymptomatic cases under 4-5cm")
    elif cyst_type == ComplexCystType.SEPTATED:
        recs.append("Septated cysts: 38.8% resolve spontaneously with mean resolution time of 12 months")
        recs.append("Extremely low malignancy rate (only one borderline tumor in 2,870 cases)")

    if case.pcos:
        recs.append("PCOS with complex cysts: 5% prevalence in operative cohorts")
        recs.append("10-fold higher subfertility risk and 2.5-fold higher chronic pelvic pain risk")
        if cyst_type == ComplexCystType.ENDOMETRIOMA:
            recs.append("PCOS + endometriosis: coordinate treatment for both conditions")

    recs.append("Consider tumor markers (CA-125, CEA, CA 19-9) for risk stratification")
    recs.append("Apply IOTA Simple Rules or O-RADS for malignancy risk assessment")

    # Heuristic risk points by subtype and growth
    points = 0
    category = "O-RADS 2"
    if cyst_type == ComplexCystType.DERMOID and result.final_size > 6:
        points += 2
        category = "O-RADS 3"
    if cyst_type == ComplexCystType.MUCINOUS and result.final_size > 10:
        points += 3
        category = "O-RADS 4"
    if cyst_type == ComplexCystType.ENDOMETRIOMA:
        points += 1
        category = "O-RADS 2-3"
    if result.growth_velocity_cm_year > 2:
        points += 4
        category = "O-RADS 5"
    if case.pcos and cyst_type == ComplexCystType.ENDOMETRIOMA:
        points += 1

    if points <= 2:
        level = "Low risk"
    elif points <= 4:
        level = "Intermediate risk"
    else:
        level = "High risk"
    out.risk_stratification.append(f"IOTA Score: {points} ({level})")
    out.risk_stratification.append(f"O-RADS Category: {category}")


# =============================================================================
# TEXT REPORT
# =============================================================================

def explain_result(
    mass_type: MassType,
    case: ClinicalInput,
    result: GrowthResult,
    evidence: Optional[EvidenceBase] = None
) -> str:
    """
    Generate a plain-language report of a growth result.

    Returns text suitable for clinical notes.
    """
    mass_type = MassType(mass_type)
    lines = []

    lines.append(f"{mass_type.display_name.upper()} GROWTH PROJECTION")
    lines.append("=" * 40)
    lines.append("")
    if mass_type == MassType.ADENOMYOSIS and result.final_volume is not None:
        lines.append(f"Projected uterine volume: {result.final_volume:.1f} mL")
    else:
        lines.append(f"Current size: {case.current_size:.2f} cm")
    lines.append(f"Projected size at {result.projection_months} months: {result.final_size:.2f} cm")
    lines.append(f"Total change: {result.total_growth:+.2f} cm (±{result.confidence_interval:.2f} cm)")
    lines.append(f"Growth velocity: {result.growth_velocity_cm_year:+.2f} cm/year")
    lines.append(f"Behavior: {result.behavior}")
    if result.cystadenoma_growth_cm_year is not None:
        lines.append(f"Cystadenoma literature growth rate: {result.cystadenoma_growth_cm_year:.2f} cm/year")
    lines.append("")

    probabilities = [
        ("Resolution", result.resolution_probability),
        ("Recurrence", result.recurrence_probability),
        ("Malignancy risk", result.malignancy_risk),
        ("Progression", result.progression_probability),
    ]
    shown = [(name, p) for name, p in probabilities if p is not None]
    if shown:
        lines.append("PROBABILITIES:")
        for name, p in shown:
            lines.append(f"  • {name}: {p:.1f}%")
        lines.append("")

    if result.figo_classification is not None:
        figo = result.figo_classification
        lines.append(f"FIGO: {figo.name} - {figo.description} ({figo.risk_level} risk)")
    if result.orads_category:
        lines.append(f"O-RADS: {result.orads_category}")
    if result.roma_score is not None:
        lines.append(f"ROMA: {result.roma_score.score}% ({result.roma_score.risk_category.value})")
    if result.rmi_score is not None:
        lines.append(f"RMI: {result.rmi_score.display_score} ({result.rmi_score.risk_category.value})")
    if result.iota_assessment is not None:
        lines.append(f"IOTA Simple Rules: {result.iota_assessment.classification.value}")
    if result.musa_assessment is not None and mass_type == MassType.ADENOMYOSIS:
        lines.append(f"MUSA: {result.musa_assessment.severity} (score {result.musa_assessment.total_score})")

    active = result.active_risk_factors
    if active:
        lines.append("")
        lines.append("RISK FACTORS PRESENT:")
        for name in active:
            lines.append(f"  • {name.replace('_', ' ')}")

    lines.append("")
    lines.append("KEY TAKEAWAYS:")
    lines.extend(f"  {bullet}" for bullet in generate_clinical_summary(mass_type, case, result))

    warnings = generate_warnings(mass_type, case, result)
    if warnings:
        lines.append("")
        lines.append("WARNINGS:")
        for w in warnings:
            lines.append(f"  ⚠️ {w}")

    refs = get_references(mass_type, case, result, evidence)
    if refs:
        lines.append("")
        lines.append("EVIDENCE:")
        for ref in refs:
            lines.append(f"  {ref.format()}")

    lines.append("")
    lines.append(DISCLAIMER)

    return "\n".join(lines)
