import re

from ..models import (
    ActivityPlan, ClinicalSummary, DietPlan, HydrationPlan, LifestylePlan,
    MonitoringPlan, Prescription, ReminderPlan, SleepPlan
)
from .drug_classes import ANTIBIOTIC, NSAID, PPI, classify
from .summarizer import BLOOD_PRESSURE, GLUCOSE, HBA1C, TOTAL_CHOLESTEROL

# Any reading counts, not only elevated ones
BP_READING = re.compile(r'\b\d{2,3}/\d{2,3}\b')

SLEEP_TARGET = "7-9 hours/night"
SLEEP_SCHEDULE = "Consistent bedtime and wake time (+/- 30 minutes)"
HYDRATION_TARGET = "2-3 L/day"
ACTIVITY_MINUTES = 150
ACTIVITY_TYPES = ("Brisk walk", "Cycling", "Swimming", "Light strength training")

DEFAULT_DIET_FOCUS = "Balanced plate: 1/2 vegetables, 1/4 protein, 1/4 whole grains"
DEFAULT_DIET_TIP = "Limit added sugar and ultra-processed foods"
DEFAULT_MONITORING = "Annual physical with basic labs"


class LifestylePlanBuilder:
    """Rule table mapping detected conditions and medications to daily-life advice."""

    def build_plan(self, summary: ClinicalSummary, prescription: Prescription) -> LifestylePlan:
        conditions = set(summary.possible_conditions)
        vitals = summary.key_vitals
        classes = {
            drug_class.name
            for medication in prescription.medications
            for drug_class in classify(medication.name)
        }

        sleep_notes = None
        focus, avoid, diet_tips = [], [], []
        hydration_tips = ["Increase during fever or hot weather"]
        cautions, activity_tips = [], []
        checks = []
        med_reminders = []
        general_reminders = ["Keep an updated list of medications and allergies"]

        if "Diabetes risk" in conditions or GLUCOSE in vitals or HBA1C in vitals:
            focus.append("Low-glycemic whole foods: vegetables, legumes, whole grains, lean protein")
            avoid.append("Sugary drinks, refined carbs, large dessert portions")
            activity_tips.append("Aim for 30 min/day; include post-meal walks (10-15 min)")
            checks.extend([
                "Fasting glucose 1-2x/week or as advised",
                "HbA1c every 3 months if uncontrolled",
            ])
            general_reminders.append("Distribute carbs evenly across meals")

        if "Hypertension" in conditions or BP_READING.search(vitals.get(BLOOD_PRESSURE, "")):
            focus.append("DASH-style diet: fruits, vegetables, low-fat dairy")
            avoid.append("Excess salt (>5g/day), processed foods, excess alcohol")
            activity_tips.append("150-300 min/week moderate cardio")
            checks.append("Home blood pressure log 3-4 days/week")

        if "Hyperlipidemia" in conditions or TOTAL_CHOLESTEROL in vitals:
            focus.append("High-fiber foods (oats, beans), nuts, olive oil, fish 2x/week")
            avoid.append("Trans fats, deep-fried foods, excess red meat")
            checks.append("Fasting lipid profile every 3-6 months")

        if "Asthma" in conditions:
            cautions.append("Avoid triggers; warm up; carry rescue inhaler if prescribed")
            general_reminders.append("Check inhaler technique and spacer use")

        # Acid reducers hint at GERD or gastritis
        if PPI in classes:
            focus.append("Small, frequent meals; last meal 3 hours before bed")
            avoid.append("Spicy, fatty foods; caffeine; late-night meals")
            sleep_notes = "Elevate head of bed if night reflux"

        if ANTIBIOTIC in classes:
            hydration_tips.append("Extra fluids while on antibiotics")
            med_reminders.append("Complete the full antibiotic course; do not skip doses")

        if NSAID in classes:
            diet_tips.append("Take NSAIDs after food to reduce gastric irritation")

        if not focus:
            focus.append(DEFAULT_DIET_FOCUS)
        if not diet_tips:
            diet_tips.append(DEFAULT_DIET_TIP)
        if not checks:
            checks.append(DEFAULT_MONITORING)

        return LifestylePlan(
            sleep=SleepPlan(target_hours=SLEEP_TARGET, schedule=SLEEP_SCHEDULE, notes=sleep_notes),
            diet=DietPlan(focus=focus, avoid=avoid, tips=diet_tips),
            hydration=HydrationPlan(target_liters=HYDRATION_TARGET, tips=hydration_tips),
            activity=ActivityPlan(
                target_minutes_per_week=ACTIVITY_MINUTES,
                types=list(ACTIVITY_TYPES),
                cautions=cautions,
                tips=activity_tips
            ),
            monitoring=MonitoringPlan(checks=checks),
            reminders=ReminderPlan(meds=med_reminders, general=general_reminders),
            # snapshot, later edits to the summary must not leak in
            red_flags=list(summary.red_flags)
        )
