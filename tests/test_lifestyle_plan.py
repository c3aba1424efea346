from app.models import ClinicalSummary, Medication, Prescription
from app.services.lifestyle_plan import (
    DEFAULT_DIET_FOCUS, DEFAULT_DIET_TIP, DEFAULT_MONITORING, LifestylePlanBuilder
)

builder = LifestylePlanBuilder()


def build(conditions=(), vitals=None, meds=(), red_flags=()):
    summary = ClinicalSummary(
        key_vitals=vitals or {},
        possible_conditions=list(conditions),
        red_flags=list(red_flags)
    )
    prescription = Prescription(medications=[Medication(name=name) for name in meds])
    return builder.build_plan(summary, prescription)


def test_defaults_without_findings():
    plan = build()

    assert plan.diet.focus == [DEFAULT_DIET_FOCUS]
    assert plan.diet.tips == [DEFAULT_DIET_TIP]
    assert plan.diet.avoid == []
    assert plan.monitoring.checks == [DEFAULT_MONITORING]
    assert plan.sleep.notes is None
    assert plan.activity.target_minutes_per_week == 150
    assert plan.reminders.meds == []
    assert plan.reminders.general == ["Keep an updated list of medications and allergies"]
    assert plan.red_flags == []


def test_glucose_reading_triggers_diabetes_rule():
    plan = build(vitals={"glucose": "110 mg/dL"})

    assert plan.diet.focus[0].startswith("Low-glycemic")
    assert "Sugary drinks, refined carbs, large dessert portions" in plan.diet.avoid
    assert len(plan.monitoring.checks) == 2
    assert "Distribute carbs evenly across meals" in plan.reminders.general
    assert any("post-meal walks" in tip for tip in plan.activity.tips)


def test_any_bp_reading_triggers_hypertension_rule():
    plan = build(vitals={"bloodPressure": "118/76"})

    assert plan.diet.focus == ["DASH-style diet: fruits, vegetables, low-fat dairy"]
    assert plan.monitoring.checks == ["Home blood pressure log 3-4 days/week"]


def test_diabetes_and_hypertension_rules_combine():
    plan = build(conditions=["Hypertension", "Diabetes risk"])

    assert any(item.startswith("Low-glycemic") for item in plan.diet.focus)
    assert any(item.startswith("DASH-style") for item in plan.diet.focus)
    assert len(plan.activity.tips) == 2
    assert DEFAULT_DIET_FOCUS not in plan.diet.focus


def test_cholesterol_reading_triggers_lipid_rule():
    plan = build(vitals={"totalCholesterol": "240 mg/dL"})

    assert "Trans fats, deep-fried foods, excess red meat" in plan.diet.avoid
    assert plan.monitoring.checks == ["Fasting lipid profile every 3-6 months"]


def test_asthma_rule():
    plan = build(conditions=["Asthma"])

    assert plan.activity.cautions == ["Avoid triggers; warm up; carry rescue inhaler if prescribed"]
    assert "Check inhaler technique and spacer use" in plan.reminders.general


def test_ppi_medication():
    plan = build(meds=["PANTOPRAZOLE"])

    assert plan.sleep.notes == "Elevate head of bed if night reflux"
    assert plan.diet.focus == ["Small, frequent meals; last meal 3 hours before bed"]
    assert "Spicy, fatty foods; caffeine; late-night meals" in plan.diet.avoid


def test_antibiotic_medication():
    plan = build(meds=["Amoxicillin"])

    assert "Extra fluids while on antibiotics" in plan.hydration.tips
    assert plan.reminders.meds == ["Complete the full antibiotic course; do not skip doses"]


def test_antihistamine_is_not_an_antibiotic():
    plan = build(meds=["Levocetirizine"])

    assert plan.reminders.meds == []


def test_nsaid_medication_replaces_default_tip():
    plan = build(meds=["Ibuprofen"])

    assert plan.diet.tips == ["Take NSAIDs after food to reduce gastric irritation"]


def test_red_flags_are_a_snapshot():
    summary = ClinicalSummary(red_flags=["Potential urgent symptoms present"])
    plan = builder.build_plan(summary, Prescription())

    summary.red_flags.append("added later")
    summary.red_flags.clear()

    assert plan.red_flags == ["Potential urgent symptoms present"]


def test_build_is_deterministic_and_leaves_inputs_alone():
    summary = ClinicalSummary(
        key_vitals={"bloodPressure": "150/95"},
        possible_conditions=["Hypertension"]
    )
    prescription = Prescription(medications=[Medication(name="Omeprazole")])
    before = (summary.model_dump(), prescription.model_dump())

    first = builder.build_plan(summary, prescription)
    second = builder.build_plan(summary, prescription)

    assert first == second
    assert (summary.model_dump(), prescription.model_dump()) == before
