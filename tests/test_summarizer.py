from app.services import summarizer as summarizer_module
from app.services.summarizer import (
    ClinicalSummarizer, RED_FLAG_ADVISORY, SUGGESTIONS, VITAL_PROBES
)


def summarize(text):
    return ClinicalSummarizer().summarize(text)


def probe(key):
    return next(p for p in VITAL_PROBES if p.key == key)


def test_blood_pressure_probe():
    assert probe("bloodPressure").read("BP: 150/95") == "150/95"
    assert probe("bloodPressure").read("Blood Pressure - 130/85 mmHg") == "130/85"
    assert probe("bloodPressure").read("no reading here") is None


def test_glucose_probe_adds_unit():
    assert probe("glucose").read("FBS: 132") == "132 mg/dL"
    assert probe("glucose").read("Fasting Glucose 98 mg/dL") == "98 mg/dL"


def test_hba1c_and_cholesterol_probes():
    assert probe("hba1c").read("HbA1c: 7.1%") == "7.1 %"
    assert probe("hba1c").read("A1C 6.0") == "6.0 %"
    assert probe("totalCholesterol").read("Total Cholesterol: 240 mg/dL") == "240 mg/dL"


def test_vitals_are_independent():
    summary = summarize("BP 120/80\nHbA1c: 5.4\nno glucose value reported")

    assert summary.key_vitals == {"bloodPressure": "120/80", "hba1c": "5.4 %"}


def test_absent_vitals_leave_no_keys():
    summary = summarize("")

    assert summary.key_vitals == {}
    assert summary.possible_conditions == []
    assert summary.red_flags == []


def test_condition_rules_follow_table_order():
    summary = summarize("History of asthma. Known diabetes. Hypertension on treatment.")

    assert summary.possible_conditions == ["Hypertension", "Diabetes risk", "Asthma"]


def test_hyperlipidemia_keyword():
    assert summarize("Patient reports high cholesterol").possible_conditions == ["Hyperlipidemia"]


def test_hba1c_threshold_phrase():
    assert "Diabetes risk" in summarize("HbA1c > 6.5 noted").possible_conditions


def test_elevated_readings_infer_conditions():
    summary = summarize("BP: 150/95\nFBS: 180")

    assert summary.possible_conditions == ["Hypertension", "Diabetes risk"]


def test_normal_readings_infer_nothing():
    summary = summarize("BP: 118/76\nFBS: 92\nHbA1c: 5.2")

    assert summary.possible_conditions == []


def test_hypertension_phrase_and_high_glucose_are_additive():
    summary = summarize("Known case of high blood pressure\nGlucose: 210 mg/dL")

    assert "Hypertension" in summary.possible_conditions
    assert "Diabetes risk" in summary.possible_conditions


def test_red_flags_are_existence_only():
    summary = summarize("Complains of chest pain and fainting, blood in urine")

    assert summary.red_flags == [RED_FLAG_ADVISORY]


def test_suggestions_are_constant():
    assert summarize("anything").suggestions == list(SUGGESTIONS)
    assert summarize(None).suggestions == list(SUGGESTIONS)


def test_failing_rule_returns_partial_summary(monkeypatch):
    class BrokenRule:
        label = "Broken"

        def matches(self, text, key_vitals):
            raise RuntimeError("bad rule")

    monkeypatch.setattr(summarizer_module, "CONDITION_RULES", (BrokenRule(),))

    summary = summarize("BP: 140/90 chest pain")

    assert summary.key_vitals == {"bloodPressure": "140/90"}
    assert summary.possible_conditions == []
    assert summary.suggestions == list(SUGGESTIONS)
