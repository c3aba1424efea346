import logging
import re
from typing import Callable, Dict, NamedTuple, Optional, Pattern

from ..models import ClinicalSummary

logger = logging.getLogger(__name__)

BLOOD_PRESSURE = "bloodPressure"
GLUCOSE = "glucose"
HBA1C = "hba1c"
TOTAL_CHOLESTEROL = "totalCholesterol"

# Heuristic cut-offs for the vital-based condition rules
SYSTOLIC_THRESHOLD = 140    # mmHg
DIASTOLIC_THRESHOLD = 90    # mmHg
GLUCOSE_THRESHOLD = 126.0   # mg/dL, fasting
HBA1C_THRESHOLD = 6.5       # %


class VitalProbe(NamedTuple):
    key: str
    pattern: Pattern
    template: str

    def read(self, text: str) -> Optional[str]:
        match = self.pattern.search(text)
        if not match:
            return None
        return self.template.format(*match.groups())


class ConditionRule(NamedTuple):
    label: str
    pattern: Pattern
    vital_check: Optional[Callable[[Dict[str, str]], bool]] = None

    def matches(self, text: str, key_vitals: Dict[str, str]) -> bool:
        if self.pattern.search(text):
            return True
        return bool(self.vital_check and self.vital_check(key_vitals))


def _reading(key_vitals: Dict[str, str], key: str) -> Optional[float]:
    value = key_vitals.get(key)
    if not value:
        return None
    try:
        return float(value.split()[0])
    except ValueError:
        return None


def _hypertensive_range(key_vitals: Dict[str, str]) -> bool:
    value = key_vitals.get(BLOOD_PRESSURE)
    if not value:
        return False
    systolic, diastolic = (int(part) for part in value.split("/"))
    return systolic >= SYSTOLIC_THRESHOLD or diastolic >= DIASTOLIC_THRESHOLD


def _diabetic_range(key_vitals: Dict[str, str]) -> bool:
    glucose = _reading(key_vitals, GLUCOSE)
    hba1c = _reading(key_vitals, HBA1C)
    return (
        (glucose is not None and glucose >= GLUCOSE_THRESHOLD)
        or (hba1c is not None and hba1c >= HBA1C_THRESHOLD)
    )


VITAL_PROBES = (
    VitalProbe(
        BLOOD_PRESSURE,
        re.compile(r'(?:\bBP|Blood\s*Pressure)\s*[:\-]?\s*(\d{2,3})/(\d{2,3})', re.IGNORECASE),
        "{0}/{1}",
    ),
    VitalProbe(
        GLUCOSE,
        re.compile(r'(?:\bFBS|Fasting\s*Glucose|Glucose)\s*[:\-]?\s*(\d{2,3})', re.IGNORECASE),
        "{0} mg/dL",
    ),
    VitalProbe(
        HBA1C,
        re.compile(r'(?:HbA1c|\bA1C)\s*[:\-]?\s*(\d{1,2}\.\d)', re.IGNORECASE),
        "{0} %",
    ),
    VitalProbe(
        TOTAL_CHOLESTEROL,
        re.compile(r'(?:Total\s*Cholesterol|Cholesterol)\s*[:\-]?\s*(\d{2,3})', re.IGNORECASE),
        "{0} mg/dL",
    ),
)

CONDITION_RULES = (
    ConditionRule(
        "Hypertension",
        re.compile(r'(hypertension|high blood pressure)', re.IGNORECASE),
        _hypertensive_range,
    ),
    ConditionRule(
        "Diabetes risk",
        re.compile(r'(diabetes|hyperglycemia|hba1c\s*[>≥]\s*6\.?5?)', re.IGNORECASE),
        _diabetic_range,
    ),
    ConditionRule(
        "Hyperlipidemia",
        re.compile(r'(hyperlipidemia|high cholesterol)', re.IGNORECASE),
    ),
    ConditionRule(
        "Asthma",
        re.compile(r'(asthma|wheezing)', re.IGNORECASE),
    ),
)

RED_FLAG_PATTERNS = (
    re.compile(r'(chest pain|shortness of breath|severe headache|vision loss)', re.IGNORECASE),
    re.compile(r'(blood in stool|blood in urine)', re.IGNORECASE),
    re.compile(r'(unexplained weight loss|fainting)', re.IGNORECASE),
)

RED_FLAG_ADVISORY = "Potential urgent symptoms present"

SUGGESTIONS = (
    "Maintain a balanced diet, regular exercise (150 min/week), and adequate sleep (7-9h).",
    "Schedule follow-up with your physician for abnormal labs or persistent symptoms.",
    "Keep an updated list of medications and allergies.",
)


class ClinicalSummarizer:
    """Keyword and pattern heuristics over extracted document text."""

    def summarize(self, text: str) -> ClinicalSummary:
        text = text or ""
        key_vitals: Dict[str, str] = {}
        conditions = []
        red_flags = []

        try:
            for probe in VITAL_PROBES:
                value = probe.read(text)
                if value:
                    key_vitals[probe.key] = value

            for rule in CONDITION_RULES:
                if rule.matches(text, key_vitals):
                    conditions.append(rule.label)

            if any(pattern.search(text) for pattern in RED_FLAG_PATTERNS):
                red_flags.append(RED_FLAG_ADVISORY)
        except Exception:
            logger.exception("Clinical summary incomplete, returning partial result")

        return ClinicalSummary(
            key_vitals=key_vitals,
            possible_conditions=conditions,
            red_flags=red_flags,
            suggestions=list(SUGGESTIONS)
        )
