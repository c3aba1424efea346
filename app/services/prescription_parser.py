import logging
import re
from types import MappingProxyType
from typing import List, Optional

from ..models import Medication, Prescription, PrescriptionHeader, Vitals
from .drug_classes import ANTIBIOTIC, PPI, classify

logger = logging.getLogger(__name__)

HEADER_LINES = 10

FREQUENCY_PHRASES = MappingProxyType({
    'od': 'once daily',
    'bd': 'twice daily',
    'tid': 'three times daily',
    'qid': 'four times daily',
    'hs': 'at bedtime',
    'sos': 'as needed',
})

FORM_PATTERN = re.compile(
    r'^(tab(?:let)?s?|cap(?:sule)?s?|syr(?:up)?|inj(?:ection)?|drops?|cream|gel|ointment)\b\.?\s*',
    re.IGNORECASE
)
BULLET_PATTERN = re.compile(r'^[-•*]+\s*')
NUMBERING_PATTERN = re.compile(r'^\d{1,2}[.)]\s+')
FREQUENCY_PATTERN = re.compile(
    r'\b(1-1-1|1-0-1|1-0-0|0-1-1|0-0-1|0-1-0|1-1-0|od|bd|tid|qid|hs|sos)\b',
    re.IGNORECASE
)
DURATION_PATTERN = re.compile(r'\b(?:for\s+)?(\d{1,2})\s*(days?|weeks?)\b', re.IGNORECASE)
STRENGTH_PATTERN = re.compile(r'\b(\d+(?:\.\d+)?\s*(?:mg|mcg|g|ml))\b', re.IGNORECASE)
NAME_PATTERN = re.compile(r'^[A-Za-z][A-Za-z0-9+\- ]{2,49}')

PATIENT_PATTERN = re.compile(
    r'(?:\b(?:Mrs|Mr|Ms)\b\.?|\bName\b)\s*[:\-]?\s*(?:(?:Mrs|Mr|Ms)\b\.?\s*)?([A-Za-z ]{2,40})',
    re.IGNORECASE
)
# Labels that follow the patient name once header lines are joined
NAME_STOP_PATTERN = re.compile(r'\s+\b(?:Age|Sex|Gender|Date|Dt|Dated|M|F|Male|Female)\b.*$', re.IGNORECASE)
AGE_PATTERN = re.compile(r'\bAge\s*[:\-]?\s*(\d{1,3})', re.IGNORECASE)
SEX_PATTERN = re.compile(r'\b(Male|Female|M|F)\b', re.IGNORECASE)
DATE_PATTERN = re.compile(
    r'\b(?:Dated|Date|Dt)\.?\s*[:\-]?\s*([0-3]?\d[/\-.][01]?\d[/\-.](?:\d{4}|\d{2}))',
    re.IGNORECASE
)

BP_PATTERN = re.compile(r'(?:\bBP|Blood\s*Pressure)\s*[:\-]?\s*(\d{2,3})\s*/?\s*(\d{2,3})', re.IGNORECASE)
PULSE_PATTERN = re.compile(r'\b(?:Pulse|HR)\s*[:\-]?\s*(\d{2,3})', re.IGNORECASE)
SPO2_PATTERN = re.compile(r'(?:\bSpO2|\bO2)\s*[:\-]?\s*(\d{2})', re.IGNORECASE)
TEMP_PATTERN = re.compile(r'\b(?:Temperature|Temp)\s*[:\-]?\s*(\d{2,3}(?:\.\d{1,2})?)', re.IGNORECASE)

ANTIBIOTIC_INSTRUCTION = "Antibiotic prescribed: complete the full course even if you feel better."
PPI_INSTRUCTION = "Acid-reducer noted: take before breakfast for best effect."
VITALS_INSTRUCTION = "Vitals not clearly captured; double-check BP, pulse, and temperature if noted."


def split_lines(text: str) -> List[str]:
    lines = (line.strip() for line in (text or "").replace('\r', '').split('\n'))
    return [line for line in lines if line]


def is_medication_line(line: str) -> bool:
    return bool(
        FORM_PATTERN.match(line)
        or BULLET_PATTERN.match(line)
        or FREQUENCY_PATTERN.search(line)
    )


def translate_frequency(token: str) -> str:
    token = token.lower()
    return FREQUENCY_PHRASES.get(token, token)


def _collapse(value: str) -> str:
    return re.sub(r'\s{2,}', ' ', value).strip()


class PrescriptionParser:
    """Line-oriented heuristics for OCR'd or typed prescriptions."""

    def parse(self, text: str) -> Prescription:
        lines = split_lines(text)
        header = PrescriptionHeader()
        vitals = Vitals()
        medications: List[Medication] = []
        instructions: List[str] = []

        try:
            header = self.parse_header(lines)
            vitals = self.parse_vitals(' '.join(lines))

            for line in lines:
                if not is_medication_line(line):
                    continue
                medication = self.parse_medication_line(line)
                if medication:
                    medications.append(medication)

            instructions = self.build_instructions(medications, vitals)
        except Exception:
            logger.exception("Prescription parsing incomplete, returning partial result")

        return Prescription(
            header=header,
            vitals=vitals,
            medications=medications,
            instructions=instructions
        )

    @staticmethod
    def parse_header(lines: List[str]) -> PrescriptionHeader:
        header_text = ' '.join(lines[:HEADER_LINES])
        header = {}

        match = PATIENT_PATTERN.search(header_text)
        if match:
            patient = NAME_STOP_PATTERN.sub('', match.group(1)).strip()
            if patient:
                header['patient'] = _collapse(patient)

        match = AGE_PATTERN.search(header_text)
        if match:
            header['age'] = match.group(1)

        match = SEX_PATTERN.search(header_text)
        if match:
            header['sex'] = match.group(1)

        match = DATE_PATTERN.search(header_text)
        if match:
            header['date'] = match.group(1)

        return PrescriptionHeader(**header)

    @staticmethod
    def parse_vitals(joined: str) -> Vitals:
        vitals = {}

        match = BP_PATTERN.search(joined)
        if match:
            vitals['bp'] = f"{match.group(1)}/{match.group(2)}"

        match = PULSE_PATTERN.search(joined)
        if match:
            vitals['pulse'] = f"{match.group(1)} bpm"

        match = SPO2_PATTERN.search(joined)
        if match:
            vitals['spo2'] = f"{match.group(1)} %"

        match = TEMP_PATTERN.search(joined)
        if match:
            vitals['temp'] = f"{match.group(1)} °C"

        return Vitals(**vitals)

    @staticmethod
    def parse_medication_line(line: str) -> Optional[Medication]:
        """
        Parse one candidate line such as ``Tab. Metformin 500mg 1-0-1 for 10 days``.

        The drug name is whatever precedes the strength, frequency or
        duration. Lines without a usable name return None.
        """
        body = _collapse(NUMBERING_PATTERN.sub('', BULLET_PATTERN.sub('', line)))

        form = None
        form_match = FORM_PATTERN.match(body)
        if form_match:
            form = form_match.group(1).lower()
            body = body[form_match.end():]

        frequency_match = FREQUENCY_PATTERN.search(body)
        duration_match = DURATION_PATTERN.search(body)

        # The name and strength sit before the dosing details
        cut = len(body)
        for match in (frequency_match, duration_match):
            if match:
                cut = min(cut, match.start())
        head = body[:cut]

        strength = None
        strength_match = STRENGTH_PATTERN.search(head)
        if strength_match:
            strength = strength_match.group(1)
            head = head[:strength_match.start()]

        name_match = NAME_PATTERN.match(head.strip())
        name = _collapse(name_match.group(0)).strip(' -') if name_match else ''
        if len(name) < 3:
            return None

        frequency = translate_frequency(frequency_match.group(1)) if frequency_match else None
        duration = None
        if duration_match:
            duration = f"{duration_match.group(1)} {duration_match.group(2).lower()}"

        notes = [drug_class.note for drug_class in classify(line, name)]

        return Medication(
            name=name,
            form=form,
            strength=strength,
            frequency=frequency,
            duration=duration,
            notes=notes
        )

    @staticmethod
    def build_instructions(medications: List[Medication], vitals: Vitals) -> List[str]:
        instructions = []
        classes = {drug_class.name for m in medications for drug_class in classify(m.name)}

        if ANTIBIOTIC in classes:
            instructions.append(ANTIBIOTIC_INSTRUCTION)
        if PPI in classes:
            instructions.append(PPI_INSTRUCTION)
        if vitals.is_empty():
            instructions.append(VITALS_INSTRUCTION)

        return instructions
