import re
from typing import List, NamedTuple, Pattern

PPI = "ppi"
NSAID = "nsaid"
ANTIHISTAMINE = "antihistamine"
ANTIBIOTIC = "antibiotic"


class DrugClass(NamedTuple):
    name: str
    pattern: Pattern
    note: str


# Order sets the order of per-medication notes
DRUG_CLASSES = (
    DrugClass(
        PPI,
        re.compile(r'(omep|panto|rabep|esomep)', re.IGNORECASE),
        "Take 30 minutes before breakfast",
    ),
    DrugClass(
        NSAID,
        re.compile(r'(ibuprofen|diclofenac|naproxen|aceclofenac)', re.IGNORECASE),
        "Take after food; may cause gastric irritation",
    ),
    DrugClass(
        ANTIHISTAMINE,
        re.compile(r'(cetirizine|levocet|fexofenadine|loratadine)', re.IGNORECASE),
        "May cause drowsiness; avoid driving",
    ),
    DrugClass(
        ANTIBIOTIC,
        re.compile(r'(amox|azith|doxy|clav|cef|cefi|cefix|oflox|levoflox|cipro|metronid)', re.IGNORECASE),
        "Complete the full course; do not skip doses",
    ),
)


def classify(*texts: str) -> List[DrugClass]:
    """Drug classes matched by any of the given strings, in table order."""
    return [
        drug_class for drug_class in DRUG_CLASSES
        if any(text and drug_class.pattern.search(text) for text in texts)
    ]
