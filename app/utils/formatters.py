from typing import List, Optional

from ..models import AnalysisResult

MAX_MEDICATIONS = 8
CLOSING_NOTE = "Note: Always follow your doctor's advice. This summary is AI-generated from the document text."
DISCLAIMER = (
    "Disclaimer: This is an automated summary to help you understand your document. "
    "It is not medical advice or a diagnosis."
)


def _labelled(pairs) -> List[str]:
    return [f"{label} {value}" for label, value in pairs if value]


def format_chat_reply(result: AnalysisResult, file_name: Optional[str] = None) -> str:
    """Render an analysis as the plain-text message the chatbot posts back."""
    prescription = result.prescription
    plan = result.lifestyle_plan
    header = prescription.header
    vitals = prescription.vitals

    lines = [f'Analyzed "{file_name}"' if file_name else "Analyzed document", ""]

    header_bits = _labelled([
        ("Patient:", header.patient),
        ("Age:", header.age),
        ("Sex:", header.sex),
        ("Date:", header.date),
    ])
    if header_bits:
        lines.append(f"Header: {' | '.join(header_bits)}")

    vitals_bits = _labelled([
        ("BP", vitals.bp),
        ("Pulse", vitals.pulse),
        ("SpO2", vitals.spo2),
        ("Temp", vitals.temp),
    ])
    if vitals_bits:
        lines.append(f"Vitals: {' | '.join(vitals_bits)}")

    medications = prescription.medications[:MAX_MEDICATIONS]
    if medications:
        lines.append("")
        lines.append("Prescription Summary:")
        for idx, med in enumerate(medications, 1):
            parts = [p for p in (med.name, med.strength, med.frequency, med.duration) if p]
            notes = f" (Notes: {'; '.join(med.notes)})" if med.notes else ""
            lines.append(f"  {idx}. {' • '.join(parts)}{notes}")
    else:
        lines.append("")
        lines.append("No clear medications detected.")

    if prescription.instructions:
        lines.append("")
        lines.append("General Instructions:")
        lines.extend(f"  • {instruction}" for instruction in prescription.instructions)

    lines.append("")
    lines.append("Lifestyle Guidance:")
    diet = plan.diet
    lines.append("Diet:")
    if diet.focus:
        lines.append(f"  • Focus: {'; '.join(diet.focus[:6])}")
    if diet.avoid:
        lines.append(f"  • Avoid: {'; '.join(diet.avoid[:6])}")
    if diet.tips:
        lines.append(f"  • Tips: {' | '.join(diet.tips[:3])}")

    sleep_bits = [f"Target {plan.sleep.target_hours}", plan.sleep.schedule]
    if plan.sleep.notes:
        sleep_bits.append(plan.sleep.notes)
    lines.append(f"Sleep: {' | '.join(sleep_bits)}")

    hydration = plan.hydration.target_liters
    if plan.hydration.tips:
        hydration += " • " + " | ".join(plan.hydration.tips[:2])
    lines.append(f"Hydration: {hydration}")

    activity = f"Activity: Aim {plan.activity.target_minutes_per_week} min/week"
    if plan.activity.types:
        activity += f" • Types: {', '.join(plan.activity.types[:3])}"
    if plan.activity.cautions:
        activity += f" • Caution: {'; '.join(plan.activity.cautions[:2])}"
    lines.append(activity)

    if plan.monitoring.checks:
        lines.append(f"Monitoring: {' | '.join(plan.monitoring.checks[:4])}")
    if plan.reminders.general:
        lines.append(f"Reminders: {' | '.join(plan.reminders.general[:2])}")
    if plan.reminders.meds:
        lines.append(f"Medication reminders: {' | '.join(plan.reminders.meds[:2])}")

    if result.summary.red_flags:
        lines.append("")
        lines.append(f"Red flags noted: {'; '.join(result.summary.red_flags)}")

    lines.append("")
    lines.append(CLOSING_NOTE)
    return "\n".join(lines)
