from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Dict, List, Optional
from enum import Enum


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase JSON"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FileType(str, Enum):
    PDF = "pdf"
    IMAGE = "image"
    DICOM = "dicom"
    UNKNOWN = "unknown"


class AnalysisInput(BaseModel):
    data: bytes
    original_file_name: str
    declared_mime_type: str = "application/octet-stream"


class ExtractionResult(CamelModel):
    file_type: FileType
    extracted_text: str = ""


class ClinicalSummary(CamelModel):
    # keys: bloodPressure, glucose, hba1c, totalCholesterol
    key_vitals: Dict[str, str] = Field(default_factory=dict)
    possible_conditions: List[str] = Field(default_factory=list)
    red_flags: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


class PrescriptionHeader(CamelModel):
    patient: Optional[str] = None
    age: Optional[str] = None
    sex: Optional[str] = None
    date: Optional[str] = None


class Vitals(CamelModel):
    bp: Optional[str] = None
    pulse: Optional[str] = None
    spo2: Optional[str] = None
    temp: Optional[str] = None

    def is_empty(self) -> bool:
        return not any((self.bp, self.pulse, self.spo2, self.temp))


class Medication(CamelModel):
    name: str = Field(..., min_length=1)
    form: Optional[str] = None
    strength: Optional[str] = None
    frequency: Optional[str] = None
    duration: Optional[str] = None
    notes: List[str] = Field(default_factory=list)


class Prescription(CamelModel):
    header: PrescriptionHeader = Field(default_factory=PrescriptionHeader)
    vitals: Vitals = Field(default_factory=Vitals)
    medications: List[Medication] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)


class SleepPlan(CamelModel):
    target_hours: str
    schedule: str
    notes: Optional[str] = None


class DietPlan(CamelModel):
    focus: List[str] = Field(default_factory=list)
    avoid: List[str] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)


class HydrationPlan(CamelModel):
    target_liters: str
    tips: List[str] = Field(default_factory=list)


class ActivityPlan(CamelModel):
    target_minutes_per_week: int
    types: List[str] = Field(default_factory=list)
    cautions: List[str] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)


class MonitoringPlan(CamelModel):
    checks: List[str] = Field(default_factory=list)


class ReminderPlan(CamelModel):
    meds: List[str] = Field(default_factory=list)
    general: List[str] = Field(default_factory=list)


class LifestylePlan(CamelModel):
    sleep: SleepPlan
    diet: DietPlan
    hydration: HydrationPlan
    activity: ActivityPlan
    monitoring: MonitoringPlan
    reminders: ReminderPlan
    red_flags: List[str] = Field(default_factory=list)


class AnalysisResult(CamelModel):
    success: bool = True
    file_type: FileType
    extracted_text: str
    summary: ClinicalSummary
    prescription: Prescription
    lifestyle_plan: LifestylePlan


class ErrorResult(CamelModel):
    success: bool = False
    message: str
    status_code: int = Field(default=500, exclude=True)


class ChatAnalysisResponse(CamelModel):
    success: bool = True
    reply: str
    analysis: AnalysisResult
