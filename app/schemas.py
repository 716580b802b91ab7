from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    model_loaded: bool
    model_error: str | None = None
    model_diagnostics: dict | None = None
    labels: int = 0


class LabelsResponse(BaseModel):
    labels: list[str]


class Diagnosis(BaseModel):
    display_name: str
    description: str
    remedy: str


class PredictResponse(BaseModel):
    label: str | None
    class_index: int
    confidence: float
    confidence_tier: str
    confidence_message: str
    is_healthy: bool
    diagnosis: Diagnosis
