import logging

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from app.config import settings
from app.errors import DecodeError, InferenceError, PlantDocError
from app.model import get_model_diagnostics
from app.pipeline import PlantDoctor
from app.results import confidence_message
from app.schemas import Diagnosis, HealthResponse, LabelsResponse, PredictResponse

app = FastAPI(title="PlantDoc API", version="1.0.0")
app.state.doctor = None
app.state.model_error = None


@app.on_event("startup")
def startup():
    try:
        app.state.doctor = PlantDoctor.from_settings(settings)
        app.state.model_error = None
        logger.info("Model loaded successfully")
    except PlantDocError as e:
        app.state.doctor = None
        app.state.model_error = f"{type(e).__name__}: {e}"
        logger.exception("Model failed to load: %s", e)


@app.on_event("shutdown")
def shutdown():
    if app.state.doctor is not None:
        app.state.doctor.close()
        app.state.doctor = None


def _doctor(request: Request) -> PlantDoctor:
    doctor = request.app.state.doctor
    if doctor is None:
        raise HTTPException(status_code=503, detail="Model not loaded")
    return doctor


@app.get("/health", response_model=HealthResponse)
def health(request: Request):
    doctor = request.app.state.doctor
    if doctor is not None:
        return HealthResponse(status="ok", model_loaded=True, labels=len(doctor.labels))
    return HealthResponse(
        status="ok",
        model_loaded=False,
        model_error=request.app.state.model_error,
        model_diagnostics=get_model_diagnostics(settings.model_path),
    )


@app.get("/labels", response_model=LabelsResponse)
def labels(request: Request):
    return LabelsResponse(labels=list(_doctor(request).labels))


@app.post("/predict", response_model=PredictResponse)
async def predict_endpoint(request: Request, file: UploadFile = File(...)):
    doctor = _doctor(request)
    raw = await file.read()
    try:
        result = await run_in_threadpool(doctor.analyze, raw)
    except DecodeError as e:
        raise HTTPException(status_code=400, detail=f"Invalid image: {e}")
    except InferenceError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return PredictResponse(
        label=result.label,
        class_index=result.class_index,
        confidence=result.confidence,
        confidence_tier=result.confidence_tier,
        confidence_message=confidence_message(result.confidence, doctor.index.language),
        is_healthy=result.is_healthy,
        diagnosis=Diagnosis(
            display_name=result.diagnosis.display_name,
            description=result.diagnosis.description,
            remedy=result.diagnosis.remedy,
        ),
    )
