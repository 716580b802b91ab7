import logging
from pathlib import Path

from app.errors import LabelLoadError

logger = logging.getLogger(__name__)

LABEL_SEPARATOR = "___"
UNKNOWN_PLANT = "Unknown Plant"
UNKNOWN_CONDITION = "Unknown Condition"

# PlantVillage classes in model output order
DEFAULT_LABELS: tuple[str, ...] = (
    "Apple___Apple_scab",
    "Apple___Black_rot",
    "Apple___Cedar_apple_rust",
    "Apple___healthy",
    "Blueberry___healthy",
    "Cherry_(including_sour)___Powdery_mildew",
    "Cherry_(including_sour)___healthy",
    "Corn_(maize)___Cercospora_leaf_spot Gray_leaf_spot",
    "Corn_(maize)___Common_rust_",
    "Corn_(maize)___Northern_Leaf_Blight",
    "Corn_(maize)___healthy",
    "Grape___Black_rot",
    "Grape___Esca_(Black_Measles)",
    "Grape___Leaf_blight_(Isariopsis_Leaf_Spot)",
    "Grape___healthy",
    "Orange___Haunglongbing_(Citrus_greening)",
    "Peach___Bacterial_spot",
    "Peach___healthy",
    "Pepper,_bell___Bacterial_spot",
    "Pepper,_bell___healthy",
    "Potato___Early_blight",
    "Potato___Late_blight",
    "Potato___healthy",
    "Raspberry___healthy",
    "Soybean___healthy",
    "Squash___Powdery_mildew",
    "Strawberry___Leaf_scorch",
    "Strawberry___healthy",
    "Tomato___Bacterial_spot",
    "Tomato___Early_blight",
    "Tomato___Late_blight",
    "Tomato___Leaf_Mold",
    "Tomato___Septoria_leaf_spot",
    "Tomato___Spider_mites Two-spotted_spider_mite",
    "Tomato___Target_Spot",
    "Tomato___Tomato_Yellow_Leaf_Curl_Virus",
    "Tomato___Tomato_mosaic_virus",
    "Tomato___healthy",
)


def _read_labels(path: Path) -> tuple[str, ...]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LabelLoadError(f"Cannot read labels from {path}: {e}") from e
    labels = tuple(line.strip() for line in text.splitlines() if line.strip())
    if not labels:
        raise LabelLoadError(f"No labels found in {path}")
    return labels


def load_labels(source: str | Path | None = None) -> tuple[str, ...]:
    """Load class names from a newline-delimited file.

    Falls back to DEFAULT_LABELS when the file is missing, unreadable or empty.
    """
    if source is None:
        return DEFAULT_LABELS
    try:
        labels = _read_labels(Path(source))
    except LabelLoadError as e:
        logger.warning("%s; using %d default labels", e, len(DEFAULT_LABELS))
        return DEFAULT_LABELS
    logger.info("Loaded %d labels from %s", len(labels), source)
    return labels


def split_label(label: str) -> tuple[str, str]:
    if LABEL_SEPARATOR not in label:
        return UNKNOWN_PLANT, UNKNOWN_CONDITION
    plant, disease = label.split(LABEL_SEPARATOR, 1)
    return plant, disease
