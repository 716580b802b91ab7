import logging
from typing import Sequence

from app.config import Settings
from app.diagnostics import DiagnosticIndex, build_diagnostic_index
from app.errors import InferenceError
from app.labels import load_labels
from app.model import ModelHandle, fetch_model_asset, load_model, preprocess_image
from app.results import ClassificationResult, interpret

logger = logging.getLogger(__name__)


class PlantDoctor:
    """Owns the model handle plus the reference data one diagnosis needs."""

    def __init__(self, handle: ModelHandle, labels: Sequence[str], index: DiagnosticIndex):
        self.handle = handle
        self.labels = tuple(labels)
        self.index = index
        if handle.num_classes != len(self.labels):
            logger.warning(
                "Model has %d outputs but %d labels are loaded", handle.num_classes, len(self.labels)
            )

    @classmethod
    def from_settings(cls, settings: Settings) -> "PlantDoctor":
        labels = load_labels(settings.labels_path)
        index = build_diagnostic_index(settings.language)
        fetch_model_asset(settings.model_path, settings.hub_repo_id, settings.hub_filename, settings.hf_token)
        return cls(load_model(settings.model_path), labels, index)

    def analyze(self, image_bytes: bytes) -> ClassificationResult:
        x = preprocess_image(
            image_bytes, target_size=self.handle.input_size, channels=self.handle.channels
        )
        scores = self.handle.classify(x)
        if len(scores) != len(self.labels):
            raise InferenceError(
                f"Model returned {len(scores)} scores for {len(self.labels)} labels"
            )
        result = interpret(scores, self.labels, self.index)
        logger.info("Predicted %s (%.3f)", result.label, result.confidence)
        return result

    def close(self) -> None:
        self.handle.release()

    def __enter__(self) -> "PlantDoctor":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
