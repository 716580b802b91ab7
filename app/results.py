from dataclasses import dataclass
from typing import Sequence

from app.diagnostics import (
    DiagnosticEntry,
    DiagnosticIndex,
    default_entry,
    healthy_entry,
    is_healthy_condition,
    match_disease,
)
from app.labels import UNKNOWN_CONDITION, UNKNOWN_PLANT, split_label

# (lower bound, tier, Turkish display message), checked top-down
CONFIDENCE_TIERS: tuple[tuple[float, str, str], ...] = (
    (0.9, "very high", "Çok yüksek güvenilirlik"),
    (0.8, "high", "Yüksek güvenilirlik"),
    (0.7, "medium-high", "Orta-yüksek güvenilirlik"),
    (0.6, "medium", "Orta güvenilirlik"),
    (0.5, "low-medium", "Düşük-orta güvenilirlik"),
)
LOW_TIER = "low — expert review recommended"
LOW_TIER_MESSAGE = "Düşük güvenilirlik - Uzman görüşü önerilir"


@dataclass(frozen=True)
class ClassificationResult:
    confidence: float
    diagnosis: DiagnosticEntry
    is_healthy: bool
    label: str | None = None
    class_index: int = -1

    @property
    def confidence_tier(self) -> str:
        return describe_confidence(self.confidence)


def describe_confidence(confidence: float) -> str:
    for bound, tier, _ in CONFIDENCE_TIERS:
        if confidence >= bound:
            return tier
    return LOW_TIER


def confidence_message(confidence: float, language: str = "tr") -> str:
    """Display text for the confidence tier. English uses the tier name itself."""
    if language != "tr":
        return describe_confidence(confidence)
    for bound, _, message in CONFIDENCE_TIERS:
        if confidence >= bound:
            return message
    return LOW_TIER_MESSAGE


def argmax(scores: Sequence[float]) -> tuple[int, float]:
    """Index and value of the largest score; ties go to the lowest index."""
    best_idx, best = -1, 0.0
    for i, score in enumerate(scores):
        score = float(score)
        if best_idx < 0 or score > best:
            best_idx, best = i, score
    return best_idx, best


def interpret(
    probabilities: Sequence[float],
    labels: Sequence[str],
    index: DiagnosticIndex,
) -> ClassificationResult:
    """Turn a score vector into a diagnosis. Never raises on unknown labels."""
    idx, confidence = argmax(probabilities)
    label = labels[idx] if 0 <= idx < len(labels) else None
    if label is None:
        plant, disease = UNKNOWN_PLANT, UNKNOWN_CONDITION
    else:
        plant, disease = split_label(label)

    if is_healthy_condition(disease):
        return ClassificationResult(
            confidence=confidence,
            diagnosis=healthy_entry(plant, index.language),
            is_healthy=True,
            label=label,
            class_index=idx,
        )

    key = match_disease(disease)
    if key is not None:
        diagnosis = index.lookup(key).for_plant(plant)
    else:
        diagnosis = default_entry(plant, disease, index.language)
    return ClassificationResult(
        confidence=confidence,
        diagnosis=diagnosis,
        is_healthy=False,
        label=label,
        class_index=idx,
    )
