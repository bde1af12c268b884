# emotions.py
"""
Fixed emotion vocabulary and the arithmetic on emotion vectors.

An emotion vector is a plain dict keyed by the seven labels below (always in
this order) with percentage values in [0, 100].
"""
from enum import Enum
from typing import Iterable

from pydantic import BaseModel, TypeAdapter


class Emotion(str, Enum):
    ANGRY = "angry"
    DISGUST = "disgust"
    FEAR = "fear"
    HAPPY = "happy"
    SAD = "sad"
    SURPRISE = "surprise"
    NEUTRAL = "neutral"


EMOTION_LABELS = [e.value for e in Emotion]


class LabelScore(BaseModel):
    """One entry of the classifier response."""
    label: str
    score: float


LABEL_SCORES = TypeAdapter(list[LabelScore])


def empty_vector() -> dict[str, float]:
    return {label: 0.0 for label in EMOTION_LABELS}


def neutral_fallback() -> dict[str, float]:
    vector = empty_vector()
    vector[Emotion.NEUTRAL.value] = 100.0
    return vector


def normalize_scores(scores: Iterable[LabelScore]) -> dict[str, float]:
    """
    Rescale the scores of recognized labels to percentages of their sum.

    Labels outside the vocabulary are ignored (case-insensitive match). If no
    recognized label carries any score the result is the all-zero vector.
    """
    raw = empty_vector()
    for item in scores:
        label = item.label.strip().lower()
        if label in raw:
            raw[label] += item.score

    total = sum(raw.values())
    if total <= 0:
        return empty_vector()
    return {label: round(value / total * 100, 2) for label, value in raw.items()}


def dominant_emotion(vector: dict[str, float]) -> str:
    # strict ">" keeps the first label in vocabulary order on ties
    best_label, best_value = Emotion.NEUTRAL.value, 0.0
    for label in EMOTION_LABELS:
        value = vector.get(label, 0.0)
        if value > best_value:
            best_label, best_value = label, value
    return best_label


def mean_vector(vectors: list[dict[str, float]]) -> dict[str, float]:
    if not vectors:
        return empty_vector()
    count = len(vectors)
    return {
        label: round(sum(v.get(label, 0.0) for v in vectors) / count, 2)
        for label in EMOTION_LABELS
    }
