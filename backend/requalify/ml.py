"""Professional area recommendation from categorical profile inputs.

A small static classifier: it is fitted once on the in-code training
set below and never retrained. Each input field is tokenised into a
bag of words (tokens are namespaced by field), every label gets the
centroid of its rows, and a prediction is the label whose centroid has
the highest cosine similarity with the input. Ties go to the label seen
first in the training data.
"""

import re
from functools import lru_cache
from typing import Dict, List, NamedTuple, Optional, Sequence

import numpy as np

FIELDS = ("current_role", "main_skill", "skill_level", "education")
_TOKEN_RE = re.compile(r"[\w#+]+")


class TrainingRow(NamedTuple):
    current_role: str
    main_skill: str
    skill_level: str
    education: str
    interest_area: str


TRAINING_DATA: List[TrainingRow] = [
    TrainingRow("Data Analyst", "SQL", "Intermediate", "IT", "Data Scientist"),
    TrainingRow("Junior Developer", "C#", "Basic", "IT", "Backend Developer"),
    TrainingRow("Designer", "UI Design", "Intermediate", "Design", "UX/UI"),
    TrainingRow("Support Analyst", "Networks", "Intermediate", "IT", "Infrastructure"),
    TrainingRow("Teacher", "Pedagogy", "Advanced", "Humanities", "Teaching"),
]


def _tokens(field: str, value: Optional[str]) -> List[str]:
    return [f"{field}:{tok}" for tok in _TOKEN_RE.findall((value or "").lower())]


def _features(values: Sequence[Optional[str]]) -> List[str]:
    out = []
    for field, value in zip(FIELDS, values):
        out.extend(_tokens(field, value))
    return out


class InterestPredictor:
    """Nearest-centroid text classifier over the four profile fields."""

    def __init__(self, rows: Sequence[TrainingRow] = TRAINING_DATA):
        if not rows:
            raise ValueError("training data must not be empty")
        self.vocabulary: Dict[str, int] = {}
        for row in rows:
            for feat in _features(row[:4]):
                self.vocabulary.setdefault(feat, len(self.vocabulary))
        self.labels: List[str] = []
        for row in rows:
            if row.interest_area not in self.labels:
                self.labels.append(row.interest_area)
        centroids = np.zeros((len(self.labels), len(self.vocabulary)))
        counts = np.zeros(len(self.labels))
        for row in rows:
            idx = self.labels.index(row.interest_area)
            centroids[idx] += self._vectorize(row[:4])
            counts[idx] += 1
        centroids /= counts[:, None]
        norms = np.linalg.norm(centroids, axis=1, keepdims=True)
        self.centroids = centroids / np.where(norms == 0, 1.0, norms)

    def _vectorize(self, values: Sequence[Optional[str]]) -> np.ndarray:
        vec = np.zeros(len(self.vocabulary))
        for feat in _features(values):
            idx = self.vocabulary.get(feat)
            if idx is not None:
                vec[idx] += 1.0
        return vec

    def predict(self, current_role: Optional[str], main_skill: Optional[str],
                skill_level: Optional[str], education: Optional[str]) -> str:
        vec = self._vectorize((current_role, main_skill, skill_level, education))
        norm = np.linalg.norm(vec)
        if norm:
            vec = vec / norm
        scores = self.centroids @ vec
        return self.labels[int(np.argmax(scores))]


@lru_cache
def get_predictor() -> InterestPredictor:
    """Return the process-wide predictor, fitting it on first use."""
    return InterestPredictor()
