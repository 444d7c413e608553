"""Role classification strategies."""

from .rules import (
    Classifier,
    ClassifierStrategy,
    classify,
    classify_salary_aware,
    classify_stat,
    get_classifier,
)

__all__ = [
    "Classifier",
    "ClassifierStrategy",
    "classify",
    "classify_salary_aware",
    "classify_stat",
    "get_classifier",
]
