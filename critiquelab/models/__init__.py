from .argument_score import ArgumentScore, ScoreSource
from .saved_critique import SavedCritique

__all__ = [
    "ArgumentScore",
    "SavedCritique",
    "ScoreSource",
]
