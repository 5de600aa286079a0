from .base import ImportanceScorer, ImportanceScorerPluginBase, KIND_WEIGHTS, EXT_IMPORTANCE_SCORER
from .heuristic import HeuristicImportanceScorer
from .llm import LLMImportanceScorer, parse_importance

from scitrera_app_framework import Variables, get_extension


def get_importance_scorer(v: Variables = None) -> ImportanceScorer:
    return get_extension(EXT_IMPORTANCE_SCORER, v)


__all__ = (
    'ImportanceScorer',
    'ImportanceScorerPluginBase',
    'HeuristicImportanceScorer',
    'LLMImportanceScorer',
    'parse_importance',
    'get_importance_scorer',
    'KIND_WEIGHTS',
    'EXT_IMPORTANCE_SCORER',
)
