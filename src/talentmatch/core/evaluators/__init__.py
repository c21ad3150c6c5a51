"\"\"\"Scorers and gates for the match engine.\"\"\""

from .skills import SkillMatcher
from .fit import FitScorer
from .constraints import ConstraintScorer
from .gates import GateEvaluator

__all__ = [
    "SkillMatcher",
    "FitScorer",
    "ConstraintScorer",
    "GateEvaluator",
]
