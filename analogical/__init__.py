"""
analogical - Similarity-sensitive belief updating over conceptual spaces

Beliefs live on an N x N grid spanned by two ordered concept spaces. Learning
from an observation adds mass to the observed cell and, for the
similarity-sensitive rule, a smaller bonus to nearby cells. Whether that
helps depends on the world, so the package also generates synthetic worlds,
scores learners against them, and evolves the rule's parameters.

Key pieces:
- RuleParameters / update: the update rule (Straight Rule as a special case)
- generate_world / sample_evidence: orderly, disorderly and pointed worlds
- score: sum of squared errors against the ground truth
- run_single_trial: one learner on one evidence stream
- EvolutionEngine / run_evolution: median-truncation evolutionary search
"""

from .errors import AnalogicalError, InvalidArgumentError, DegenerateStateError
from .grid import flat_prior, normalize
from .rules import RuleParameters, STRAIGHT_RULE, ANALOGICAL_RULE, update
from .worlds import World, WorldPolicy, WorldConfig, generate_world, sample_evidence
from .scoring import score, score_trajectory
from .trial import TrialResult, run_single_trial
from .evolution import (
    EvolutionPhase,
    EvolutionConfig,
    EvolutionEngine,
    EvolutionResult,
    GenerationRecord,
    run_evolution,
)
from .concepts import ProductSpace, SHOE_SPACE
from .comparison import Comparison, compare_rules, compare_across_worlds

__all__ = [
    # Errors
    "AnalogicalError",
    "InvalidArgumentError",
    "DegenerateStateError",
    # Grid and rule
    "flat_prior",
    "normalize",
    "RuleParameters",
    "STRAIGHT_RULE",
    "ANALOGICAL_RULE",
    "update",
    # Worlds
    "World",
    "WorldPolicy",
    "WorldConfig",
    "generate_world",
    "sample_evidence",
    # Scoring and trials
    "score",
    "score_trajectory",
    "TrialResult",
    "run_single_trial",
    # Evolution
    "EvolutionPhase",
    "EvolutionConfig",
    "EvolutionEngine",
    "EvolutionResult",
    "GenerationRecord",
    "run_evolution",
    # Concepts and comparison
    "ProductSpace",
    "SHOE_SPACE",
    "Comparison",
    "compare_rules",
    "compare_across_worlds",
]
