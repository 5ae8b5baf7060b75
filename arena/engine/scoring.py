"""Choice scoring across the three axes; optimal-choice selection; gap severity."""
from typing import Sequence

from arena.engine.errors import EmptyChoiceSet
from arena.engine.graph import Choice

# Flat award for completing a reflection node (reflections are coached, not graded)
REFLECTION_AWARD = 10

# Corrective feedback framing: optimal minus chosen score
SEVERITY_BANDS = [
    (30, "significant"),
    (15, "moderate"),
]
DEFAULT_SEVERITY = "minor"


def culture_sum(choice: Choice) -> int:
    """Sum of the culture-alignment deltas of one choice."""
    return sum(choice.culture_impact.values())


def score_choice(choice: Choice) -> int:
    """Base points + engagement impact + culture sum. Used by live play and by feedback."""
    return choice.base_points + choice.engagement_impact + culture_sum(choice)


def find_optimal(choices: Sequence[Choice]) -> Choice:
    """Return the strictly highest-scoring choice; the first in authored order wins ties."""
    if not choices:
        raise EmptyChoiceSet("Cannot pick an optimal choice from an empty choice set")
    best = choices[0]
    best_score = score_choice(best)
    for choice in choices[1:]:
        score = score_choice(choice)
        if score > best_score:
            best, best_score = choice, score
    return best


def score_gap(chosen: Choice, optimal: Choice) -> int:
    """How many points the chosen option left on the table (never negative)."""
    return max(0, score_choice(optimal) - score_choice(chosen))


def gap_severity(gap: int) -> str:
    """Return severity label for a score gap."""
    for threshold, label in SEVERITY_BANDS:
        if gap >= threshold:
            return label
    return DEFAULT_SEVERITY
