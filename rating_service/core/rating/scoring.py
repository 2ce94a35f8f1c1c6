"""
Weighted score calculation for completed questionnaires.

This module turns aggregated answer points into a numeric rating on a
0-100 scale and maps that rating onto a letter grade.

Algorithm
=========
For every question present in the aggregate:

1. mean = sum_score_by_question[q] / total
2. max_score = largest numeric point value among the question's options
   ("not applicable" options are ignored)
3. normalized = mean / (max_score / weight)

The normalized values of the included questions are then rescaled:

    scaled_sum = (100 * n) * sum(normalized) / sum(weights)
    rating = scaled_sum / n

Letter grades use the highest threshold not exceeding the rating:
A >= 80, B >= 60, C >= 40, D >= 20, F >= 0. Anything else, including the
case where no question could be included, is "?".

The same calculator produces both the user's own grade (an aggregate of a
single submission) and the global grade (an aggregate of every submission
folded in so far, see ``reconciliation``).
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from libs.domain_types import LetterGrade

from rating_service.core.rating.types import (
    Answer,
    QuestionDefinition,
    RawCalculationArguments,
)

logger = logging.getLogger(__name__)

# Weight applied to questions whose weight is zero or missing
DEFAULT_QUESTION_WEIGHT = 100

# Best grade first; the first threshold not exceeding the rating wins
SCORE_SCALE: Tuple[Tuple[LetterGrade, float], ...] = (
    (LetterGrade.A, 80),
    (LetterGrade.B, 60),
    (LetterGrade.C, 40),
    (LetterGrade.D, 20),
    (LetterGrade.F, 0),
)


@dataclass(frozen=True)
class QuestionScore:
    """Point values by option position and the effective weight of a question."""

    points: Tuple[Optional[float], ...]
    weight: float

    @property
    def max_score(self) -> Optional[float]:
        numeric = [p for p in self.points if p is not None]
        return max(numeric) if numeric else None

    def points_for(self, option_index: int) -> Optional[float]:
        if 0 <= option_index < len(self.points):
            return self.points[option_index]
        return None


ScoreMap = Dict[str, QuestionScore]


def build_score_map(questions: Iterable[QuestionDefinition]) -> ScoreMap:
    """Index questions by id with their option points and effective weight."""
    return {
        question.id: QuestionScore(
            points=tuple(option.points for option in question.options),
            weight=question.weight or DEFAULT_QUESTION_WEIGHT,
        )
        for question in questions
    }


def sum_scores_by_question(
    answers: Iterable[Answer], score_map: ScoreMap
) -> Dict[str, float]:
    """
    Sum the numeric points of the given answers per question.

    Answers that select a "not applicable" option, reference a question that
    is not in the catalog, or select an index the question does not have
    contribute nothing. A question only gets a key once at least one answer
    contributed numeric points to it.
    """
    sums: Dict[str, float] = {}
    for answer in answers:
        question_score = score_map.get(answer.question_id)
        if question_score is None:
            continue
        points = question_score.points_for(answer.answer)
        if points is None:
            continue
        sums[answer.question_id] = sums.get(answer.question_id, 0) + points
    return sums


def score_submission(
    answers: Sequence[Answer], score_map: ScoreMap
) -> RawCalculationArguments:
    """Aggregate for a single submission (total = 1)."""
    return RawCalculationArguments(
        sum_score_by_question=sum_scores_by_question(answers, score_map),
        total=1,
    )


def calculate_rating(
    raw_args: RawCalculationArguments, score_map: ScoreMap
) -> Optional[float]:
    """
    Calculate the 0-100 numeric rating for an aggregate.

    Args:
        raw_args: Aggregated per-question sums and submission count
        score_map: Scoring information for the current catalog

    Returns:
        The numeric rating, or None if no question could be included
        (empty aggregate, every answer not applicable, or only questions
        that are no longer in the catalog).
    """
    normalized_values: List[float] = []
    weights: List[float] = []

    for question_id, mean_score in raw_args.mean_score_by_question().items():
        question_score = score_map.get(question_id)
        if question_score is None:
            # Question was removed from the catalog after this aggregate was stored
            continue
        if math.isnan(mean_score):
            continue

        max_score = question_score.max_score
        if not max_score:
            # No positive maximum to normalize against
            continue

        weight = question_score.weight
        normalized_values.append(mean_score / (max_score / weight))
        weights.append(weight)

    if not normalized_values:
        logger.debug(f"No scorable questions in aggregate (total={raw_args.total})")
        return None

    count = len(normalized_values)
    scaled_sum = _linear_scale(sum(normalized_values), sum(weights), 100 * count)

    return scaled_sum / count


def _linear_scale(value: float, from_max: float, to_max: float) -> float:
    return to_max * (value / from_max)


def to_letter_grade(rating: Optional[float]) -> LetterGrade:
    """Map a numeric rating onto the letter grade scale."""
    if rating is None:
        return LetterGrade.UNKNOWN

    for grade, threshold in SCORE_SCALE:
        if threshold <= rating:
            return grade

    return LetterGrade.UNKNOWN


def grade_raw_args(
    raw_args: RawCalculationArguments, score_map: ScoreMap
) -> LetterGrade:
    """Letter grade for an aggregate."""
    return to_letter_grade(calculate_rating(raw_args, score_map))


def grade_submission(answers: Sequence[Answer], score_map: ScoreMap) -> LetterGrade:
    """Letter grade for a single user's answers with nothing else folded in."""
    own_raw_args = RawCalculationArguments.empty() + score_submission(answers, score_map)
    return grade_raw_args(own_raw_args, score_map)
