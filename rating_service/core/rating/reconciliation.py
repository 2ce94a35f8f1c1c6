"""
Incremental reconstruction of a subject's global aggregate.

Every completed rating stores the aggregate (``RawCalculationArguments``)
that was current when it was saved, with its own answers already folded in.
The newest aggregate therefore summarizes the whole history, and the global
grade can be recomputed from a small sample instead of every submission.

The store returns completed ratings ordered by descending ``raw_args.total``.
Entries sharing the head's total were computed against the same, not yet
advanced aggregate (concurrent finalizations). Only one of them can serve
as the baseline; the answers of the others are folded in on top of it.

Ratings saved before aggregates were stored have no ``raw_args``. When the
head of the sample is such a rating, the aggregate is rebuilt from the
answers of every sampled rating. ``total`` is then the sample size plus one,
which undercounts when the sample was truncated.
"""

import logging
from itertools import chain
from typing import Sequence

from rating_service.core.rating.scoring import (
    ScoreMap,
    score_submission,
    sum_scores_by_question,
)
from rating_service.core.rating.types import (
    Answer,
    RawCalculationArguments,
    UserRating,
)

logger = logging.getLogger(__name__)


def has_stored_aggregate(sample: Sequence[UserRating]) -> bool:
    """True if the head of the sample carries a usable aggregate."""
    if not sample:
        return False
    head = sample[0].raw_args
    return head is not None and head.total > 0


def unwind_baseline(
    sample: Sequence[UserRating], score_map: ScoreMap
) -> RawCalculationArguments:
    """
    Rebuild the aggregate of everyone in the sample's leading tie run.

    Walks from the head while the next rating has an aggregate with the same
    total. The last rating of that run supplies the baseline; each earlier
    rating of the run adds its own answers as one more submission.

    Args:
        sample: Completed ratings ordered by descending aggregate total.
            The head must carry an aggregate (see ``has_stored_aggregate``).
        score_map: Scoring information for the current catalog

    Returns:
        The reconstructed baseline aggregate
    """
    run_end = 0
    while run_end + 1 < len(sample):
        current = sample[run_end].raw_args
        following = sample[run_end + 1].raw_args
        if current is None or following is None or following.total != current.total:
            break
        run_end += 1

    baseline = sample[run_end].raw_args
    if baseline is None:
        raise ValueError("Sample head has no stored aggregate")

    for rating in sample[:run_end]:
        baseline = baseline + score_submission(rating.answers, score_map)

    if run_end:
        logger.debug(
            f"Folded {run_end} concurrent submission(s) into baseline "
            f"(total={baseline.total})"
        )

    return baseline


def full_scan_aggregate(
    answers: Sequence[Answer], sample: Sequence[UserRating], score_map: ScoreMap
) -> RawCalculationArguments:
    """Aggregate of the new answers and every sampled rating's answers."""
    all_answers = chain(answers, chain.from_iterable(r.answers for r in sample))

    return RawCalculationArguments(
        sum_score_by_question=sum_scores_by_question(all_answers, score_map),
        total=len(sample) + 1,
    )


def combine_with_history(
    answers: Sequence[Answer], sample: Sequence[UserRating], score_map: ScoreMap
) -> RawCalculationArguments:
    """
    Compute the new global aggregate after a user completes the quiz.

    Args:
        answers: The finalizing user's complete answer set
        sample: Completed ratings of other users, ordered by descending
            aggregate total and capped by the store
        score_map: Scoring information for the current catalog

    Returns:
        The aggregate to persist on the user's rating and to grade globally
    """
    if has_stored_aggregate(sample):
        baseline = unwind_baseline(sample, score_map)
        return baseline + score_submission(answers, score_map)

    if sample:
        logger.info(
            f"Rebuilding aggregate from {len(sample)} rating(s) without stored aggregates"
        )
    return full_scan_aggregate(answers, sample, score_map)
