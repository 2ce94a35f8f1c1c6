"""
Value types shared by the rating engine and its collaborators.

These are plain dataclasses with no persistence concerns. The database layer
converts its rows into these types before handing them to the engine, and
converts them back when persisting.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from libs.domain_types import AnswerResult, LetterGrade


@dataclass(frozen=True)
class AnswerOption:
    """One selectable option of a question.

    ``points`` is None for "not applicable" options, which carry no numeric
    meaning and are left out of every average.
    """

    answer: str
    points: Optional[float] = None


@dataclass(frozen=True)
class QuestionDefinition:
    """A catalog question as seen by the engine."""

    id: str
    options: Sequence[AnswerOption]
    weight: Optional[float] = None
    header: str = ""
    question: str = ""
    helptext: str = ""


@dataclass(frozen=True)
class Answer:
    """A selected option index for one question."""

    question_id: str
    answer: int

    def to_dict(self) -> Dict[str, Any]:
        return {"question_id": self.question_id, "answer": self.answer}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Answer":
        return cls(question_id=str(data["question_id"]), answer=int(data["answer"]))


@dataclass(frozen=True)
class SubmittedAnswer:
    """An answer as submitted by a client for a subject of some kind.

    ``subject_id`` is the external identifier of the movie or show (for
    example a catalog id such as "603"), not the namespaced rating key.
    """

    subject_id: str
    question_id: str
    answer: int

    def to_answer(self) -> Answer:
        return Answer(question_id=self.question_id, answer=self.answer)


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and not math.isnan(value)
    )


@dataclass(frozen=True)
class RawCalculationArguments:
    """
    Sufficient statistic for the global grade of a subject.

    ``sum_score_by_question`` maps a question id to the sum of the points
    contributed by ``total`` submissions. The mean score of a question is
    ``sum_score_by_question[q] / total``.

    Instances are combined with ``+``: keys are unioned, a key missing on
    either side counts as 0, and totals are added. The empty instance
    (no keys, total 0) is the identity.
    """

    sum_score_by_question: Mapping[str, float] = field(default_factory=dict)
    total: int = 0

    @classmethod
    def empty(cls) -> "RawCalculationArguments":
        return cls({}, 0)

    def __add__(self, other: "RawCalculationArguments") -> "RawCalculationArguments":
        if not isinstance(other, RawCalculationArguments):
            return NotImplemented
        return sum_raw_args(self, other)

    def mean_score_by_question(self) -> Dict[str, float]:
        """Mean score per question; empty when no submission was folded in."""
        if self.total <= 0:
            return {}
        return {
            question_id: score / self.total
            for question_id, score in self.sum_score_by_question.items()
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sum_score_by_question": dict(self.sum_score_by_question),
            "total": self.total,
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Optional["RawCalculationArguments"]:
        """Build from stored JSON. Non-numeric sums are dropped."""
        if not data:
            return None
        sums = data.get("sum_score_by_question") or {}
        return cls(
            sum_score_by_question={
                str(question_id): value
                for question_id, value in sums.items()
                if _is_number(value)
            },
            total=int(data.get("total") or 0),
        )


def sum_raw_args(
    summand1: RawCalculationArguments, summand2: RawCalculationArguments
) -> RawCalculationArguments:
    """Elementwise sum of two aggregates over the union of their question ids."""
    sums: Dict[str, float] = dict(summand1.sum_score_by_question)
    for question_id, score in summand2.sum_score_by_question.items():
        sums[question_id] = sums.get(question_id, 0) + score

    return RawCalculationArguments(
        sum_score_by_question=sums,
        total=summand1.total + summand2.total,
    )


@dataclass
class UserRating:
    """
    One user's quiz state for one subject.

    ``review`` of None means "leave the stored review untouched" when the
    rating is upserted; the engine never knows or changes reviews.
    """

    subject_id: str
    user_id: str
    user_name: str
    answers: List[Answer] = field(default_factory=list)
    review: Optional[str] = None
    users_rating: Optional[LetterGrade] = None
    raw_args: Optional[RawCalculationArguments] = None

    @property
    def is_completed(self) -> bool:
        return self.users_rating is not None


@dataclass(frozen=True)
class AnswerProcessingResult:
    """Outcome of ``RatingEngine.process_answer``.

    Grades are only meaningful for TEST_COMPLETED and are UNKNOWN otherwise.
    """

    result: AnswerResult
    global_grade: LetterGrade = LetterGrade.UNKNOWN
    users_grade: LetterGrade = LetterGrade.UNKNOWN
