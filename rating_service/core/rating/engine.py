"""
Answer-processing engine.

The engine decides what a newly submitted answer means for a user's quiz on
one subject, persists the updated rating and, when the answer completes the
quiz, computes the user's own grade and the subject's new global grade.

States are never stored. Each call derives them from the current question
catalog and the user's recorded answers:

1. Retake: every question already answered -> ATTEMPT_TO_RETAKE_TEST
2. Invalid: unknown question or option index out of range -> INVALID_ANSWER
3. Started: no recorded answers (and more than one question) -> TEST_STARTED
4. In progress: a revision, or more answers still missing -> ANSWER_ACCEPTED
5. Final: the last missing question is answered -> TEST_COMPLETED

The engine holds no state and no locks. Each call performs at most three
reads (catalog, the user's answers, and on completion the rating sample)
and one write. Collaborator errors propagate to the caller unchanged.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence

from libs.domain_types import AnswerResult

from rating_service.core.rating.reconciliation import combine_with_history
from rating_service.core.rating.scoring import (
    build_score_map,
    grade_raw_args,
    grade_submission,
)
from rating_service.core.rating.subjects import make_subject_id
from rating_service.core.rating.types import (
    Answer,
    AnswerProcessingResult,
    QuestionDefinition,
    SubmittedAnswer,
    UserRating,
)

logger = logging.getLogger(__name__)

QuestionsFetcher = Callable[[], Awaitable[List[QuestionDefinition]]]
AnswersFetcher = Callable[[str, str], Awaitable[List[Answer]]]
SampleFetcher = Callable[[str], Awaitable[List[UserRating]]]
RatingPersister = Callable[[UserRating], Awaitable[None]]


@dataclass(frozen=True)
class SubjectAccessors:
    """
    Store capabilities for one kind of subject.

    Attributes:
        subject_prefix: Namespace of rating keys for this kind ("movie")
        fetch_answers: (user_id, subject_id) -> the user's recorded answers
        fetch_sample: subject_id -> completed ratings, descending aggregate
            total, capped
        persist: Upsert of a rating keyed by (subject_id, user_id)
    """

    subject_prefix: str
    fetch_answers: AnswersFetcher
    fetch_sample: SampleFetcher
    persist: RatingPersister


def find_answer(answers: Sequence[Answer], question_id: str) -> Optional[Answer]:
    return next((a for a in answers if a.question_id == question_id), None)


def find_question(
    questions: Sequence[QuestionDefinition], question_id: str
) -> Optional[QuestionDefinition]:
    return next((q for q in questions if q.id == question_id), None)


def merge_answer(answers: Sequence[Answer], new_answer: Answer) -> List[Answer]:
    """Replace the answer to the same question in place, or append."""
    merged = list(answers)
    for index, answer in enumerate(merged):
        if answer.question_id == new_answer.question_id:
            merged[index] = new_answer
            return merged
    merged.append(new_answer)
    return merged


def is_retake(answers: Sequence[Answer], questions: Sequence[QuestionDefinition]) -> bool:
    return len(answers) >= len(questions)


def is_invalid_answer(
    submitted: SubmittedAnswer, questions: Sequence[QuestionDefinition]
) -> bool:
    question = find_question(questions, submitted.question_id)
    if question is None:
        return True
    return not 0 <= submitted.answer < len(question.options)


def is_revision(submitted: SubmittedAnswer, answers: Sequence[Answer]) -> bool:
    return find_answer(answers, submitted.question_id) is not None


def completes_quiz(answers: Sequence[Answer], questions: Sequence[QuestionDefinition]) -> bool:
    return len(questions) - len(answers) == 1


def is_test_started(
    answers: Sequence[Answer], questions: Sequence[QuestionDefinition]
) -> bool:
    # A single-question quiz is completed by its first answer
    return len(answers) == 0 and not completes_quiz(answers, questions)


def is_test_in_progress(
    submitted: SubmittedAnswer,
    answers: Sequence[Answer],
    questions: Sequence[QuestionDefinition],
) -> bool:
    if is_revision(submitted, answers):
        return True
    return 0 < len(answers) < len(questions) - 1


class RatingEngine:
    """
    Quiz state machine and grade calculator for one kind of subject.

    Args:
        get_questions: Returns the ordered list of active questions
        accessors: Store capabilities for the subject kind
    """

    def __init__(self, get_questions: QuestionsFetcher, accessors: SubjectAccessors):
        self._get_questions = get_questions
        self._accessors = accessors

    @property
    def subject_prefix(self) -> str:
        return self._accessors.subject_prefix

    def subject_id_for(self, submitted: SubmittedAnswer) -> str:
        return make_subject_id(self._accessors.subject_prefix, submitted.subject_id)

    async def is_answer_final(self, submitted: SubmittedAnswer, user_id: str) -> bool:
        """
        Check whether the submitted answer would complete the quiz.

        True iff exactly one question is unanswered and the submission is not
        a revision of an existing answer. Agrees with ``process_answer``
        returning TEST_COMPLETED for a valid submission.
        """
        questions = await self._get_questions()
        answers = await self._accessors.fetch_answers(
            user_id, self.subject_id_for(submitted)
        )

        return completes_quiz(answers, questions) and not is_revision(submitted, answers)

    async def process_answer(
        self, submitted: SubmittedAnswer, user_id: str, user_name: str
    ) -> AnswerProcessingResult:
        """
        Apply a submitted answer to the user's rating for the subject.

        Args:
            submitted: The answer being submitted
            user_id: Identifier of the answering user
            user_name: Display name stored on the rating

        Returns:
            AnswerProcessingResult; grades are set only for TEST_COMPLETED
        """
        subject_id = self.subject_id_for(submitted)
        questions = await self._get_questions()
        answers = await self._accessors.fetch_answers(user_id, subject_id)

        if is_retake(answers, questions):
            return self._reject(AnswerResult.ATTEMPT_TO_RETAKE_TEST, subject_id)

        if is_invalid_answer(submitted, questions):
            return self._reject(AnswerResult.INVALID_ANSWER, subject_id)

        updated_answers = merge_answer(answers, submitted.to_answer())

        if is_test_started(answers, questions):
            await self._persist(subject_id, user_id, user_name, updated_answers)
            result = AnswerProcessingResult(result=AnswerResult.TEST_STARTED)

        elif is_test_in_progress(submitted, answers, questions):
            await self._persist(subject_id, user_id, user_name, updated_answers)
            result = AnswerProcessingResult(result=AnswerResult.ANSWER_ACCEPTED)

        elif completes_quiz(answers, questions):
            result = await self._finalize(
                subject_id, user_id, user_name, updated_answers, questions
            )

        else:
            return self._reject(AnswerResult.INVALID_ANSWER, subject_id)

        logger.debug(
            f"Processed answer for {subject_id}: {result.result.value}",
            extra={"subject_id": subject_id, "result": result.result.value},
        )
        return result

    async def _finalize(
        self,
        subject_id: str,
        user_id: str,
        user_name: str,
        answers: List[Answer],
        questions: Sequence[QuestionDefinition],
    ) -> AnswerProcessingResult:
        score_map = build_score_map(questions)
        sample = await self._accessors.fetch_sample(subject_id)

        raw_args = combine_with_history(answers, sample, score_map)
        users_grade = grade_submission(answers, score_map)
        global_grade = grade_raw_args(raw_args, score_map)

        await self._accessors.persist(
            UserRating(
                subject_id=subject_id,
                user_id=user_id,
                user_name=user_name,
                answers=answers,
                users_rating=users_grade,
                raw_args=raw_args,
            )
        )

        logger.info(
            f"Quiz completed for {subject_id}: users_grade={users_grade.value} "
            f"global_grade={global_grade.value} total={raw_args.total}",
            extra={"subject_id": subject_id, "result": AnswerResult.TEST_COMPLETED.value},
        )

        return AnswerProcessingResult(
            result=AnswerResult.TEST_COMPLETED,
            global_grade=global_grade,
            users_grade=users_grade,
        )

    async def _persist(
        self, subject_id: str, user_id: str, user_name: str, answers: List[Answer]
    ) -> None:
        await self._accessors.persist(
            UserRating(
                subject_id=subject_id,
                user_id=user_id,
                user_name=user_name,
                answers=answers,
            )
        )

    @staticmethod
    def _reject(result: AnswerResult, subject_id: str) -> AnswerProcessingResult:
        logger.info(
            f"Rejected answer for {subject_id}: {result.value}",
            extra={"subject_id": subject_id, "result": result.value},
        )
        return AnswerProcessingResult(result=result)
