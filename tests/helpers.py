"""
Catalog builders shared by the engine, store and API tests.
"""
from typing import List

from rating_service.core.rating import Answer, AnswerOption, QuestionDefinition

# Question ids and options of the first production questionnaire:
# "Yes" scores 0, "No" scores 10 and the third option scores 3.
QUESTION_IDS = [
    "5a44721a8f8d20aa9c3cac59",
    "5a4472348f8d20aa9c3cac60",
    "5a4472478f8d20aa9c3cac66",
    "5a4472578f8d20aa9c3cac6c",
    "5a4472698f8d20aa9c3cac71",
]
OPTION_DATA = [
    {"answer": "Yes", "points": 0},
    {"answer": "No", "points": 10},
    {"answer": "No main characters of color", "points": 3},
]
YES, NO, THIRD = 0, 1, 2


def make_questions(
    question_ids: List[str] = QUESTION_IDS, weight: int = 100
) -> List[QuestionDefinition]:
    """Engine-level catalog with the standard three options per question."""
    return [
        QuestionDefinition(
            id=question_id,
            options=tuple(
                AnswerOption(answer=o["answer"], points=o["points"]) for o in OPTION_DATA
            ),
            weight=weight,
            header=f"HEADER {index + 1}",
            question=f"question {index + 1}",
            helptext=f"help text {index + 1}",
        )
        for index, question_id in enumerate(question_ids)
    ]


def answers_for(question_ids: List[str], option: int) -> List[Answer]:
    return [Answer(question_id=q, answer=option) for q in question_ids]


def stale_once(lookup):
    """
    Wrap an async lookup so its first call returns None.

    Simulates a read taken just before another request committed the row.
    """
    calls = []

    async def wrapper(*args, **kwargs):
        calls.append(args)
        if len(calls) == 1:
            return None
        return await lookup(*args, **kwargs)

    return wrapper
