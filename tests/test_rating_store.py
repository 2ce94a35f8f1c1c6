"""
Tests for rating persistence and the completed-rating sample.
"""
from unittest.mock import patch

import pytest
from sqlalchemy import select

from libs.domain_types import AnswerResult, LetterGrade, SubjectKind

from rating_service.core.rating import RawCalculationArguments, SubmittedAnswer, UserRating
from rating_service.db import QuestionCatalog, RatingStore, build_engine
from rating_service.db.question_catalog import option_from_dict
from rating_service.models import Rating
from tests.helpers import NO, QUESTION_IDS, YES, answers_for, stale_once

SUBJECT_ID = "movie:603"


def _rating(user_id, answers=None, users_rating=None, raw_args=None, review=None):
    return UserRating(
        subject_id=SUBJECT_ID,
        user_id=user_id,
        user_name=f"{user_id} N.",
        answers=answers or [],
        review=review,
        users_rating=users_rating,
        raw_args=raw_args,
    )


class TestUpsertRating:
    """Tests for inserting and replacing ratings."""

    async def test_insert_then_read_back(self, async_db_session):
        store = RatingStore(async_db_session)
        raw_args = RawCalculationArguments({QUESTION_IDS[0]: 10}, 1)

        await store.upsert_rating(
            _rating(
                "u1",
                answers_for(QUESTION_IDS, NO),
                users_rating=LetterGrade.A,
                raw_args=raw_args,
            )
        )
        await async_db_session.commit()

        rating = await store.get_rating(SUBJECT_ID, "u1")
        assert rating.answers == answers_for(QUESTION_IDS, NO)
        assert rating.users_rating == LetterGrade.A
        assert rating.raw_args == raw_args
        assert rating.review == ""

    async def test_update_replaces_answers_in_one_row(self, async_db_session):
        store = RatingStore(async_db_session)

        await store.upsert_rating(_rating("u1", answers_for(QUESTION_IDS[:1], NO)))
        await store.upsert_rating(_rating("u1", answers_for(QUESTION_IDS[:2], YES)))
        await async_db_session.commit()

        result = await async_db_session.execute(
            select(Rating).where(Rating.subject_id == SUBJECT_ID)
        )
        rows = result.scalars().all()
        assert len(rows) == 1
        assert rows[0].answers == [a.to_dict() for a in answers_for(QUESTION_IDS[:2], YES)]

    async def test_missing_review_keeps_stored_review(self, async_db_session):
        store = RatingStore(async_db_session)
        await store.upsert_rating(_rating("u1", review="Great cast"))

        await store.upsert_rating(_rating("u1", answers_for(QUESTION_IDS[:1], NO)))
        await async_db_session.commit()

        rating = await store.get_rating(SUBJECT_ID, "u1")
        assert rating.review == "Great cast"
        assert len(rating.answers) == 1

    async def test_empty_review_clears_stored_review(self, async_db_session):
        store = RatingStore(async_db_session)
        await store.upsert_rating(_rating("u1", review="Great cast"))

        await store.upsert_rating(_rating("u1", review=""))

        rating = await store.get_rating(SUBJECT_ID, "u1")
        assert rating.review == ""

    async def test_aggregate_total_is_mirrored_for_ordering(self, async_db_session):
        store = RatingStore(async_db_session)
        await store.upsert_rating(
            _rating(
                "u1",
                users_rating=LetterGrade.B,
                raw_args=RawCalculationArguments({QUESTION_IDS[0]: 10}, 7),
            )
        )

        result = await async_db_session.execute(select(Rating))
        assert result.scalar_one().raw_args_total == 7

    async def test_concurrent_insert_updates_existing_row(self, async_db_session):
        store = RatingStore(async_db_session)
        await store.upsert_rating(_rating("u1", review="Great cast"))
        await async_db_session.commit()
        # Pending work in the same transaction must survive the lost race
        await store.upsert_rating(_rating("u2", answers_for(QUESTION_IDS[:1], NO)))

        with patch.object(store, "_get_row", side_effect=stale_once(store._get_row)):
            await store.upsert_rating(_rating("u1", answers_for(QUESTION_IDS[:1], YES)))
        await async_db_session.commit()

        first = await store.get_rating(SUBJECT_ID, "u1")
        assert first.answers == answers_for(QUESTION_IDS[:1], YES)
        assert first.review == "Great cast"
        second = await store.get_rating(SUBJECT_ID, "u2")
        assert second.answers == answers_for(QUESTION_IDS[:1], NO)


class TestUsersAnswers:
    """Tests for reading one user's answers."""

    async def test_empty_when_user_has_no_rating(self, async_db_session):
        store = RatingStore(async_db_session)

        assert await store.get_users_answers("nobody", SUBJECT_ID) == []

    async def test_scoped_to_subject(self, async_db_session):
        store = RatingStore(async_db_session)
        await store.upsert_rating(_rating("u1", answers_for(QUESTION_IDS[:2], NO)))

        assert len(await store.get_users_answers("u1", SUBJECT_ID)) == 2
        assert await store.get_users_answers("u1", "show:603") == []


class TestSampleRatings:
    """Tests for the sample of completed ratings."""

    async def _add_completed(self, store, user_id, total):
        raw_args = (
            RawCalculationArguments({QUESTION_IDS[0]: 10 * total}, total)
            if total is not None
            else None
        )
        await store.upsert_rating(
            _rating(
                user_id,
                answers_for(QUESTION_IDS, NO),
                users_rating=LetterGrade.A,
                raw_args=raw_args,
            )
        )

    async def test_ordered_by_total_descending_with_legacy_last(self, async_db_session):
        store = RatingStore(async_db_session)
        await self._add_completed(store, "legacy", None)
        await self._add_completed(store, "u2", 2)
        await self._add_completed(store, "u3", 3)
        await self._add_completed(store, "u1", 1)

        sample = await store.get_sample_ratings(SUBJECT_ID)

        assert [r.user_id for r in sample] == ["u3", "u2", "u1", "legacy"]
        assert sample[-1].raw_args is None

    async def test_in_progress_ratings_are_excluded(self, async_db_session):
        store = RatingStore(async_db_session)
        await self._add_completed(store, "u1", 1)
        await store.upsert_rating(_rating("u2", answers_for(QUESTION_IDS[:2], NO)))

        sample = await store.get_sample_ratings(SUBJECT_ID)

        assert [r.user_id for r in sample] == ["u1"]

    async def test_capped_at_sample_size(self, async_db_session):
        store = RatingStore(async_db_session, sample_size=2)
        for total in range(1, 5):
            await self._add_completed(store, f"u{total}", total)

        sample = await store.get_sample_ratings(SUBJECT_ID)

        assert [r.raw_args.total for r in sample] == [4, 3]


class TestQuestionCatalog:
    """Tests for loading the active catalog."""

    async def test_active_questions_in_position_order(self, async_db_session, db_questions):
        questions = await QuestionCatalog(async_db_session).get_questions()

        assert [q.id for q in questions] == QUESTION_IDS
        assert [o.points for o in questions[0].options] == [0, 10, 3]
        assert questions[0].header == "HEADER 1"

    async def test_empty_catalog(self, async_db_session):
        assert await QuestionCatalog(async_db_session).get_questions() == []

    @pytest.mark.parametrize("points", [None, "n/a", True])
    def test_non_numeric_points_mean_not_applicable(self, points):
        option = option_from_dict({"answer": "Not applicable", "points": points})

        assert option.points is None


class TestBuildEngine:
    """Tests for the engine wired to the database."""

    async def test_complete_quiz_is_persisted(self, async_db_session, db_questions):
        engine = build_engine(async_db_session, SubjectKind.SHOW, sample_size=50)

        results = []
        for question_id in QUESTION_IDS:
            outcome = await engine.process_answer(
                SubmittedAnswer(subject_id="1399", question_id=question_id, answer=NO),
                "u1",
                "Jon S.",
            )
            results.append(outcome.result)
        await async_db_session.commit()

        assert results[0] == AnswerResult.TEST_STARTED
        assert results[-1] == AnswerResult.TEST_COMPLETED

        rating = await RatingStore(async_db_session).get_rating("show:1399", "u1")
        assert rating.users_rating == LetterGrade.A
        assert rating.raw_args.total == 1
