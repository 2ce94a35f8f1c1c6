"""
Tests for answer, rating and review endpoints.
"""
from unittest.mock import AsyncMock, patch

import pytest

from rating_service.db import SubjectStore
from tests.helpers import NO, QUESTION_IDS, YES


async def _answer(client, headers, question_id, answer=NO, kind="movie", subject_id="603"):
    return await client.post(
        f"/v1/answers/{kind}",
        json={"subject_id": subject_id, "question_id": question_id, "answer": answer},
        headers=headers,
    )


async def _complete_quiz(client, headers, answer=NO, kind="movie", subject_id="603"):
    response = None
    for question_id in QUESTION_IDS:
        response = await _answer(client, headers, question_id, answer, kind, subject_id)
    return response


class TestSubmitAnswer:
    """Tests for POST /v1/answers/{kind}."""

    async def test_first_answer_creates_rating(self, async_client, db_questions, user_headers):
        response = await _answer(async_client, user_headers, QUESTION_IDS[0])

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "Success"
        assert data["message"] == "Created new rating object"
        assert data["result"] == "TEST_STARTED"
        assert data["users_rating"] is None
        assert data["global_rating"] is None

    async def test_middle_answer_is_accepted(self, async_client, db_questions, user_headers):
        await _answer(async_client, user_headers, QUESTION_IDS[0])

        response = await _answer(async_client, user_headers, QUESTION_IDS[1])

        data = response.json()
        assert data["result"] == "ANSWER_ACCEPTED"
        assert data["message"] == "Added answer to rating object"

    async def test_completion_returns_both_grades(
        self, async_client, db_questions, user_headers
    ):
        response = await _complete_quiz(async_client, user_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "Success"
        assert data["result"] == "TEST_COMPLETED"
        assert data["message"] == "Updated movie info with new rating"
        assert data["users_rating"] == "A"
        assert data["global_rating"] == "A"

    async def test_completion_updates_subject_summary(
        self, async_client, db_questions, user_headers
    ):
        await _complete_quiz(async_client, user_headers, kind="show", subject_id="1399")

        response = await async_client.get("/v1/subjects/show/1399")

        assert response.status_code == 200
        data = response.json()
        assert data["subject_id"] == "show:1399"
        assert data["kind"] == "show"
        assert data["rating"] == "A"
        assert data["rated_counter"] == 1
        assert data["rating_updated_at"] is not None

    async def test_summary_carries_global_grade_not_users_grade(
        self, async_client, db_questions, user_headers
    ):
        await _complete_quiz(async_client, user_headers, answer=YES)
        second_user = {"X-User-Id": "user-2", "X-User-Name": "John Smith"}

        response = await _complete_quiz(async_client, second_user, answer=NO)

        data = response.json()
        assert data["users_rating"] == "A"
        # One all-"Yes" and one all-"No" submission average to 50
        assert data["global_rating"] == "C"

        summary = (await async_client.get("/v1/subjects/movie/603")).json()
        assert summary["rating"] == "C"
        assert summary["rated_counter"] == 2

    async def test_summary_failure_does_not_fail_the_answer(
        self, async_client, db_questions, user_headers
    ):
        with patch.object(
            SubjectStore,
            "record_completion",
            AsyncMock(side_effect=RuntimeError("summary store down")),
        ):
            response = await _complete_quiz(async_client, user_headers)

        assert response.status_code == 200
        assert response.json()["result"] == "TEST_COMPLETED"

        rating = (
            await async_client.get(
                "/v1/answers/movie/603/ratings/current-user", headers=user_headers
            )
        ).json()
        assert rating["users_rating"] == "A"

    async def test_retake_is_reported_as_error(self, async_client, db_questions, user_headers):
        await _complete_quiz(async_client, user_headers)

        response = await _answer(async_client, user_headers, QUESTION_IDS[0], YES)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "Error"
        assert data["result"] == "ATTEMPT_TO_RETAKE_TEST"
        assert data["message"] == "The test has been answered already, or answer out of range"

    @pytest.mark.parametrize(
        "question_id,answer",
        [("unknown-question", NO), ("inactive-question", NO), (QUESTION_IDS[0], 3)],
    )
    async def test_invalid_answer_is_reported_as_error(
        self, async_client, db_questions, user_headers, question_id, answer
    ):
        response = await _answer(async_client, user_headers, question_id, answer)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "Error"
        assert data["result"] == "INVALID_ANSWER"

        answers = await async_client.get("/v1/answers/movie/603", headers=user_headers)
        assert answers.json() is None

    async def test_missing_identity_is_unauthorized(self, async_client, db_questions):
        response = await _answer(async_client, {}, QUESTION_IDS[0])

        assert response.status_code == 401
        assert response.json()["detail"] == "User identity is required."

    async def test_unknown_kind_is_rejected(self, async_client, db_questions, user_headers):
        response = await _answer(async_client, user_headers, QUESTION_IDS[0], kind="book")

        assert response.status_code == 422

    async def test_blank_subject_id_is_rejected(self, async_client, db_questions, user_headers):
        response = await _answer(
            async_client, user_headers, QUESTION_IDS[0], subject_id="   "
        )

        assert response.status_code == 422

    async def test_movies_and_shows_are_separate(
        self, async_client, db_questions, user_headers
    ):
        await _answer(async_client, user_headers, QUESTION_IDS[0], kind="movie")

        response = await _answer(async_client, user_headers, QUESTION_IDS[0], kind="show")

        assert response.json()["result"] == "TEST_STARTED"

    async def test_stored_user_name_is_shortened(
        self, async_client, db_questions, user_headers
    ):
        await _answer(async_client, user_headers, QUESTION_IDS[0])

        rating = (
            await async_client.get(
                "/v1/answers/movie/603/ratings/current-user", headers=user_headers
            )
        ).json()

        assert rating["user_name"] == "Jane D."


class TestGetAnswers:
    """Tests for GET /v1/answers/{kind}/{subject_id}."""

    async def test_returns_recorded_answers(self, async_client, db_questions, user_headers):
        await _answer(async_client, user_headers, QUESTION_IDS[0], NO)
        await _answer(async_client, user_headers, QUESTION_IDS[1], YES)

        response = await async_client.get("/v1/answers/movie/603", headers=user_headers)

        assert response.status_code == 200
        assert response.json() == [
            {"question_id": QUESTION_IDS[0], "answer": NO},
            {"question_id": QUESTION_IDS[1], "answer": YES},
        ]

    async def test_null_without_rating(self, async_client, db_questions, user_headers):
        response = await async_client.get("/v1/answers/movie/603", headers=user_headers)

        assert response.status_code == 200
        assert response.json() is None

    async def test_requires_identity(self, async_client, db_questions):
        response = await async_client.get("/v1/answers/movie/603")

        assert response.status_code == 401


class TestGetRatings:
    """Tests for the rating read endpoints."""

    async def test_lists_completed_ratings_only(
        self, async_client, db_questions, user_headers
    ):
        await _complete_quiz(async_client, user_headers)
        second_user = {"X-User-Id": "user-2", "X-User-Name": "John Smith"}
        await _answer(async_client, second_user, QUESTION_IDS[0])

        response = await async_client.get("/v1/answers/movie/603/ratings")

        assert response.status_code == 200
        ratings = response.json()
        assert [r["user_id"] for r in ratings] == ["user-1"]
        assert ratings[0]["users_rating"] == "A"
        assert ratings[0]["raw_args"]["total"] == 1
        assert len(ratings[0]["answers"]) == len(QUESTION_IDS)

    async def test_newest_aggregate_first(self, async_client, db_questions, user_headers):
        await _complete_quiz(async_client, user_headers)
        await _complete_quiz(
            async_client, {"X-User-Id": "user-2", "X-User-Name": "John Smith"}
        )

        ratings = (await async_client.get("/v1/answers/movie/603/ratings")).json()

        assert [r["user_id"] for r in ratings] == ["user-2", "user-1"]
        assert [r["raw_args"]["total"] for r in ratings] == [2, 1]

    async def test_current_user_rating_null_when_absent(
        self, async_client, db_questions, user_headers
    ):
        response = await async_client.get(
            "/v1/answers/movie/603/ratings/current-user", headers=user_headers
        )

        assert response.status_code == 200
        assert response.json() is None


class TestReviews:
    """Tests for adding and deleting reviews."""

    async def test_add_review_without_answers(self, async_client, db_questions, user_headers):
        response = await async_client.post(
            "/v1/answers/movie/review",
            json={"subject_id": "603", "review": "A <b>classic</b>"},
            headers=user_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["review"] == "A &lt;b&gt;classic&lt;/b&gt;"
        assert data["answers"] == []
        assert data["users_rating"] is None

        summary = (await async_client.get("/v1/subjects/movie/603")).json()
        assert summary["reviews_counter"] == 1
        assert summary["rating"] == "?"

    async def test_review_survives_later_answers(
        self, async_client, db_questions, user_headers
    ):
        await async_client.post(
            "/v1/answers/movie/review",
            json={"subject_id": "603", "review": "Great"},
            headers=user_headers,
        )

        await _complete_quiz(async_client, user_headers)

        rating = (
            await async_client.get(
                "/v1/answers/movie/603/ratings/current-user", headers=user_headers
            )
        ).json()
        assert rating["review"] == "Great"
        assert rating["users_rating"] == "A"

    async def test_blank_review_returns_null(self, async_client, db_questions, user_headers):
        response = await async_client.post(
            "/v1/answers/movie/review",
            json={"subject_id": "603", "review": "  "},
            headers=user_headers,
        )

        assert response.status_code == 200
        assert response.json() is None

    async def test_delete_review(self, async_client, db_questions, user_headers):
        await async_client.post(
            "/v1/answers/show/review",
            json={"subject_id": "1399", "review": "Great"},
            headers=user_headers,
        )

        response = await async_client.delete(
            "/v1/answers/show/1399/review", headers=user_headers
        )

        assert response.status_code == 200
        assert response.json()["review"] == ""
        summary = (await async_client.get("/v1/subjects/show/1399")).json()
        assert summary["reviews_counter"] == 0

    async def test_delete_review_without_rating(
        self, async_client, db_questions, user_headers
    ):
        response = await async_client.delete(
            "/v1/answers/movie/603/review", headers=user_headers
        )

        assert response.status_code == 200
        assert response.json() is None

    async def test_review_requires_identity(self, async_client, db_questions):
        response = await async_client.post(
            "/v1/answers/movie/review", json={"subject_id": "603", "review": "Great"}
        )

        assert response.status_code == 401

    async def test_review_database_failure_returns_500(
        self, async_client, db_questions, user_headers
    ):
        with patch(
            "rating_service.services.reviews.ReviewService.add_review",
            AsyncMock(side_effect=RuntimeError("disk full")),
        ):
            response = await async_client.post(
                "/v1/answers/movie/review",
                json={"subject_id": "603", "review": "Great"},
                headers=user_headers,
            )

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to save review. Please try again later."


class TestBlankSubjectIdInPath:
    """Blank ids in the URL path are rejected before any lookup."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/v1/answers/movie/%20"),
            ("GET", "/v1/answers/movie/%20/ratings"),
            ("GET", "/v1/answers/movie/%20/ratings/current-user"),
            ("DELETE", "/v1/answers/movie/%20/review"),
        ],
    )
    async def test_rejected_with_422(
        self, async_client, db_questions, user_headers, method, path
    ):
        response = await async_client.request(method, path, headers=user_headers)

        assert response.status_code == 422
        assert isinstance(response.json()["detail"], list)
