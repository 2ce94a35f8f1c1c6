"""
Pytest configuration and shared fixtures for testing.
"""
import sys
from pathlib import Path

# Add project root to path so libs/ is importable
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from contextlib import asynccontextmanager  # noqa: E402
from typing import AsyncGenerator, List  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from rating_service.core.rating import QuestionDefinition  # noqa: E402
from rating_service.main import app  # noqa: E402
from rating_service.models import Base, Question, get_db  # noqa: E402
from tests.helpers import QUESTION_IDS, OPTION_DATA, make_questions  # noqa: E402


@asynccontextmanager
async def _test_lifespan(app):
    """No-op lifespan for tests."""
    yield


app.router.lifespan_context = _test_lifespan


@pytest.fixture
def questions() -> List[QuestionDefinition]:
    return make_questions()


_TEST_DB = Path(__file__).parent / "test.db"
ASYNC_SQLALCHEMY_DATABASE_URL = f"sqlite+aiosqlite:///{_TEST_DB}"

async_test_engine = create_async_engine(
    ASYNC_SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
AsyncTestingSessionLocal = async_sessionmaker(
    async_test_engine, class_=AsyncSession, expire_on_commit=False
)


@pytest.fixture(scope="function")
async def async_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh async database session for each test.
    """
    async with async_test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncTestingSessionLocal() as session:
        yield session

    async with async_test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def db_questions(async_db_session: AsyncSession) -> List[Question]:
    """
    Store the standard questionnaire plus one inactive question.
    """
    rows = [
        Question(
            id=question_id,
            header=f"HEADER {index + 1}",
            question=f"question {index + 1}",
            helptext=f"help text {index + 1}",
            weight=100,
            options=OPTION_DATA,
            position=index,
            is_active=True,
        )
        for index, question_id in enumerate(QUESTION_IDS)
    ]
    rows.append(
        Question(
            id="inactive-question",
            header="RETIRED",
            question="Inactive question - should not appear",
            helptext="",
            weight=100,
            options=OPTION_DATA,
            position=99,
            is_active=False,
        )
    )
    async_db_session.add_all(rows)
    await async_db_session.commit()
    return rows


@pytest.fixture(scope="function")
async def async_client(
    async_db_session: AsyncSession,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an async test client with async database dependency override.
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield async_db_session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def user_headers():
    """Identity headers as forwarded by the gateway."""
    return {"X-User-Id": "user-1", "X-User-Name": "Jane Q. Doe"}
