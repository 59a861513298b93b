import sys
from io import BytesIO
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from openpyxl import Workbook
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

sys.path.append(str(Path(__file__).parents[1] / "src"))

from cardbook.analysis.engine import get_analysis_engine
from cardbook.categorization.keywords import (
    KeywordTable,
    KeywordTableProvider,
    get_keyword_provider,
)
from cardbook.db.session import get_db
from cardbook.main import app
from cardbook.schemas.analysis import AnalysisResponse

TEST_DATABASE_URL = "sqlite+aiosqlite://"

TEST_EMAIL = "testuser@example.com"

KOOKMIN_HEADER = [
    ["KB국민카드 이용내역"],
    ["조회기간", "2024.02.01 ~ 2024.02.29"],
    [],
    ["고객명", "홍길동"],
    ["거래일시", "구분", "가맹점명", "입금액", "출금액", "잔액", "메모", "결제수단"],
]
KOOKMIN_TRAILER = ["합계", None, None, 0, 0, None, None, None]


def kookmin_row(date, merchant, amount, payment_method="신용"):
    """One Kookmin data row: date, type, merchant, deposit, withdrawal, balance, memo, method."""
    return [date, "승인", merchant, 0, amount, None, None, payment_method]


def kookmin_sheet(*rows):
    return [*KOOKMIN_HEADER, *rows, KOOKMIN_TRAILER]


def make_xlsx(rows) -> bytes:
    """Build an in-memory .xlsx workbook with the given rows on its first sheet."""
    workbook = Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(list(row))
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def sample_analysis(month: str = "2024-02", score: int = 72) -> AnalysisResponse:
    return AnalysisResponse.model_validate(
        {
            "month": month,
            "summary": "Dining out dominated February spending.",
            "trends": [
                {
                    "type": "increase",
                    "category": "Food",
                    "change": "+45%",
                    "description": "Coffee shops nearly every weekday.",
                },
                {
                    "type": "stable",
                    "category": "Transport",
                    "change": "0%",
                    "description": "Commute costs unchanged.",
                },
            ],
            "recommendations": [
                {
                    "title": "Cap cafe visits",
                    "description": "Limit coffee purchases to three per week.",
                    "priority": "high",
                }
            ],
            "budgetHealth": {"score": score, "status": "Good", "description": "On track."},
        }
    )


class StubAnalysisEngine:
    """Analysis engine double that records calls and returns a canned analysis."""

    def __init__(self, response: AnalysisResponse | None = None, error: Exception | None = None):
        self.response = response or sample_analysis()
        self.error = error
        self.calls: list[tuple[list, str]] = []

    async def analyze(self, transactions, month):
        self.calls.append((list(transactions), month))
        if self.error is not None:
            raise self.error
        return self.response.model_copy(deep=True)


@pytest.fixture(scope="function")
async def test_engine():
    """In-memory SQLite engine with working SAVEPOINT support.

    pysqlite's own transaction handling swallows SAVEPOINTs; emitting BEGIN
    ourselves restores them so begin_nested() behaves as on PostgreSQL.
    """
    from cardbook.models.base import Base

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(test_engine):
    """Provide a test database session."""
    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def test_user(db_session: AsyncSession):
    """Create the default caller."""
    from cardbook.models.user import User

    user = User(email=TEST_EMAIL, name="Test User")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
async def another_user(db_session: AsyncSession):
    """Create a second owner for isolation tests."""
    from cardbook.models.user import User

    user = User(email="another@example.com", name="Another User")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
def keyword_table() -> KeywordTable:
    return KeywordTable.from_mapping(
        {
            "스타벅스": "Food",
            "스타벅스 강남점": "Date",
            "GS25": "Convenience",
            "카카오T": "Transport",
        }
    )


@pytest.fixture
def analysis_engine() -> StubAnalysisEngine:
    return StubAnalysisEngine()


@pytest.fixture
async def client(db_session: AsyncSession, keyword_table: KeywordTable, analysis_engine):
    """Provide test client with database, keyword and engine overrides."""

    async def override_get_db():
        yield db_session

    provider = KeywordTableProvider(keyword_table)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_keyword_provider] = lambda: provider
    app.dependency_overrides[get_analysis_engine] = lambda: analysis_engine

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"X-User-Email": TEST_EMAIL}
