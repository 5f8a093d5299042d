"""
Shared test fixtures: in-memory SQLite async database + FastAPI AsyncClient.

Strategy:
1. Point DATABASE_URL and the upload directories at throwaway locations
   before the application modules are imported
2. Build a fresh in-memory engine for every test
3. Route the app's session and AI adapter dependencies to test doubles via
   dependency_overrides
"""
import os
import tempfile
from collections.abc import AsyncGenerator

# ── 1. Environment ──
_TMP = tempfile.mkdtemp(prefix="securauditz-tests-")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["DEBUG"] = "false"
os.environ["AI_PROVIDER"] = "none"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP, "uploads")
os.environ["FRAMEWORK_DOCS_DIR"] = os.path.join(_TMP, "framework_docs")

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from securauditz.database import get_session  # noqa: E402
from securauditz.deps import get_ai_adapter  # noqa: E402
from securauditz.main import app as fastapi_app  # noqa: E402
from securauditz.models import Base, Control, Framework  # noqa: E402
from securauditz.services.ai_adapters import AIAdapter, LLMResponse  # noqa: E402


class FakeAdapter(AIAdapter):
    """Records prompts and answers with a canned recommendation."""

    def __init__(self, text: str = "Enable MFA for all administrative accounts.", error: Exception | None = None):
        super().__init__("http://fake", "key", "fake-model")
        self.text = text
        self.error = error
        self.calls: list[dict] = []

    async def chat_completion(self, system, user_message, max_tokens, temperature, timeout=120):
        self.calls.append({"system": system, "user_message": user_message})
        if self.error:
            raise self.error
        return LLMResponse(text=self.text, tokens_input=10, tokens_output=5, model=self.model)


# ── Fixtures ──

@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def ai_adapter():
    """Adapter injected into the app; ``None`` means AI not configured."""
    return None


@pytest_asyncio.fixture
async def client(session_factory, ai_adapter) -> AsyncGenerator[AsyncClient, None]:
    async def _test_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_session] = _test_get_session
    fastapi_app.dependency_overrides[get_ai_adapter] = lambda: ai_adapter
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    fastapi_app.dependency_overrides.clear()


# ── Seed data helpers ──

def make_questions(n: int) -> list[dict]:
    return [
        {"question_text": f"Question {i + 1}?", "options": {"a": "Fully", "b": "Partly", "c": "Not at all"}}
        for i in range(n)
    ]


@pytest_asyncio.fixture
async def seed_catalog(db: AsyncSession):
    """ISMS domain: two frameworks, control A (2 questions) and B (1 question).

    A Cloud framework with one control exists to check domain scoping.
    """
    db.add_all([
        Framework(id="iso27001", name="ISO/IEC 27001:2022", type="ISMS"),
        Framework(id="iso27701", name="ISO/IEC 27701", type="ISMS"),
        Framework(id="csa-ccm", name="CSA CCM", type="Cloud"),
        Control(id="A.5.1", framework_id="iso27001", control_objective="Information security policies",
                control_description="Policies are defined and approved.", questionnaires=make_questions(2)),
        Control(id="P.7.2", framework_id="iso27701", control_objective="Privacy notices",
                questionnaires=make_questions(1)),
        Control(id="CCM-IAM-01", framework_id="csa-ccm", control_objective="Identity management",
                questionnaires=make_questions(3)),
    ])
    await db.commit()
    return {"control_a": "A.5.1", "control_b": "P.7.2"}


AUDIT_PAYLOAD = {
    "title": "ISMS readiness 2026",
    "description": "Pre-certification review",
    "domain_type": "ISMS",
    "userId": "user-1",
    "client_company_name": "Acme Corp",
    "client_spoc_name": "Jane Roe",
    "client_spoc_email": "jane@acme.test",
}


@pytest_asyncio.fixture
async def seed_audit(client: AsyncClient, seed_catalog):
    r = await client.post("/api/audits", json=AUDIT_PAYLOAD)
    assert r.status_code == 201, r.text
    return r.json()["id"]


def answered(n: int) -> list[dict]:
    return [
        {"question_index": i, "question_text": f"Question {i + 1}?", "selected_option": "a", "option_text": "Fully"}
        for i in range(n)
    ]


def unanswered(n: int) -> list[dict]:
    return [
        {"question_index": i, "question_text": f"Question {i + 1}?", "selected_option": None, "option_text": None}
        for i in range(n)
    ]

