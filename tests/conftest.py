import os
import tempfile

_tmpdir = tempfile.mkdtemp(prefix="hocnhac-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_tmpdir, 'test.db')}"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["JWT_SECRET_KEY"] = "test-secret"

import httpx  # noqa: E402
import pytest  # noqa: E402

from hocnhac.core.security import create_access_token  # noqa: E402
from hocnhac.db.base import Base  # noqa: E402
from hocnhac.db.session import async_session_maker, engine  # noqa: E402
from hocnhac.schemas.identity import Actor  # noqa: E402


@pytest.fixture
async def tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db(tables):
    async with async_session_maker() as session:
        yield session


@pytest.fixture
def alice() -> Actor:
    return Actor(id="u1", name="Alice")


@pytest.fixture
def bob() -> Actor:
    return Actor(id="u2", name="Bob", avatar_url="https://cdn.example.com/bob.png")


@pytest.fixture
def admin() -> Actor:
    return Actor(id="admin-1", name="Quản trị", role="admin")


def auth_header(actor: Actor) -> dict[str, str]:
    token = create_access_token(actor.id, name=actor.name, avatar=actor.avatar_url, role=actor.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client(tables):
    from hocnhac.main import app

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
