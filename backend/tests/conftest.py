import sys
from pathlib import Path

# Add backend directory to Python path FIRST
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Now import after path is set
import pytest
from fastapi.testclient import TestClient

from config.settings import Settings
from constants import DeploymentMode
from database import ConnectionPool
from dtos.request.post_request import NewPostRequest
from init_db import create_tables
from main import create_app
from repositories.post_repository import PostRepository


@pytest.fixture
def database_url(tmp_path):
    """File-backed SQLite database, one per test"""
    return f"sqlite:///{tmp_path / 'blog.db'}"


@pytest.fixture
def make_pool(database_url):
    """Factory for pools on the test database; every pool is disposed afterwards"""
    pools = []

    def _make(**kwargs):
        kwargs.setdefault("pool_size", 3)
        kwargs.setdefault("timeout", 5.0)
        pool = ConnectionPool(database_url, **kwargs)
        create_tables(pool)
        pools.append(pool)
        return pool

    yield _make
    for pool in pools:
        pool.dispose()


@pytest.fixture
def pool(make_pool):
    return make_pool()


@pytest.fixture
def db_session(pool):
    """Session on one borrowed connection"""
    with pool.acquire() as session:
        yield session


@pytest.fixture
def repo(db_session):
    return PostRepository(db_session)


@pytest.fixture
def sample_posts(repo):
    """The two posts every repository scenario starts from (ids 1 and 2)"""
    first = repo.create(NewPostRequest(title="First post", body="Lorem ipsum"))
    second = repo.create(NewPostRequest(title="Second post", body="Dolor sit amet"))
    return first, second


def build_client(pool, database_url, mode=DeploymentMode.SITE):
    app = create_app(Settings(database_url=database_url, mode=mode), pool=pool)
    return TestClient(app)


@pytest.fixture
def client(pool, database_url):
    with build_client(pool, database_url) as client:
        yield client


@pytest.fixture
def api_client(pool, database_url):
    with build_client(pool, database_url, mode=DeploymentMode.API) as client:
        yield client
