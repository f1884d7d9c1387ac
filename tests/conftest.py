import pytest
from unittest.mock import MagicMock, AsyncMock
import httpx


class RecordingProcessor:
    """Stands in for the thread pool: remembers dispatched job ids without running them."""

    def __init__(self):
        self.submitted = []

    def submit(self, job_id):
        self.submitted.append(job_id)
        return None


@pytest.fixture
def session_factory():
    from sqlalchemy import create_engine
    from sqlalchemy.orm import sessionmaker
    from sqlalchemy.pool import StaticPool
    from src.core.database import Base
    import src.models  # noqa: F401

    # Use in-memory SQLite shared by every session of the test
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def test_db(session_factory):
    from src.core.seed import seed_defaults

    db = session_factory()
    seed_defaults(db)
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def sources(test_db):
    from src.models import NewsSource

    return {source.name: source for source in test_db.query(NewsSource).all()}


@pytest.fixture
def recording_processor():
    return RecordingProcessor()


@pytest.fixture
def credential_lookup():
    return lambda key_name: "test-key"


@pytest.fixture
def source_config():
    from src.news.sources.base import SourceConfig

    def build(name, base_url, api_key_name):
        return SourceConfig(name=name, base_url=base_url, api_key_name=api_key_name, timeout_seconds=5.0)

    return build


@pytest.fixture
def newsapi_adapter(source_config, credential_lookup):
    from src.news.sources.newsapi_adapter import NewsAPIAdapter
    return NewsAPIAdapter(source_config("NewsAPI", "https://newsapi.org/v2", "NEWSAPIORG"), credential_lookup)


@pytest.fixture
def guardian_adapter(source_config, credential_lookup):
    from src.news.sources.guardian_adapter import GuardianAdapter
    return GuardianAdapter(
        source_config("Guardian", "https://content.guardianapis.com", "THEGUARDIANOPENPLATFORM"),
        credential_lookup,
    )


@pytest.fixture
def alpha_vantage_adapter(source_config, credential_lookup):
    from src.news.sources.alpha_vantage_adapter import AlphaVantageAdapter
    return AlphaVantageAdapter(
        source_config("Alpha Vantage", "https://www.alphavantage.co/query", "ALPHAVANTAGE"),
        credential_lookup,
    )


@pytest.fixture
def newsapi_payload():
    return {
        "status": "ok",
        "totalResults": 2,
        "articles": [
            {
                "source": {"id": "reuters", "name": "Reuters"},
                "author": "Jane Doe",
                "title": "Markets rally on rate cut hopes",
                "description": "Stocks climbed on Tuesday.",
                "url": "https://example.com/markets-rally",
                "urlToImage": "https://example.com/markets.jpg",
                "publishedAt": "2024-01-15T09:30:00Z",
                "content": "Stocks climbed on Tuesday as investors... [+2345 chars]",
            },
            {
                "source": {"id": None, "name": "BBC News"},
                "author": None,
                "title": "Bitcoin tops new high",
                "description": None,
                "url": "https://example.com/bitcoin-high",
                "urlToImage": None,
                "publishedAt": "2024-01-15T10:00:00Z",
                "content": None,
            },
        ],
    }


@pytest.fixture
def guardian_payload():
    return {
        "response": {
            "status": "ok",
            "total": 1,
            "results": [
                {
                    "id": "business/2024/jan/15/markets-rally",
                    "sectionId": "business",
                    "sectionName": "Business",
                    "webTitle": "Markets rally as inflation cools",
                    "webUrl": "https://www.theguardian.com/business/2024/jan/15/markets-rally",
                    "webPublicationDate": "2024-01-15T08:00:00Z",
                    "fields": {
                        "headline": "Markets rally as inflation cools",
                        "bodyText": "Inflation cooled in December. " * 40,
                        "thumbnail": "https://media.guim.co.uk/thumb.jpg",
                        "byline": "Richard Partington",
                    },
                }
            ],
        }
    }


@pytest.fixture
def alpha_vantage_payload():
    return {
        "items": "1",
        "feed": [
            {
                "title": "Apple shares rise after earnings beat",
                "url": "https://example.com/apple-earnings",
                "time_published": "20240115T093000",
                "authors": ["Alex Smith", "Sam Lee"],
                "summary": "Apple reported better than expected earnings.",
                "banner_image": "https://example.com/apple.jpg",
                "source": "Benzinga",
            }
        ],
    }


@pytest.fixture
def mock_json_response():
    def build(payload):
        response = MagicMock(spec=httpx.Response)
        response.json = MagicMock(return_value=payload)
        response.raise_for_status = MagicMock()
        return response

    return build


@pytest.fixture
def mock_orchestrator():
    from src.services.fetch_orchestrator import FetchResult

    orchestrator = MagicMock()
    orchestrator.run = AsyncMock(return_value=FetchResult(articles_added=1))
    return orchestrator


@pytest.fixture
async def async_client(test_db, recording_processor, mock_orchestrator):
    from httpx import AsyncClient, ASGITransport
    from src.main import app
    from src.core.database import get_db
    from src.api.dependencies import get_orchestrator, get_processor

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_processor] = lambda: recording_processor
    app.dependency_overrides[get_orchestrator] = lambda: mock_orchestrator

    # Use ASGITransport for direct app interaction
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
