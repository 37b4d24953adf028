import pytest
from fastapi.testclient import TestClient

from journey_share.config import Settings
from journey_share.main import create_app
from journey_share.models import Journey, Stop


@pytest.fixture
def settings(tmp_path):
    return Settings(
        stripe_secret_key="sk_test_123",
        stripe_webhook_secret="whsec_test",
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        client_url="http://localhost:3000",
    )


@pytest.fixture
def fastapi_app(settings):
    app = create_app(settings)
    yield app
    app.state.engine.dispose()


@pytest.fixture
def session_factory(fastapi_app):
    return fastapi_app.state.session_factory


@pytest.fixture
def client(fastapi_app):
    with TestClient(fastapi_app) as c:
        yield c


@pytest.fixture
def make_journey(session_factory):
    """Insert a journey (and optional stops) directly, returning its id."""

    def _make(title="Weekend in Lisbon", paid=False, shareable_token=None, stops=()):
        db = session_factory()
        journey = Journey(title=title, paid=paid, shareable_token=shareable_token)
        for order, stop in enumerate(stops, start=1):
            fields = {"order": order, **stop}
            journey.stops.append(Stop(**fields))
        db.add(journey)
        db.commit()
        journey_id = journey.id
        db.close()
        return journey_id

    return _make
