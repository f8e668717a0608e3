import pytest

from axlelib import assistant
from axlelib.delivery import DeliveryService
from axlelib.repository import DeliveryRepository
from axlelib.session import SessionContext
from axlelib.storage import InMemoryStorage
from test.utils.delivery_test_data import TEST_RESTAURANTS


@pytest.fixture
def offline_assistant(monkeypatch):
    monkeypatch.setattr(assistant, 'get_client', lambda: None)


@pytest.fixture
def storage() -> InMemoryStorage:
    yield InMemoryStorage()


@pytest.fixture
def repository(storage) -> DeliveryRepository:
    repository = DeliveryRepository(storage)
    repository.initialize(default_restaurants=TEST_RESTAURANTS)
    yield repository


@pytest.fixture
def service(repository, offline_assistant) -> DeliveryService:
    yield DeliveryService(repository)


@pytest.fixture
def session(service) -> SessionContext:
    yield SessionContext(service, session_id='test-session')
