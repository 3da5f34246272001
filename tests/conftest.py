import pytest
from fastapi.testclient import TestClient

from people_api.app.config import Settings
from people_api.app.main import create_app
from people_api.app.store import MemoryPersonStore, Person

SEED = [("Martin", "Fowler"), ("Kent", "Beck"), ("Vaughn", "Vernon")]


@pytest.fixture
def store():
    store = MemoryPersonStore()
    for first_name, last_name in SEED:
        store.save(Person(first_name=first_name, last_name=last_name))
    return store


@pytest.fixture
def people(store):
    return store.find_all()


@pytest.fixture
def client(store):
    app = create_app(store=store, settings=Settings())
    with TestClient(app) as c:
        yield c
