import threading

import pytest

from people_api.app import store as store_module
from people_api.app.config import Settings
from people_api.app.errors import PersonNotFound
from people_api.app.store import (
    MemoryPersonStore,
    Person,
    PostgresPersonStore,
    create_store,
)


def test_memory_store_assigns_increasing_ids():
    store = MemoryPersonStore()
    first = store.save(Person(first_name="Martin", last_name="Fowler"))
    second = store.save(Person(first_name="Kent", last_name="Beck"))
    assert (first.id, second.id) == (1, 2)
    assert store.find_by_id(1) == first
    assert store.find_all() == [first, second]
    assert store.count() == 2


def test_memory_store_does_not_reuse_deleted_ids():
    store = MemoryPersonStore()
    first = store.save(Person(first_name="Martin", last_name="Fowler"))
    assert store.delete_by_id(first.id) is True
    assert store.delete_by_id(first.id) is False
    again = store.save(Person(first_name="Martin", last_name="Fowler"))
    assert again.id != first.id
    assert store.find_by_id(first.id) is None


def test_memory_store_overwrites_existing_record():
    store = MemoryPersonStore()
    saved = store.save(Person(first_name="Martin", last_name="Fowler"))
    store.save(Person(id=saved.id, first_name="John", last_name="Smith"))
    assert store.find_by_id(saved.id) == Person(id=saved.id, first_name="John", last_name="Smith")
    assert store.count() == 1


def test_memory_store_rejects_update_of_missing_record():
    with pytest.raises(PersonNotFound):
        MemoryPersonStore().save(Person(id=7, first_name="Ghost", last_name="Writer"))


def test_memory_store_find_by_last_name(store):
    assert [p.first_name for p in store.find_by_last_name("Beck")] == ["Kent"]
    assert store.find_by_last_name("beck") == []
    with pytest.raises(ValueError):
        store.find_by("id", "1")


def test_memory_store_pages(store):
    assert [p.last_name for p in store.find_page(0, 2)] == ["Fowler", "Beck"]
    assert [p.last_name for p in store.find_page(1, 2)] == ["Vernon"]
    assert store.find_page(5, 2) == []


def test_memory_store_concurrent_saves_get_unique_ids():
    store = MemoryPersonStore()
    ids = []

    def worker():
        for _ in range(50):
            ids.append(store.save(Person(first_name="A", last_name="B")).id)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(set(ids)) == 200
    assert store.count() == 200


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        self.conn.executed.append((" ".join(sql.split()), params))

    def fetchone(self):
        return self.conn.results.pop(0)

    def fetchall(self):
        return self.conn.results.pop(0)


class FakeConnection:
    def __init__(self, results):
        self.results = list(results)
        self.executed = []
        self.commits = 0

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def cursor(self):
        return FakeCursor(self)

    def commit(self):
        self.commits += 1


@pytest.fixture
def fake_db(monkeypatch):
    conn = FakeConnection([])
    urls = []

    def fake_get_connection(url):
        urls.append(url)
        return conn

    monkeypatch.setattr(store_module, "get_connection", fake_get_connection)
    conn.urls = urls
    return conn


def test_postgres_store_insert(fake_db):
    fake_db.results.append({"id": 11, "first_name": "John", "last_name": "Doe"})
    saved = PostgresPersonStore("postgresql://db/people").save(Person(first_name="John", last_name="Doe"))
    assert saved == Person(id=11, first_name="John", last_name="Doe")
    sql, params = fake_db.executed[0]
    assert sql.startswith("INSERT INTO people (first_name, last_name)")
    assert params == ("John", "Doe")
    assert fake_db.commits == 1
    assert fake_db.urls == ["postgresql://db/people"]


def test_postgres_store_update_of_missing_row_raises(fake_db):
    fake_db.results.append(None)
    with pytest.raises(PersonNotFound):
        PostgresPersonStore("postgresql://db/people").save(Person(id=3, first_name="A", last_name="B"))
    assert fake_db.executed[0][0].startswith("UPDATE people SET")


def test_postgres_store_find_by_last_name(fake_db):
    fake_db.results.append([{"id": 2, "first_name": "Kent", "last_name": "Beck"}])
    found = PostgresPersonStore("postgresql://db/people").find_by_last_name("Beck")
    assert found == [Person(id=2, first_name="Kent", last_name="Beck")]
    sql, params = fake_db.executed[0]
    assert "WHERE last_name=%s ORDER BY id" in sql
    assert params == ("Beck",)


def test_postgres_store_rejects_unknown_search_field(fake_db):
    with pytest.raises(ValueError):
        PostgresPersonStore("postgresql://db/people").find_by("first_name; DROP TABLE people", "x")
    assert fake_db.executed == []


def test_postgres_store_delete_reports_missing_row(fake_db):
    fake_db.results.extend([{"id": 5}, None])
    pg = PostgresPersonStore("postgresql://db/people")
    assert pg.delete_by_id(5) is True
    assert pg.delete_by_id(5) is False


def test_postgres_store_page_and_count(fake_db):
    fake_db.results.extend([[{"id": 3, "first_name": "Vaughn", "last_name": "Vernon"}], {"c": 3}])
    pg = PostgresPersonStore("postgresql://db/people")
    assert [p.id for p in pg.find_page(1, 2)] == [3]
    assert fake_db.executed[0][1] == (2, 2)
    assert pg.count() == 3


def test_create_store_picks_backend():
    assert isinstance(create_store(Settings()), MemoryPersonStore)
    pg = create_store(Settings(database_url="postgresql://db/people"))
    assert isinstance(pg, PostgresPersonStore)
    assert pg.database_url == "postgresql://db/people"
