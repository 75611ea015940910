import re
import threading

import pytest

from conftest import make_idea
from idea_processor.db import make_engine, make_session_factory
from idea_processor.errors import NotFoundError, PersistenceError
from idea_processor.pipeline.ids import generate_idea_id
from idea_processor.registry import (
    IdeaRegistry,
    InMemoryIdeaRegistry,
    SqlIdeaRegistry,
    build_registry,
)


@pytest.fixture
def sql_registry():
    engine = make_engine("sqlite:///:memory:")
    registry = SqlIdeaRegistry(make_session_factory(engine))
    registry.create_tables()
    yield registry
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def any_registry(request):
    if request.param == "memory":
        return InMemoryIdeaRegistry()
    return request.getfixturevalue("sql_registry")


def test_put_then_get(any_registry):
    idea = make_idea("idea_1_a", memory_context="prior ideas")
    any_registry.put(idea)

    assert any_registry.get("idea_1_a") == idea


def test_get_unknown(any_registry):
    with pytest.raises(NotFoundError) as exc:
        any_registry.get("idea_missing")

    assert exc.value.detail == {"id": "idea_missing"}


def test_put_is_insert_only(any_registry):
    any_registry.put(make_idea("idea_1_a"))

    with pytest.raises(PersistenceError):
        any_registry.put(make_idea("idea_1_a", text="something else"))

    assert any_registry.get("idea_1_a").original_text == "A SaaS for habit tracking"


def test_list_in_insertion_order(any_registry):
    for n in (3, 1, 2):
        any_registry.put(make_idea(f"idea_{n}_x", text=f"idea number {n}"))

    summaries = any_registry.list_ideas()

    assert [s.id for s in summaries] == ["idea_3_x", "idea_1_x", "idea_2_x"]
    assert summaries[0].name == "DreamSaaS"
    assert summaries[0].summary.startswith("A SaaS platform")
    assert summaries[0].model_dump(by_alias=True).keys() == {"id", "name", "summary", "generatedAt"}


def test_recent_is_oldest_first(any_registry):
    for n in range(5):
        any_registry.put(make_idea(f"idea_{n}_x"))

    assert [i.id for i in any_registry.recent(3)] == ["idea_2_x", "idea_3_x", "idea_4_x"]
    assert any_registry.recent(0) == []


class ListOnlyRegistry(IdeaRegistry):
    """Implements just the three core operations."""

    def __init__(self):
        self.ideas = {}

    def put(self, idea):
        self.ideas[idea.id] = idea

    def get(self, idea_id):
        if idea_id not in self.ideas:
            raise NotFoundError(idea_id)
        return self.ideas[idea_id]

    def list_ideas(self):
        return [idea.summarize() for idea in self.ideas.values()]


def test_recent_derived_from_core_operations():
    registry = ListOnlyRegistry()
    for n in range(4):
        registry.put(make_idea(f"idea_{n}_x"))

    assert [i.id for i in registry.recent(2)] == ["idea_2_x", "idea_3_x"]
    assert registry.recent(10)[0].id == "idea_0_x"
    assert registry.recent(-1) == []


def test_empty_registry(any_registry):
    assert any_registry.list_ideas() == []
    assert any_registry.recent(3) == []


def test_sql_returns_aware_timestamps(sql_registry):
    idea = make_idea("idea_1_a")
    sql_registry.put(idea)

    assert sql_registry.get("idea_1_a").generated_at.tzinfo is not None
    assert sql_registry.list_ideas()[0].generated_at == idea.generated_at


def test_concurrent_puts_lose_nothing():
    registry = InMemoryIdeaRegistry()
    errors = []

    def worker(n):
        try:
            for i in range(50):
                registry.put(make_idea(generate_idea_id(), text=f"worker {n} idea {i}"))
        except Exception as e:  # surfaced below
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    ids = [s.id for s in registry.list_ideas()]
    assert len(ids) == 400
    assert len(set(ids)) == 400


def test_build_registry():
    assert isinstance(build_registry("memory"), InMemoryIdeaRegistry)
    assert isinstance(build_registry("sql", "sqlite:///:memory:"), SqlIdeaRegistry)

    with pytest.raises(ValueError):
        build_registry("mongo")


# ============================================================
# IDS
# ============================================================

def test_idea_id_format():
    assert re.fullmatch(r"idea_\d{13,}_[0-9a-f]{9}", generate_idea_id())


def test_idea_ids_are_unique_and_time_ordered():
    ids = [generate_idea_id() for _ in range(2000)]

    assert len(set(ids)) == len(ids)
    millis = [int(i.split("_")[1]) for i in ids]
    assert millis == sorted(millis)
