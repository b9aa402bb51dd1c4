import copy
from unittest.mock import AsyncMock

import pytest

from core.articles.editor import ArticleEditor
from core.articles.repo import ArticleRepository
from core.articles.visibility import VisibilityFilter
from core.articles.workflow import WorkflowEngine
from core.auth.model import Actor, Role
from core.categories.registry import CategoryRegistry
from core.integrations.supabase.client import parse_order
from core.profiles.repo import ProfilesRepository


def _matches(row, filters):
    for key, expected in (filters or {}).items():
        value = row.get(key)
        if isinstance(expected, dict):
            for op, val in expected.items():
                if op == "in" and value not in val:
                    return False
                if op == "neq" and value == val:
                    return False
                if op == "gt" and not value > val:
                    return False
                if op == "gte" and not value >= val:
                    return False
                if op == "lt" and not value < val:
                    return False
                if op == "lte" and not value <= val:
                    return False
        elif value != expected:
            return False
    return True


class MemoryClient:
    """SupabaseClient 的内存替身, 接口与 core.integrations.supabase.client 一致"""

    def __init__(self):
        self.tables = {}

    def rows(self, table):
        return self.tables.setdefault(table, [])

    async def select(self, table, filters=None, columns="*", order=None, limit=None, offset=None):
        rows = [copy.deepcopy(r) for r in self.rows(table) if _matches(r, filters)]
        if order:
            column, desc = parse_order(order)
            rows.sort(key=lambda r: r.get(column) or "", reverse=desc)
        if offset:
            rows = rows[offset:]
        if limit:
            rows = rows[:limit]
        return rows

    async def count(self, table, filters=None):
        return len([r for r in self.rows(table) if _matches(r, filters)])

    async def insert(self, table, data):
        self.rows(table).append(copy.deepcopy(data))
        return copy.deepcopy(data)

    async def update(self, table, data, filters):
        updated = []
        for row in self.rows(table):
            if _matches(row, filters):
                row.update(copy.deepcopy(data))
                updated.append(copy.deepcopy(row))
        return updated

    async def delete(self, table, filters):
        kept, removed = [], []
        for row in self.rows(table):
            (removed if _matches(row, filters) else kept).append(row)
        self.tables[table] = kept
        return removed

    async def upsert(self, table, data, on_conflict=None):
        if on_conflict:
            for row in self.rows(table):
                if row.get(on_conflict) == data.get(on_conflict):
                    row.update(copy.deepcopy(data))
                    return [copy.deepcopy(row)]
        self.rows(table).append(copy.deepcopy(data))
        return [copy.deepcopy(data)]


@pytest.fixture
def memory_client():
    return MemoryClient()


@pytest.fixture
def article_repo(memory_client):
    return ArticleRepository(memory_client)


@pytest.fixture
def registry(memory_client):
    return CategoryRegistry(memory_client)


@pytest.fixture
def profiles(memory_client):
    return ProfilesRepository(memory_client)


@pytest.fixture
def engine(article_repo):
    return WorkflowEngine(article_repo)


@pytest.fixture
def visibility(article_repo):
    return VisibilityFilter(article_repo)


@pytest.fixture
def storage():
    mock = AsyncMock()
    mock.upload_image.return_value = "https://cdn.example.com/images/cover.jpg"
    return mock


@pytest.fixture
def article_editor(article_repo, registry, storage):
    return ArticleEditor(article_repo, registry, storage)


@pytest.fixture
def reporter():
    return Actor(id="reporter-a", display_name="Ana", role=Role.REPORTER)


@pytest.fixture
def other_reporter():
    return Actor(id="reporter-b", display_name="Bruno", role=Role.REPORTER)


@pytest.fixture
def editor():
    return Actor(id="editor-1", display_name="Elena", role=Role.EDITOR)


@pytest.fixture
def roleless():
    return Actor(id="nobody", display_name="no-profile@example.com", role=None)


@pytest.fixture
def draft():
    return {"title": "A", "subtitle": "B", "body": "C", "category": "Tech"}
