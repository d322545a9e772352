"""Shared fixtures: in-memory Mongo stand-in and stub OpenAI clients."""
from __future__ import annotations

import copy
from types import SimpleNamespace

import pytest
from bson import ObjectId

from schemas import Autobiography, PersonalInfo
from store import RecordStore


class FakeCursor:
    def __init__(self, docs: list[dict]):
        self._docs = docs

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._docs.sort(key=lambda d: d.get(key), reverse=direction < 0)
        return self

    def limit(self, n: int) -> "FakeCursor":
        self._docs = self._docs[:n]
        return self

    def __iter__(self):
        return iter(self._docs)


class FakeCollection:
    def __init__(self):
        self.docs: list[dict] = []

    @staticmethod
    def _matches(doc: dict, filter_dict: dict) -> bool:
        return all(doc.get(k) == v for k, v in filter_dict.items())

    def insert_one(self, doc: dict):
        doc = copy.deepcopy(doc)
        doc.setdefault("_id", ObjectId())
        self.docs.append(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    def find_one(self, filter_dict: dict):
        for doc in self.docs:
            if self._matches(doc, filter_dict):
                return copy.deepcopy(doc)
        return None

    def find(self, filter_dict: dict | None = None) -> FakeCursor:
        return FakeCursor([copy.deepcopy(d) for d in self.docs if self._matches(d, filter_dict or {})])

    def replace_one(self, filter_dict: dict, replacement: dict):
        for i, doc in enumerate(self.docs):
            if self._matches(doc, filter_dict):
                new_doc = copy.deepcopy(replacement)
                new_doc["_id"] = doc["_id"]
                self.docs[i] = new_doc
                return SimpleNamespace(matched_count=1)
        return SimpleNamespace(matched_count=0)


class FakeDatabase:
    def __init__(self):
        self._collections: dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        return self._collections.setdefault(name, FakeCollection())

    def list_collection_names(self) -> list[str]:
        return list(self._collections)


class StubCompletions:
    """Records every call and answers with a fixed content or error."""

    def __init__(self, content: str | None = "Hello story", error: Exception | None = None, choices=None):
        self.content = content
        self.error = error
        self.choices = choices
        self.calls: list[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if self.choices is not None:
            return SimpleNamespace(choices=self.choices)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_openai_stub(**kwargs) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=StubCompletions(**kwargs)))


class CountingClient:
    """NarrativeClient double that counts generate() calls."""

    enabled = True

    def __init__(self, text: str = "Hello story"):
        self.text = text
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.text


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def store(fake_db) -> RecordStore:
    return RecordStore(fake_db)


@pytest.fixture
def jane() -> Autobiography:
    return Autobiography(user_id="user-1", personal_info=PersonalInfo(full_name="Jane Doe"))
